"""Pytest plugin providing shared fake-time fixtures.

Auto-registers ``clock_source``, ``traveler`` and ``faketime_file``
for any test suite that depends on timeshift, via the ``pytest11``
entry point.

Imports of timeshift modules happen inside the fixtures so that the
package is first imported while coverage is already tracing.
"""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from timeshift._clock import ClockSource
    from timeshift.testing._traveler import Traveler


@pytest.fixture
def clock_source() -> ClockSource:
    """Fresh UTC ClockSource backed by the real wall clock."""
    from timeshift._clock import ClockSource

    return ClockSource()


@pytest.fixture
def traveler() -> Iterator[Traveler]:
    """Traveler freezing the process clock for the duration of a test."""
    from timeshift.testing._traveler import Traveler

    tv = Traveler()
    yield tv
    tv.teardown()


@pytest.fixture
def faketime_file(tmp_path: Path) -> Path:
    """Path of a not-yet-existing faketime file in a temp directory."""
    return tmp_path / "faketime"
