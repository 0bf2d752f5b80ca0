"""Pytest configuration and shared fixtures."""

from collections.abc import Iterator

import pytest

# The timeshift testing plugin is registered via a ``pytest11`` entry
# point (pyproject.toml) for external consumers.  In our own test
# suite we disable it (``-p no:timeshift``) and load explicitly here
# instead, so the timeshift import chain is measured by coverage.
pytest_plugins = ["timeshift.testing._plugin"]


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, no external dependencies)"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests (may require external services)"
    )


@pytest.fixture(autouse=True)
def _default_clock_left_clean() -> Iterator[None]:
    """Fail any test that leaves an override on the process clock."""
    from timeshift import default_clock

    yield
    assert default_clock.depth == 0, "test leaked a clock override"
