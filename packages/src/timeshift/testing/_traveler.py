"""Manually steppable frozen clock for interactive test scenarios."""

from __future__ import annotations

from datetime import datetime
from types import TracebackType
from typing import Self

from timeshift._clock import ClockSource, default_clock


class Traveler:
    """Freeze a :class:`ClockSource` and move it only on request.

    Construction captures the clock's current instant and installs an
    override returning it.  From then on the clock changes only through
    :meth:`set`, until :meth:`teardown` removes the override.

    Example::

        with Traveler() as tv:
            start = timeshift.now()
            tv.set(start + timedelta(hours=2))
            assert timeshift.now() == start + timedelta(hours=2)

    Args:
        clock: Clock source to freeze (default: the process clock).
    """

    def __init__(self, clock: ClockSource | None = None) -> None:
        self._clock = clock if clock is not None else default_clock
        self._held = self._clock.now()
        self._override = self._clock.install(self.now)

    @property
    def clock(self) -> ClockSource:
        return self._clock

    def now(self) -> datetime:
        """Return the held instant."""
        return self._held

    def set(self, instant: datetime) -> None:
        """Make the clock report *instant* from now on."""
        self._held = instant

    def teardown(self) -> None:
        """Remove the override.  Further calls do nothing."""
        self._override.restore()

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.teardown()
