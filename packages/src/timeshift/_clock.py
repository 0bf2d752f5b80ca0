"""Clock port, system adapter and the overridable clock source.

Everything in a host program that should honour fake time reads the
current instant through a :class:`ClockSource` — either an injected
instance or the process default behind :func:`now`.  A clock source
keeps an explicit stack of override functions; the top of the stack is
the active one, and an empty stack falls back to the real wall clock.

Overrides nest in strict LIFO order::

    with clock.install(lambda: FROZEN):
        with clock.install(other):
            ...  # clock.now() reflects ``other``
        ...      # clock.now() reflects FROZEN again
    ...          # real time

Every instant returned by :meth:`ClockSource.now` is normalised to the
source's configured zone, so callers never see a mix of offsets.
"""

from __future__ import annotations

import asyncio
import contextvars
import logging
import threading
import weakref
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from datetime import UTC, datetime, tzinfo
from types import TracebackType
from typing import Protocol, Self, runtime_checkable
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from timeshift._errors import ClockOrderError

logger = logging.getLogger(__name__)

NowFunc = Callable[[], datetime]
"""Signature of every clock function: no arguments, returns an instant."""


def resolve_zone(name: str) -> tzinfo:
    """Turn a zone name into a :class:`~datetime.tzinfo`.

    ``"UTC"`` maps to :data:`datetime.UTC` so that no tz database is
    needed for the default; anything else goes through
    :class:`zoneinfo.ZoneInfo`.

    Raises:
        ValueError: If the zone name is unknown.
    """
    if name.upper() == "UTC":
        return UTC
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        msg = f"Unknown time zone: {name!r}"
        raise ValueError(msg) from exc


@runtime_checkable
class ClockPort(Protocol):
    """Wall clock returning timezone-aware instants.

    The default implementation is :class:`SystemClock`; a
    :class:`ClockSource` satisfies the same protocol, so components can
    depend on ``ClockPort`` and receive either.
    """

    def now(self) -> datetime:
        """Return the current instant."""
        ...


class SystemClock:
    """Production clock wrapping ``datetime.now()``.

    Satisfies :class:`ClockPort` via structural subtyping (PEP 544).

    Args:
        zone: Zone the returned instants are expressed in.
    """

    def __init__(self, zone: tzinfo = UTC) -> None:
        self._zone = zone

    def now(self) -> datetime:
        """Return the real wall-clock instant."""
        return datetime.now(self._zone)


class ClockOverride:
    """One installed override on a :class:`ClockSource`.

    Returned by :meth:`ClockSource.install`.  Calling the object (or
    :meth:`restore`) removes the override again; using it as a context
    manager does the same on block exit, whatever the exit path.
    """

    def __init__(self, source: ClockSource, func: NowFunc) -> None:
        self._source = source
        self.func = func
        self._restored = False

    @property
    def restored(self) -> bool:
        """Whether this override has already been removed."""
        return self._restored

    def restore(self) -> None:
        """Remove this override, re-activating the previous function.

        Raises:
            ClockOrderError: If a later override is still installed.
        """
        self._source._restore(self)

    __call__ = restore

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.restore()


class ClockSource:
    """Overridable source of "the current time".

    Args:
        zone: The fixed zone every :meth:`now` result is converted to.
        real_now: Function used when no override is installed.
            Defaults to :meth:`SystemClock.now`.
    """

    def __init__(self, zone: tzinfo = UTC, real_now: NowFunc | None = None) -> None:
        self._zone = zone
        self._real_now: NowFunc = real_now or SystemClock(UTC).now
        self._stack: list[ClockOverride] = []
        self._lock = threading.Lock()
        self._task_locks: weakref.WeakKeyDictionary[
            asyncio.AbstractEventLoop, asyncio.Lock
        ] = weakref.WeakKeyDictionary()
        self._holding: contextvars.ContextVar[bool] = contextvars.ContextVar(
            f"timeshift_clock_holding_{id(self)}", default=False
        )

    @property
    def zone(self) -> tzinfo:
        """The configured zone."""
        return self._zone

    @property
    def depth(self) -> int:
        """Number of overrides currently installed."""
        with self._lock:
            return len(self._stack)

    def current(self) -> NowFunc:
        """Return the active function (top override or the real clock)."""
        with self._lock:
            if self._stack:
                return self._stack[-1].func
            return self._real_now

    def now(self) -> datetime:
        """Return the active function's instant in the configured zone.

        A naive result from a custom override is taken to be in the
        configured zone already.
        """
        value = self.current()()
        if value.tzinfo is None:
            return value.replace(tzinfo=self._zone)
        return value.astimezone(self._zone)

    def now_without_zone(self) -> datetime:
        """Return the active function's instant as-is."""
        return self.current()()

    def install(self, func: NowFunc) -> ClockOverride:
        """Make *func* the active clock function until restored."""
        entry = ClockOverride(self, func)
        with self._lock:
            self._stack.append(entry)
            depth = len(self._stack)
        logger.debug("Clock override installed (depth=%d)", depth)
        return entry

    def install_time(self, instant: datetime) -> ClockOverride:
        """Freeze the clock at *instant* until restored."""
        return self.install(lambda: instant)

    @asynccontextmanager
    async def exclusive(self) -> AsyncIterator[None]:
        """Hold this clock for one task across its ``await`` points.

        Tasks on the same event loop enter one at a time, so overrides
        installed inside the block are restored before another task can
        install its own.  Re-entering from within the block (or from a
        task it spawned) does not wait.
        """
        if self._holding.get():
            yield
            return

        loop = asyncio.get_running_loop()
        with self._lock:
            gate = self._task_locks.get(loop)
            if gate is None:
                gate = self._task_locks[loop] = asyncio.Lock()

        async with gate:
            token = self._holding.set(True)
            try:
                yield
            finally:
                self._holding.reset(token)

    def _restore(self, entry: ClockOverride) -> None:
        with self._lock:
            if entry._restored:
                return
            if not self._stack or self._stack[-1] is not entry:
                msg = (
                    "Clock overrides must be restored in reverse install "
                    f"order ({len(self._stack)} installed)"
                )
                raise ClockOrderError(msg)
            self._stack.pop()
            entry._restored = True
            depth = len(self._stack)
        logger.debug("Clock override restored (depth=%d)", depth)


default_clock = ClockSource()
"""Process-wide clock source used by :func:`now` and :func:`install`."""


def now() -> datetime:
    """Return the current instant from :data:`default_clock`."""
    return default_clock.now()


def now_without_zone() -> datetime:
    """Return :data:`default_clock`'s instant without zone conversion."""
    return default_clock.now_without_zone()


def install(func: NowFunc) -> ClockOverride:
    """Install *func* on :data:`default_clock`."""
    return default_clock.install(func)
