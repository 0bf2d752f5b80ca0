"""Run a callable under the fake time requested by a provider.

:class:`Runner` ties the pieces together::

    provider.get() ─► parse_spec() ─► build_clock_func() ─► clock.install()
                                                              │
                                   body() ◄───────────────────┘
                                     │
                              override restored (always)

Failure ordering:

1. Provider errors propagate before anything else happens.
2. An empty directive runs the body against the untouched clock.
3. Parse errors propagate before any override is installed, and the
   body never runs.
4. Once installed, the override is removed on every exit path of the
   body; the body's result or exception is passed through unchanged.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from timeshift._clock import ClockSource, default_clock
from timeshift._provider import FakeTimeProvider
from timeshift._spec import DATETIME, FakeTimeSpec, build_clock_func, parse_spec

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Runner:
    """Apply provider-supplied fake time around a callable.

    Args:
        provider: Source of the raw directive.
        layout: ``strptime`` format for absolute timestamps.
        clock: Clock source to override (default: the process clock).
    """

    def __init__(
        self,
        provider: FakeTimeProvider,
        layout: str = DATETIME,
        *,
        clock: ClockSource | None = None,
    ) -> None:
        self._provider = provider
        self._layout = layout
        self._clock = clock if clock is not None else default_clock

    @property
    def provider(self) -> FakeTimeProvider:
        return self._provider

    @property
    def layout(self) -> str:
        return self._layout

    @property
    def clock(self) -> ClockSource:
        return self._clock

    def load(self) -> FakeTimeSpec | None:
        """Read and parse the current directive.

        Returns:
            The parsed spec, or ``None`` when the provider has no directive.

        Raises:
            ProviderError: If the provider cannot be read.
            InvalidSpecError: If the directive does not parse.
        """
        raw = self._provider.get()
        if not raw:
            return None
        spec = parse_spec(raw, self._layout, self._clock.now(), zone=self._clock.zone)
        logger.info(
            "Applying fake time %r (anchor=%s, rate=%s)",
            raw,
            spec.anchor.isoformat(),
            spec.rate,
        )
        return spec

    def start(self, body: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        """Call ``body(*args, **kwargs)`` under the requested fake time."""
        spec = self.load()
        if spec is None:
            return body(*args, **kwargs)

        with self._clock.install(build_clock_func(spec, self._clock.current())):
            return body(*args, **kwargs)

    async def astart(
        self,
        body: Callable[..., Awaitable[T]],
        *args: Any,
        **kwargs: Any,
    ) -> T:
        """Await ``body(*args, **kwargs)`` under the requested fake time.

        The override stays installed across every ``await`` inside
        *body*, so other tasks reading the same clock observe it too.
        Overlapping ``astart`` calls on one clock run one after another
        (see :meth:`ClockSource.exclusive`); each gets its own result.
        """
        async with self._clock.exclusive():
            spec = self.load()
            if spec is None:
                return await body(*args, **kwargs)

            with self._clock.install(build_clock_func(spec, self._clock.current())):
                return await body(*args, **kwargs)
