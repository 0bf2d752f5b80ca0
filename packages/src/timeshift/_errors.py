"""Error taxonomy and structured error payloads.

Three failure classes can surface from a fake-time run:

- :class:`ProviderError` — the directive source is unavailable or
  unreadable.  Raised before any parsing or override attempt.
- :class:`InvalidSpecError` — the directive is present but does not
  match the grammar (bad duration, bad timestamp, bad rate).
- Body errors — whatever the wrapped callable raises, passed through
  unchanged after the override has been restored.

Neither of the first two ever leaves a partial override behind.  The
collaborator (CLI, HTTP handler, test) decides how to surface them;
:func:`build_error_payload` turns any of them into a JSON-ready value
object for machine-readable output.

Payload schema::

    {
        "error_type": "invalid_spec",
        "message": "Human-readable error description",
        "timestamp": "2026-02-14T12:34:56+00:00",
        "details": {"raw": "2024-01-02 x0"}
    }
"""

from __future__ import annotations

import json
from collections.abc import Callable
from dataclasses import asdict, dataclass, field
from datetime import UTC, datetime


class TimeshiftError(Exception):
    """Base class for all timeshift errors."""


class ProviderError(TimeshiftError):
    """The fake-time directive source could not be read."""


class InvalidSpecError(TimeshiftError, ValueError):
    """A fake-time directive failed to parse.

    Attributes:
        raw: The offending directive string, as received.
    """

    def __init__(self, message: str, *, raw: str = "") -> None:
        super().__init__(message)
        self.raw = raw


class ClockOrderError(TimeshiftError, RuntimeError):
    """A clock override was restored out of LIFO order."""


ERROR_TYPES: dict[type[Exception], str] = {
    ProviderError: "provider_error",
    InvalidSpecError: "invalid_spec",
    ClockOrderError: "clock_order",
}


# ---------------------------------------------------------------------------
# Value objects
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ErrorPayload:
    """Immutable structured error payload."""

    error_type: str
    message: str
    timestamp: str
    details: dict[str, object] = field(default_factory=dict)

    def to_json(self) -> str:
        """Serialise to a JSON string."""
        return json.dumps(asdict(self))


def build_error_payload(
    error: Exception,
    *,
    details: dict[str, object] | None = None,
    clock: Callable[[], datetime] | None = None,
) -> ErrorPayload:
    """Convert an exception into a structured :class:`ErrorPayload`.

    Looks up the exact class of the exception in :data:`ERROR_TYPES`;
    unmapped classes fall back to ``"error"``.  For
    :class:`InvalidSpecError` the offending directive is added to
    ``details`` under ``"raw"``.

    Args:
        error: The exception to convert.
        details: Optional extra context to attach.
        clock: Optional callable returning a :class:`~datetime.datetime`.
            Defaults to ``datetime.now(UTC)``.

    Returns:
        A frozen dataclass ready for serialisation.
    """
    error_type = ERROR_TYPES.get(type(error), "error")
    merged: dict[str, object] = dict(details or {})
    if isinstance(error, InvalidSpecError) and error.raw:
        merged.setdefault("raw", error.raw)
    now = clock() if clock is not None else datetime.now(UTC)
    return ErrorPayload(
        error_type=error_type,
        message=str(error),
        timestamp=now.isoformat(),
        details=merged,
    )
