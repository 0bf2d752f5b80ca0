"""Configuration via pydantic-settings.

Configuration is loaded from environment variables and/or ``.env``
files.  All variables carry the ``TIMESHIFT_`` prefix and nested models
use ``__`` as the delimiter, e.g. ``TIMESHIFT_CLOCK__TIMEZONE=Asia/Tokyo``.

The schema covers three concerns:

* **Clock** — the fixed zone instants are normalised to, and the
  timestamp layout of absolute directives.
* **Faketime** — where the directive file lives.
* **Logging** — level, format, optional file sink, rotation.
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from timeshift._clock import ClockSource, resolve_zone
from timeshift._spec import DATETIME

# -------------------------------------------------------------------
# Sub-models (BaseModel, nested into Settings)
# -------------------------------------------------------------------


class ClockSettings(BaseModel):
    """Clock zone and directive layout.

    Environment variables (with ``__`` nesting)::

        TIMESHIFT_CLOCK__TIMEZONE=Asia/Tokyo
        TIMESHIFT_CLOCK__LAYOUT=%Y-%m-%dT%H:%M:%S%z
    """

    timezone: str = Field(
        default="UTC",
        description=(
            "IANA zone name every instant returned by now() is "
            "converted to.  Also applied to absolute directives "
            "that carry no offset."
        ),
    )
    layout: str = Field(
        default=DATETIME,
        description="strptime/strftime format of absolute directives.",
    )

    @field_validator("timezone")
    @classmethod
    def _known_zone(cls, value: str) -> str:
        resolve_zone(value)
        return value


class FakeTimeSettings(BaseModel):
    """Location of the faketime directive file.

    Environment variables::

        TIMESHIFT_FAKETIME__FILE=/run/app/faketime
    """

    file: str = Field(
        default=".faketime",
        description="Path of the faketime file.  A missing file means real time.",
    )


class LoggingSettings(BaseModel):
    """Logging configuration.

    When ``file`` is set, logs are also written to a rotating file
    (size-based rotation, ``backup_count`` generations kept).  When
    ``None``, logs go to stderr only.

    The ``format`` field selects the output format:

    - ``"json"`` (default) — structured JSON lines for log aggregators.
    - ``"text"`` — human-readable timestamped lines for terminals.
    """

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Root log level.",
    )
    format: Literal["json", "text"] = Field(
        default="json",
        description="Log output format: 'json' or 'text'.",
    )
    file: str | None = Field(
        default=None,
        description="Optional log file path. ``None`` means stderr only.",
    )
    max_file_size_mb: Annotated[int, Field(ge=1)] = Field(
        default=10,
        description=(
            "Maximum log file size in megabytes before rotation. "
            "Only applies when ``file`` is set."
        ),
    )
    backup_count: Annotated[int, Field(ge=0)] = Field(
        default=3,
        description="Number of rotated log files to keep.",
    )


# -------------------------------------------------------------------
# Root settings
# -------------------------------------------------------------------


class Settings(BaseSettings):
    """Root timeshift settings.

    Example ``.env``::

        TIMESHIFT_CLOCK__TIMEZONE=Asia/Tokyo
        TIMESHIFT_FAKETIME__FILE=/tmp/faketime
        TIMESHIFT_LOGGING__LEVEL=DEBUG
        TIMESHIFT_LOGGING__FORMAT=text
    """

    model_config = SettingsConfigDict(
        env_prefix="TIMESHIFT_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    clock: ClockSettings = Field(
        default_factory=ClockSettings,
        description="Clock zone and layout.",
    )
    faketime: FakeTimeSettings = Field(
        default_factory=FakeTimeSettings,
        description="Faketime file settings.",
    )
    logging: LoggingSettings = Field(
        default_factory=LoggingSettings,
        description="Logging configuration.",
    )

    def build_clock(self) -> ClockSource:
        """Return a fresh :class:`ClockSource` in the configured zone."""
        return ClockSource(zone=resolve_zone(self.clock.timezone))
