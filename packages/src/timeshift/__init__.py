"""timeshift.

Redirect "the current time" for tests and time-shifted request handling,
frozen or flowing at a scaled rate, without touching call sites.
"""

from importlib.metadata import PackageNotFoundError, version

from timeshift._clock import (
    ClockOverride,
    ClockPort,
    ClockSource,
    NowFunc,
    SystemClock,
    default_clock,
    install,
    now,
    now_without_zone,
    resolve_zone,
)
from timeshift._errors import (
    ClockOrderError,
    ErrorPayload,
    InvalidSpecError,
    ProviderError,
    TimeshiftError,
    build_error_payload,
)
from timeshift._file import FakeTimeFile
from timeshift._logging import JsonFormatter, configure_logging
from timeshift._provider import FakeTimeProvider, FileProvider
from timeshift._runner import Runner
from timeshift._settings import (
    ClockSettings,
    FakeTimeSettings,
    LoggingSettings,
    Settings,
)
from timeshift._spec import (
    DATE_ONLY,
    DATETIME,
    RFC3339,
    TIME_ONLY,
    FakeTimeSpec,
    build_clock_func,
    parse_duration,
    parse_spec,
)

try:
    __version__ = version("timeshift")
except PackageNotFoundError:
    # Editable installs without metadata
    __version__ = "0.0.0+unknown"

__all__ = [
    # Version
    "__version__",
    # Clock
    "ClockOverride",
    "ClockPort",
    "ClockSource",
    "NowFunc",
    "SystemClock",
    "default_clock",
    "install",
    "now",
    "now_without_zone",
    "resolve_zone",
    # Directives
    "DATETIME",
    "DATE_ONLY",
    "RFC3339",
    "TIME_ONLY",
    "FakeTimeSpec",
    "build_clock_func",
    "parse_duration",
    "parse_spec",
    # Providers
    "FakeTimeFile",
    "FakeTimeProvider",
    "FileProvider",
    "Runner",
    # Errors
    "ClockOrderError",
    "ErrorPayload",
    "InvalidSpecError",
    "ProviderError",
    "TimeshiftError",
    "build_error_payload",
    # Logging
    "JsonFormatter",
    "configure_logging",
    # Settings
    "ClockSettings",
    "FakeTimeSettings",
    "LoggingSettings",
    "Settings",
]
