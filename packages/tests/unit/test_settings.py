"""Unit tests for timeshift._settings — configuration models.

Test Techniques Used:
    - Specification-based Testing: Default values and field constraints
    - Environment Override: monkeypatch for env var injection
    - Validation Error: pydantic constraint violations
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest
from pydantic import ValidationError

from timeshift._settings import (
    ClockSettings,
    FakeTimeSettings,
    LoggingSettings,
    Settings,
)
from timeshift._spec import DATETIME
from timeshift.testing import make_settings


class TestClockSettings:
    """Clock sub-model.

    Technique: Specification-based Testing.
    """

    def test_defaults(self) -> None:
        s = ClockSettings()
        assert s.timezone == "UTC"
        assert s.layout == DATETIME

    def test_accepts_iana_zone(self) -> None:
        assert ClockSettings(timezone="Asia/Tokyo").timezone == "Asia/Tokyo"

    def test_rejects_unknown_zone(self) -> None:
        with pytest.raises(ValidationError, match="Unknown time zone"):
            ClockSettings(timezone="Mars/Olympus")


class TestFakeTimeSettings:
    def test_default_file(self) -> None:
        assert FakeTimeSettings().file == ".faketime"


class TestLoggingSettings:
    """Logging sub-model.

    Technique: Boundary Value Analysis.
    """

    def test_defaults(self) -> None:
        s = LoggingSettings()
        assert s.level == "INFO"
        assert s.format == "json"
        assert s.file is None
        assert s.max_file_size_mb == 10
        assert s.backup_count == 3

    def test_rejects_unknown_level(self) -> None:
        with pytest.raises(ValidationError):
            LoggingSettings(level="TRACE")  # type: ignore[arg-type]

    def test_rejects_zero_file_size(self) -> None:
        with pytest.raises(ValidationError):
            LoggingSettings(max_file_size_mb=0)


class TestSettingsFromEnvironment:
    """Root settings loaded from env vars and .env files.

    Technique: Environment Override.
    """

    def test_nested_env_vars(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TIMESHIFT_CLOCK__TIMEZONE", "Asia/Tokyo")
        monkeypatch.setenv("TIMESHIFT_FAKETIME__FILE", "/tmp/ft")
        monkeypatch.setenv("TIMESHIFT_LOGGING__LEVEL", "DEBUG")

        s = Settings(_env_file=None)  # type: ignore[call-arg]

        assert s.clock.timezone == "Asia/Tokyo"
        assert s.faketime.file == "/tmp/ft"
        assert s.logging.level == "DEBUG"

    def test_unprefixed_vars_ignored(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CLOCK__TIMEZONE", "Asia/Tokyo")
        s = Settings(_env_file=None)  # type: ignore[call-arg]
        assert s.clock.timezone == "UTC"

    def test_env_file(self, tmp_path: Path) -> None:
        env_file = tmp_path / ".env"
        env_file.write_text("TIMESHIFT_LOGGING__FORMAT=text\n")

        s = Settings(_env_file=env_file)  # type: ignore[call-arg]

        assert s.logging.format == "text"


class TestBuildClock:
    """Settings.build_clock()."""

    def test_clock_uses_configured_zone(self) -> None:
        s = make_settings(clock=ClockSettings(timezone="Asia/Tokyo"))
        clock = s.build_clock()
        assert clock.now().utcoffset() == timedelta(hours=9)

    def test_default_is_utc(self) -> None:
        clock = make_settings().build_clock()
        assert clock.zone is UTC
        assert abs(clock.now() - datetime.now(UTC)) < timedelta(seconds=5)


class TestMakeSettings:
    """The isolated test factory.

    Technique: Environment Override — ambient env must be ignored.
    """

    def test_ignores_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TIMESHIFT_CLOCK__TIMEZONE", "Asia/Tokyo")
        assert make_settings().clock.timezone == "UTC"

    def test_overrides(self) -> None:
        s = make_settings(faketime=FakeTimeSettings(file="/x"))
        assert s.faketime.file == "/x"
