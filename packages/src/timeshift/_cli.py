"""Command-line interface for managing the faketime file (Typer-based).

Provides :func:`build_cli`, a Typer app with framework-level options
(``--version``, ``--log-level``, ``--log-format``, ``--env-file``,
``--file``, ``--json``) and three commands:

- ``set DIRECTIVE`` — validate a directive and write it to the file.
- ``clear`` — delete the file (real time again).
- ``show`` — print the current directive and the resulting ``now()``.

Directives starting with ``-`` must follow ``--``::

    timeshift set -- "-30m x2"
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from importlib.metadata import PackageNotFoundError, version
from typing import Annotated, NoReturn, get_args

import typer
from pydantic import ValidationError

from timeshift._errors import InvalidSpecError, TimeshiftError, build_error_payload
from timeshift._file import FakeTimeFile
from timeshift._logging import configure_logging
from timeshift._provider import FileProvider
from timeshift._settings import LoggingSettings, Settings
from timeshift._spec import parse_spec

logger = logging.getLogger(__name__)

SERVICE_NAME = "timeshift"

# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------

EXIT_OK = 0
EXIT_CONFIG_ERROR = 1
EXIT_RUNTIME_ERROR = 3
EXIT_INVALID_SPEC = 4

# ---------------------------------------------------------------------------
# Allowed values (extracted from LoggingSettings Literal types)
# ---------------------------------------------------------------------------

_VALID_LOG_LEVELS: tuple[str, ...] = get_args(
    LoggingSettings.model_fields["level"].annotation,
)
_VALID_LOG_FORMATS: tuple[str, ...] = get_args(
    LoggingSettings.model_fields["format"].annotation,
)


def _package_version() -> str:
    try:
        return version("timeshift")
    except PackageNotFoundError:
        return "0.0.0+unknown"


@dataclass
class _State:
    """Per-invocation state shared from the callback to the commands."""

    settings: Settings
    json_output: bool


def _fail(state: _State, exc: Exception, code: int) -> NoReturn:
    logger.error("%s", exc)
    if state.json_output:
        typer.echo(build_error_payload(exc).to_json())
    else:
        typer.echo(f"Error: {exc}", err=True)
    raise typer.Exit(code)


def build_cli() -> typer.Typer:
    """Construct the ``timeshift`` Typer app.

    Returns:
        A configured :class:`typer.Typer` ready to invoke.
    """
    cli = typer.Typer(
        help="Manage the fake-time directive read by timeshift.FileProvider.",
        no_args_is_help=True,
    )

    # -- global options -----------------------------------------------------

    @cli.callback(invoke_without_command=True)
    def main(
        ctx: typer.Context,
        version_flag: Annotated[
            bool | None,
            typer.Option(
                "--version",
                is_eager=True,
                help="Show version and exit.",
            ),
        ] = None,
        log_level: Annotated[
            str | None,
            typer.Option("--log-level", help="Override log level."),
        ] = None,
        log_format: Annotated[
            str | None,
            typer.Option("--log-format", help="Override log format."),
        ] = None,
        env_file: Annotated[
            str,
            typer.Option("--env-file", help="Path to .env file."),
        ] = ".env",
        file: Annotated[
            str | None,
            typer.Option("--file", help="Override the faketime file path."),
        ] = None,
        json_output: Annotated[
            bool,
            typer.Option("--json", help="Print errors as JSON payloads."),
        ] = False,
    ) -> None:
        if version_flag:
            typer.echo(f"{SERVICE_NAME} v{_package_version()}")
            raise typer.Exit()

        if ctx.invoked_subcommand is None:
            typer.echo(ctx.get_help())
            raise typer.Exit()

        if log_level is not None and log_level.upper() not in _VALID_LOG_LEVELS:
            raise typer.BadParameter(
                f"Invalid log level '{log_level}'. "
                f"Choose from: {', '.join(_VALID_LOG_LEVELS)}",
                param_hint="'--log-level'",
            )

        if log_format is not None and log_format.lower() not in _VALID_LOG_FORMATS:
            raise typer.BadParameter(
                f"Invalid log format '{log_format}'. "
                f"Choose from: {', '.join(_VALID_LOG_FORMATS)}",
                param_hint="'--log-format'",
            )

        try:
            settings = Settings(_env_file=env_file)  # type: ignore[call-arg]
        except ValidationError as exc:
            logger.error("Configuration error: %s", exc)
            typer.echo(f"Configuration error: {exc}", err=True)
            raise typer.Exit(EXIT_CONFIG_ERROR) from exc

        if log_level is not None:
            settings.logging = settings.logging.model_copy(
                update={"level": log_level.upper()},
            )
        if log_format is not None:
            settings.logging = settings.logging.model_copy(
                update={"format": log_format.lower()},
            )
        if file is not None:
            settings.faketime = settings.faketime.model_copy(update={"file": file})

        configure_logging(
            settings.logging,
            service=SERVICE_NAME,
            version=_package_version(),
        )
        ctx.obj = _State(settings=settings, json_output=json_output)

    # -- commands -----------------------------------------------------------

    @cli.command("set")
    def set_command(
        ctx: typer.Context,
        directive: Annotated[
            str,
            typer.Argument(help="Fake-time directive, e.g. '2024-01-02 15:04:05 x2'."),
        ],
    ) -> None:
        """Validate DIRECTIVE and write it to the faketime file."""
        state: _State = ctx.obj
        settings = state.settings
        target = FakeTimeFile(settings.faketime.file, settings.clock.layout)
        try:
            target.save_directive(directive)
        except InvalidSpecError as exc:
            _fail(state, exc, EXIT_INVALID_SPEC)
        except TimeshiftError as exc:
            _fail(state, exc, EXIT_RUNTIME_ERROR)
        typer.echo(f"Fake time set: {directive.strip()}")

    @cli.command("clear")
    def clear_command(ctx: typer.Context) -> None:
        """Delete the faketime file so real time applies again."""
        state: _State = ctx.obj
        target = FakeTimeFile(state.settings.faketime.file)
        try:
            target.delete()
        except TimeshiftError as exc:
            _fail(state, exc, EXIT_RUNTIME_ERROR)
        typer.echo("Fake time cleared")

    @cli.command("show")
    def show_command(ctx: typer.Context) -> None:
        """Print the current directive and the time it produces."""
        state: _State = ctx.obj
        settings = state.settings
        clock = settings.build_clock()
        provider = FileProvider(settings.faketime.file)
        try:
            # One read, so the directive and the time printed always agree.
            raw = provider.get()
            if raw:
                spec = parse_spec(
                    raw, settings.clock.layout, clock.now(), zone=clock.zone
                )
                current = spec.run(clock.now, clock=clock)
            else:
                current = clock.now()
        except InvalidSpecError as exc:
            _fail(state, exc, EXIT_INVALID_SPEC)
        except TimeshiftError as exc:
            _fail(state, exc, EXIT_RUNTIME_ERROR)
        typer.echo(f"directive: {raw or '(none)'}")
        typer.echo(f"now: {current.isoformat()}")

    return cli


def main() -> None:
    """Console-script entry point."""
    build_cli()()
