"""Writer for the faketime file read by :class:`~timeshift.FileProvider`."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from pathlib import Path

from timeshift._errors import ProviderError
from timeshift._spec import DATETIME, parse_spec

logger = logging.getLogger(__name__)


class FakeTimeFile:
    """Create, overwrite and delete a faketime file.

    Args:
        path: Location of the faketime file.
        layout: ``strftime`` format used by :meth:`save`.  Must match the
            layout the reading side parses with.
    """

    def __init__(self, path: str | Path, layout: str = DATETIME) -> None:
        self._path = Path(path)
        self._layout = layout

    @property
    def path(self) -> Path:
        return self._path

    @property
    def layout(self) -> str:
        return self._layout

    def save(self, instant: datetime) -> None:
        """Write *instant* formatted with the layout (a frozen directive)."""
        self._write(instant.strftime(self._layout))

    def save_directive(self, raw: str) -> None:
        """Validate and write a raw directive such as ``"+1h x2"``.

        Raises:
            InvalidSpecError: If *raw* does not parse; nothing is written.
        """
        directive = raw.strip()
        parse_spec(directive, self._layout, datetime.now(UTC))
        self._write(directive)

    def delete(self) -> None:
        """Remove the file.  A missing file is not an error."""
        try:
            self._path.unlink(missing_ok=True)
        except OSError as exc:
            msg = f"failed to delete faketime file {self._path}: {exc}"
            raise ProviderError(msg) from exc
        logger.info("Faketime file %s removed", self._path)

    def _write(self, content: str) -> None:
        try:
            self._path.write_text(content, encoding="utf-8")
        except OSError as exc:
            msg = f"failed to write faketime file {self._path}: {exc}"
            raise ProviderError(msg) from exc
        logger.info("Faketime file %s set to %r", self._path, content)
