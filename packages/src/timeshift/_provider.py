"""Fake-time directive providers.

A provider answers one question: "is a fake time requested right now,
and if so, what is the directive?"  Three outcomes are distinguished:

- absent source → ``""`` (no override requested)
- unreadable or invalid source → :class:`~timeshift.ProviderError`
- present source → the whitespace-trimmed directive

Providers never fall back to real time on errors; that decision belongs
to the caller.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol, runtime_checkable

from timeshift._errors import ProviderError

logger = logging.getLogger(__name__)


@runtime_checkable
class FakeTimeProvider(Protocol):
    """Source of raw fake-time directives."""

    def get(self) -> str:
        """Return the trimmed directive, or ``""`` when none is set.

        Raises:
            ProviderError: If the source exists but cannot be read.
        """
        ...


class FileProvider:
    """Reads the directive from a file on every :meth:`get` call.

    A missing file means "no fake time".  A directory, a permission
    problem or undecodable content is an error.

    Args:
        path: Location of the faketime file.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        """The faketime file location."""
        return self._path

    def get(self) -> str:
        """Return the trimmed file contents (``""`` if the file is missing)."""
        try:
            if self._path.is_dir():
                msg = f"faketime path is a directory, not a file: {self._path}"
                raise ProviderError(msg)
            content = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.debug(
                "Faketime file %s does not exist, proceeding with real time",
                self._path,
            )
            return ""
        except (OSError, UnicodeDecodeError) as exc:
            msg = f"failed to read faketime file {self._path}: {exc}"
            raise ProviderError(msg) from exc
        return content.strip()
