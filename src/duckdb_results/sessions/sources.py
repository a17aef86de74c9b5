"""Editable query sources that result sessions can link back to."""

import logging
from pathlib import Path
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class SourceReader(Protocol):
    """Reads the current text of a query source by id."""

    def read(self, source_id: str) -> str | None:
        """Return the source text, or None if the source no longer exists."""
        ...


class FileSourceReader:
    """Treats source ids as paths to SQL files on disk."""

    def __init__(self, base_dir: Path | None = None):
        """Resolve relative source ids against base_dir (default: cwd)."""
        self.base_dir = base_dir

    def resolve(self, source_id: str) -> Path:
        path = Path(source_id).expanduser()
        if self.base_dir is not None and not path.is_absolute():
            path = self.base_dir / path
        return path

    def read(self, source_id: str) -> str | None:
        path = self.resolve(source_id)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError:
            logger.warning("Could not read query source %s", path, exc_info=True)
            return None
