"""Query executors: run SQL text and return decoded rows."""

import asyncio
import json
import logging
import tempfile
import uuid
from pathlib import Path
from typing import Protocol, runtime_checkable

from duckdb_results.config import get_db_path, get_duckdb_binary
from duckdb_results.errors import ExecutionError
from duckdb_results.models.session import Row

logger = logging.getLogger(__name__)


@runtime_checkable
class QueryExecutor(Protocol):
    """Protocol for anything that can run SQL and return rows."""

    async def execute(self, sql: str) -> list[Row]:
        """Run SQL and return its rows. Raises ExecutionError on failure."""
        ...


class DuckDBCliExecutor:
    """Runs SQL through the duckdb CLI in JSON output mode.

    The query is piped on stdin so no shell quoting is involved. A non-zero
    exit status or undecodable output raises ExecutionError carrying the
    engine's raw text.
    """

    def __init__(self, db_path: Path | None = None, binary: str | None = None) -> None:
        """Initialize with an optional database file and duckdb executable."""
        self._fixed_path = db_path if db_path is not None else get_db_path()
        self._db_path = self._fixed_path
        self._binary = binary or get_duckdb_binary()

    @property
    def db_path(self) -> Path:
        """Database file, created lazily under the temp dir when not configured."""
        if self._db_path is None:
            name = f"duckdb-results-{uuid.uuid4().hex}.duckdb"
            self._db_path = Path(tempfile.gettempdir()) / name
            logger.info("Using temporary database at %s", self._db_path)
        return self._db_path

    async def execute(self, sql: str) -> list[Row]:
        """Run SQL and return the decoded JSON rows."""
        logger.debug("Executing: %s", sql)
        try:
            proc = await asyncio.create_subprocess_exec(
                self._binary,
                str(self.db_path),
                "-json",
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise ExecutionError(f"Failed to start {self._binary}: {e}") from e

        stdout, stderr = await proc.communicate(sql.encode())
        output = stdout.decode(errors="replace")

        if proc.returncode != 0:
            diagnostic = stderr.decode(errors="replace").strip() or output.strip()
            logger.warning("duckdb exited with status %s", proc.returncode)
            raise ExecutionError(diagnostic or f"duckdb exited with status {proc.returncode}")

        return decode_rows(output)

    def reset(self) -> None:
        """Delete the database file; the next query starts from an empty database."""
        if self._db_path is not None and self._db_path.exists():
            self._db_path.unlink()
            logger.info("Removed database %s", self._db_path)
        self._db_path = self._fixed_path


def decode_rows(output: str) -> list[Row]:
    """Decode duckdb -json output.

    Statements without a result set print nothing; multiple statements
    print one array each, of which the last is returned.
    """
    text = output.strip()
    if not text or text == "[]":
        return []

    try:
        decoded = json.loads(text)
    except json.JSONDecodeError:
        decoded = _decode_last_array(text)

    if not isinstance(decoded, list) or not all(isinstance(row, dict) for row in decoded):
        raise ExecutionError(f"Failed to parse result: {output}")
    return decoded


def _decode_last_array(text: str) -> object:
    decoder = json.JSONDecoder()
    pos = 0
    last: object = None
    while pos < len(text):
        try:
            last, end = decoder.raw_decode(text, pos)
        except json.JSONDecodeError:
            raise ExecutionError(f"Failed to parse result: {text}") from None
        pos = end
        while pos < len(text) and text[pos].isspace():
            pos += 1
    return last
