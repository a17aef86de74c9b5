"""Cached schema introspection for the main database schema."""

import logging
import time
from collections.abc import Callable

from duckdb_results.config import DEFAULT_CACHE_TTL
from duckdb_results.db.executor import QueryExecutor
from duckdb_results.db.queries import SCHEMA_QUERY
from duckdb_results.errors import ExecutionError
from duckdb_results.models.schema import ColumnInfo

logger = logging.getLogger(__name__)


class SchemaCache:
    """Tables and their columns, refetched once older than ttl seconds.

    A failed fetch keeps whatever was cached before.
    """

    def __init__(
        self,
        executor: QueryExecutor,
        ttl: float = DEFAULT_CACHE_TTL,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.executor = executor
        self.ttl = ttl
        self._clock = clock
        self._tables: dict[str, list[ColumnInfo]] = {}
        self._fetched_at: float | None = None

    def is_stale(self) -> bool:
        if self._fetched_at is None or not self._tables:
            return True
        return self._clock() - self._fetched_at > self.ttl

    async def get_tables(self) -> dict[str, list[ColumnInfo]]:
        """Columns grouped by table, in ordinal order."""
        if self.is_stale():
            await self._fetch()
        return self._tables

    async def refresh(self) -> dict[str, list[ColumnInfo]]:
        self.invalidate()
        return await self.get_tables()

    def invalidate(self) -> None:
        self._fetched_at = None

    async def _fetch(self) -> None:
        try:
            rows = await self.executor.execute(SCHEMA_QUERY)
        except ExecutionError:
            logger.warning("Schema fetch failed, keeping cached schema", exc_info=True)
            return

        tables: dict[str, list[ColumnInfo]] = {}
        for row in rows:
            column = ColumnInfo(
                table_name=str(row["table_name"]),
                column_name=str(row["column_name"]),
                data_type=str(row["data_type"]),
            )
            tables.setdefault(column.table_name, []).append(column)
        self._tables = tables
        self._fetched_at = self._clock()
        logger.debug("Schema cache loaded %d table(s)", len(tables))
