"""Shared test fixtures."""

import re

import pytest
import pytest_asyncio

from duckdb_results.errors import ExecutionError
from duckdb_results.sessions.history import QueryHistory
from duckdb_results.sessions.manager import ResultSessionManager

_COUNT = re.compile(r"^SELECT COUNT\(\*\) AS count FROM \(\n(?P<query>.*)\n\)$", re.DOTALL)
_PAGE = re.compile(
    r"^SELECT \* FROM \(\n(?P<query>.*)\n\) LIMIT (?P<limit>\d+) OFFSET (?P<offset>\d+)$", re.DOTALL
)


class FakeExecutor:
    """In-memory executor answering plain, count and page queries.

    Each logical query maps to a list of rows in `tables`. Queries containing
    `fail_on` raise ExecutionError, as do unknown queries.
    """

    def __init__(self, tables: dict[str, list[dict]] | None = None):
        self.tables: dict[str, list[dict]] = dict(tables or {})
        self.calls: list[str] = []
        self.fail_on: str | None = None

    def _rows_for(self, query: str) -> list[dict]:
        if query not in self.tables:
            raise ExecutionError(f'Catalog Error: unknown query "{query}"')
        return self.tables[query]

    async def execute(self, sql: str) -> list[dict]:
        self.calls.append(sql)
        if self.fail_on is not None and self.fail_on in sql:
            raise ExecutionError(f"Parser Error: syntax error at or near {self.fail_on!r}")

        if m := _COUNT.match(sql):
            return [{"count": len(self._rows_for(m.group("query")))}]
        if m := _PAGE.match(sql):
            rows = self._rows_for(m.group("query"))
            offset = int(m.group("offset"))
            return rows[offset : offset + int(m.group("limit"))]
        return self._rows_for(sql)


class FakeSources:
    """Source reader backed by a dict; missing ids are dead sources."""

    def __init__(self):
        self.texts: dict[str, str] = {}

    def read(self, source_id: str) -> str | None:
        return self.texts.get(source_id)


FIVE_ROWS = [{"id": i, "name": f"row{i}"} for i in range(1, 6)]


@pytest.fixture
def executor():
    """Fake executor with a five-row `numbers` query."""
    return FakeExecutor({"SELECT * FROM numbers": FIVE_ROWS})


@pytest.fixture
def sources():
    return FakeSources()


@pytest_asyncio.fixture
async def manager(executor, sources):
    """Session manager over the fake executor and sources."""
    return ResultSessionManager(executor, sources=sources, history=QueryHistory(10))
