"""Bounded, deduplicated query history."""

from duckdb_results.config import DEFAULT_MAX_HISTORY


class QueryHistory:
    """Past queries, most recent last.

    Re-submitting a query moves it to the end instead of duplicating it;
    the oldest entries are dropped once max_size is exceeded.
    """

    def __init__(self, max_size: int = DEFAULT_MAX_HISTORY):
        if max_size < 1:
            raise ValueError("max_size must be at least 1")
        self.max_size = max_size
        self._queries: list[str] = []

    def add(self, query: str) -> None:
        if query in self._queries:
            self._queries.remove(query)
        self._queries.append(query)
        del self._queries[: -self.max_size]

    def entries(self) -> list[str]:
        """Copy of the history, oldest first."""
        return list(self._queries)

    def get(self, index: int) -> str:
        """Entry by 1-based position, oldest first."""
        if index < 1 or index > len(self._queries):
            raise IndexError(f"History entry {index} does not exist")
        return self._queries[index - 1]

    def clear(self) -> None:
        self._queries.clear()

    def __len__(self) -> int:
        return len(self._queries)
