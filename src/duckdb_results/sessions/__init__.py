"""Result sessions, query history and source links."""

from duckdb_results.sessions.history import QueryHistory
from duckdb_results.sessions.manager import ResultSessionManager
from duckdb_results.sessions.sources import FileSourceReader, SourceReader

__all__ = ["FileSourceReader", "QueryHistory", "ResultSessionManager", "SourceReader"]
