"""Query execution against the duckdb CLI."""

from duckdb_results.db.executor import DuckDBCliExecutor, QueryExecutor

__all__ = ["DuckDBCliExecutor", "QueryExecutor"]
