"""Quick check that the duckdb CLI is installed and can run a query."""

import asyncio
import shutil
import sys

from duckdb_results.config import get_duckdb_binary
from duckdb_results.db.executor import DuckDBCliExecutor
from duckdb_results.errors import ExecutionError


def main() -> None:
    """Check duckdb availability and JSON output mode."""
    binary = get_duckdb_binary()
    print(f"Checking duckdb CLI {binary}...")

    if shutil.which(binary) is None:
        print(f"  {binary} not found on PATH; install it from https://duckdb.org/docs/installation")
        sys.exit(1)

    executor = DuckDBCliExecutor()
    try:
        rows = asyncio.run(executor.execute("SELECT version() AS version"))
        print(f"  duckdb {rows[0]['version']} is available (database: {executor.db_path})")
    except ExecutionError as e:
        print(f"  Error: {e}")
        sys.exit(1)
    finally:
        executor.reset()


if __name__ == "__main__":
    main()
