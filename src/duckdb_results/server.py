"""FastMCP server with lifespan management and tool registration."""

import logging
import sys
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from fastmcp import FastMCP

from duckdb_results.config import (
    get_cache_ttl,
    get_default_format,
    get_default_page_size,
    get_log_level,
    get_max_history,
)
from duckdb_results.db.executor import DuckDBCliExecutor
from duckdb_results.schema.cache import SchemaCache
from duckdb_results.sessions.history import QueryHistory
from duckdb_results.sessions.manager import ResultSessionManager
from duckdb_results.sessions.sources import FileSourceReader
from duckdb_results.tools.duckdb_data import register_duckdb_data
from duckdb_results.tools.duckdb_execute import register_duckdb_execute
from duckdb_results.tools.duckdb_history import register_duckdb_history
from duckdb_results.tools.duckdb_page import register_duckdb_page
from duckdb_results.tools.duckdb_view import register_duckdb_view


def create_manager(executor: DuckDBCliExecutor) -> ResultSessionManager:
    """Build the session manager from configuration."""
    return ResultSessionManager(
        executor,
        sources=FileSourceReader(),
        history=QueryHistory(get_max_history()),
        default_format=get_default_format(),
        default_page_size=get_default_page_size(),
    )


@asynccontextmanager
async def lifespan(server: FastMCP) -> AsyncIterator[dict[str, Any]]:
    """Create the executor, session manager and schema cache."""
    # Configure logging to stderr (stdout is MCP stdio transport)
    logging.basicConfig(
        level=getattr(logging, get_log_level()),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
        stream=sys.stderr,
    )
    logger = logging.getLogger(__name__)

    executor = DuckDBCliExecutor()
    manager = create_manager(executor)
    schema_cache = SchemaCache(executor, ttl=get_cache_ttl())
    logger.info("DuckDB results server ready (database: %s)", executor.db_path)

    try:
        yield {
            "executor": executor,
            "manager": manager,
            "schema_cache": schema_cache,
        }
    finally:
        sessions = manager.list_sessions()
        for session in sessions:
            await manager.teardown(session.id)
        logger.info("Closed %d result session(s)", len(sessions))


_INSTRUCTIONS = """\
Run SQL against a local DuckDB database and keep the results as named views.

Each result lives in a view identified by a view_id you choose (e.g. \
"results-1"). Views keep their query, rows, display format and, for \
paginated queries, the current page.

- duckdb_execute: run SQL into a view. Pass source=<file.sql> to link the \
view to a SQL file; duckdb_refresh then re-reads the file.
- duckdb_paginate: run large queries page by page; move with \
duckdb_next_page, duckdb_prev_page and duckdb_goto_page.
- duckdb_format: switch a view between table, csv and jsonl.
- duckdb_edit_query: change a view's query in place.
- duckdb_sessions / duckdb_close: list and close views.
- duckdb_history: show, clear or re-run past queries.
- duckdb_load / duckdb_export / duckdb_schema / duckdb_reset: manage data.
"""


def create_server() -> FastMCP:
    """Create and configure the MCP server with all tools."""
    mcp = FastMCP(
        "duckdb-results",
        instructions=_INSTRUCTIONS,
        lifespan=lifespan,
    )

    register_duckdb_execute(mcp)
    register_duckdb_page(mcp)
    register_duckdb_view(mcp)
    register_duckdb_history(mcp)
    register_duckdb_data(mcp)

    return mcp
