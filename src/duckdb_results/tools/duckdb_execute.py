"""duckdb_execute and duckdb_paginate MCP tools: run a query into a result view."""

import logging
from typing import Annotated

from fastmcp import FastMCP
from fastmcp.server.context import Context
from pydantic import Field

from duckdb_results.errors import ResultSessionError
from duckdb_results.sessions.manager import ResultSessionManager
from duckdb_results.tools.formatters import format_session_view

logger = logging.getLogger(__name__)

ViewId = Annotated[str, Field(description="Result view to show the output in, e.g. 'results-1'")]


def resolve_query(manager: ResultSessionManager, query: str | None, source: str | None) -> str:
    """Explicit query text wins; otherwise read the whole source file."""
    if query and query.strip():
        return query
    if source and manager.sources is not None:
        return manager.sources.read(source) or ""
    return ""


async def run_execute(
    manager: ResultSessionManager,
    query: str | None,
    view_id: str,
    source: str | None = None,
) -> str:
    """Execute and render, reporting domain errors as text."""
    try:
        session = await manager.execute(resolve_query(manager, query, source), view_id, source)
    except ResultSessionError as e:
        return f"Error: {e}"
    return format_session_view(session, manager.render(session.id))


async def run_paginate(
    manager: ResultSessionManager, query: str, view_id: str, page_size: int | None = None
) -> str:
    try:
        session = await manager.execute_paginated(query, view_id, page_size)
    except ResultSessionError as e:
        return f"Error: {e}"
    return format_session_view(session, manager.render(session.id))


def register_duckdb_execute(mcp: FastMCP) -> None:
    """Register the execution tools with the MCP server."""

    @mcp.tool()
    async def duckdb_execute(
        view_id: ViewId,
        query: Annotated[
            str | None, Field(description="SQL to run. Omit to run the whole source file.")
        ] = None,
        source: Annotated[
            str | None,
            Field(
                description=(
                    "Path to the .sql file this query comes from. Links the view to the "
                    "file so duckdb_refresh re-reads it; re-running the same source "
                    "reuses its existing view."
                )
            ),
        ] = None,
        ctx: Context | None = None,
    ) -> str:
        """Execute SQL in DuckDB and show the result in a view.

        Results render as a box-drawn table by default; use duckdb_format to
        switch to csv or jsonl. Every executed query is added to the history.
        For large results use duckdb_paginate instead.
        """
        if ctx is None:
            raise RuntimeError("Context not injected")
        manager: ResultSessionManager = ctx.lifespan_context["manager"]
        return await run_execute(manager, query, view_id, source)

    @mcp.tool()
    async def duckdb_paginate(
        view_id: ViewId,
        query: Annotated[str, Field(description="SQL to run page by page")],
        page_size: Annotated[
            int | None,
            Field(description="Rows per page (default from configuration)", ge=1),
        ] = None,
        ctx: Context | None = None,
    ) -> str:
        """Execute SQL with pagination and show the first page.

        The query is counted first, then each page is fetched by re-running
        it with LIMIT/OFFSET. Navigate with duckdb_next_page,
        duckdb_prev_page and duckdb_goto_page.
        """
        if ctx is None:
            raise RuntimeError("Context not injected")
        manager: ResultSessionManager = ctx.lifespan_context["manager"]
        return await run_paginate(manager, query, view_id, page_size)
