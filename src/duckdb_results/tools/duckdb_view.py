"""MCP tools acting on an existing result view: refresh, format, edit, list, close."""

import logging
from typing import Annotated, Literal

from fastmcp import FastMCP
from fastmcp.server.context import Context
from pydantic import Field

from duckdb_results.errors import ResultSessionError
from duckdb_results.sessions.manager import ResultSessionManager
from duckdb_results.tools.formatters import format_session_list, format_session_view

logger = logging.getLogger(__name__)

ViewId = Annotated[str, Field(description="Result view id")]


async def run_refresh(manager: ResultSessionManager, view_id: str) -> str:
    try:
        session = await manager.refresh(view_id)
    except ResultSessionError as e:
        return f"Error: {e}"
    return format_session_view(session, manager.render(view_id), note="Result refreshed")


async def run_format(manager: ResultSessionManager, view_id: str, fmt: str | None) -> str:
    """Set the format, or toggle to the next one when fmt is None."""
    try:
        if fmt is None:
            session = await manager.toggle_format(view_id)
        else:
            session = await manager.set_format(view_id, fmt)
    except ResultSessionError as e:
        return f"Error: {e}"
    return format_session_view(session, manager.render(view_id))


async def run_edit_query(manager: ResultSessionManager, view_id: str, new_query: str) -> str:
    try:
        previous_query = manager.get(view_id).query
        session = await manager.edit_query(view_id, new_query)
    except ResultSessionError as e:
        return f"Error: {e}"
    if session.query == previous_query:
        note = "Query unchanged"
    else:
        note = "Query updated and executed"
    return format_session_view(session, manager.render(view_id), note=note)


async def run_close(manager: ResultSessionManager, view_id: str) -> str:
    if await manager.teardown(view_id):
        return f"Closed result view {view_id}"
    return f"No result view {view_id} to close"


def register_duckdb_view(mcp: FastMCP) -> None:
    """Register the view tools with the MCP server."""

    @mcp.tool()
    async def duckdb_refresh(view_id: ViewId, ctx: Context | None = None) -> str:
        """Re-run a view's query.

        If the view is linked to a source file, the file's current text is
        re-read first. Paginated views re-fetch the page they are on.
        """
        if ctx is None:
            raise RuntimeError("Context not injected")
        return await run_refresh(ctx.lifespan_context["manager"], view_id)

    @mcp.tool()
    async def duckdb_format(
        view_id: ViewId,
        format: Annotated[
            Literal["table", "csv", "jsonl"] | None,
            Field(description="Output format. Omit to cycle table -> csv -> jsonl."),
        ] = None,
        ctx: Context | None = None,
    ) -> str:
        """Change how a view's rows are displayed, without re-running the query."""
        if ctx is None:
            raise RuntimeError("Context not injected")
        return await run_format(ctx.lifespan_context["manager"], view_id, format)

    @mcp.tool()
    async def duckdb_edit_query(
        view_id: ViewId,
        query: Annotated[str, Field(description="Replacement SQL for the view")],
        ctx: Context | None = None,
    ) -> str:
        """Replace a view's query and re-run it.

        Paginated views are recounted and stay on the same page when it still
        exists, otherwise they move to the new last page.
        """
        if ctx is None:
            raise RuntimeError("Context not injected")
        return await run_edit_query(ctx.lifespan_context["manager"], view_id, query)

    @mcp.tool()
    async def duckdb_sessions(ctx: Context | None = None) -> str:
        """List open result views."""
        if ctx is None:
            raise RuntimeError("Context not injected")
        manager: ResultSessionManager = ctx.lifespan_context["manager"]
        return format_session_list(manager.list_sessions())

    @mcp.tool()
    async def duckdb_close(view_id: ViewId, ctx: Context | None = None) -> str:
        """Close a result view and drop its link to any source file."""
        if ctx is None:
            raise RuntimeError("Context not injected")
        return await run_close(ctx.lifespan_context["manager"], view_id)
