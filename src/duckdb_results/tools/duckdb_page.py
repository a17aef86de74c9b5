"""Page navigation MCP tools for paginated result views."""

from typing import Annotated

from fastmcp import FastMCP
from fastmcp.server.context import Context
from pydantic import Field

from duckdb_results.errors import ResultSessionError
from duckdb_results.sessions.manager import ResultSessionManager
from duckdb_results.tools.formatters import format_session_view

ViewId = Annotated[str, Field(description="Paginated result view")]


async def run_navigate(manager: ResultSessionManager, view_id: str, delta: int) -> str:
    try:
        session = await manager.navigate_page(view_id, delta)
    except ResultSessionError as e:
        return f"Error: {e}"
    return format_session_view(session, manager.render(session.id))


async def run_goto(manager: ResultSessionManager, view_id: str, page: int) -> str:
    try:
        session = await manager.goto_page(view_id, page)
    except ResultSessionError as e:
        return f"Error: {e}"
    return format_session_view(session, manager.render(session.id))


def register_duckdb_page(mcp: FastMCP) -> None:
    """Register the page navigation tools with the MCP server."""

    @mcp.tool()
    async def duckdb_next_page(view_id: ViewId, ctx: Context | None = None) -> str:
        """Show the next page of a paginated result."""
        if ctx is None:
            raise RuntimeError("Context not injected")
        return await run_navigate(ctx.lifespan_context["manager"], view_id, 1)

    @mcp.tool()
    async def duckdb_prev_page(view_id: ViewId, ctx: Context | None = None) -> str:
        """Show the previous page of a paginated result."""
        if ctx is None:
            raise RuntimeError("Context not injected")
        return await run_navigate(ctx.lifespan_context["manager"], view_id, -1)

    @mcp.tool()
    async def duckdb_goto_page(
        view_id: ViewId,
        page: Annotated[int, Field(description="1-based page number")],
        ctx: Context | None = None,
    ) -> str:
        """Jump to a specific page of a paginated result."""
        if ctx is None:
            raise RuntimeError("Context not injected")
        return await run_goto(ctx.lifespan_context["manager"], view_id, page)
