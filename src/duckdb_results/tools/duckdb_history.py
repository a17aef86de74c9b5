"""duckdb_history MCP tool: show, clear or re-run past queries."""

from typing import Annotated, Literal

from fastmcp import FastMCP
from fastmcp.server.context import Context
from pydantic import Field

from duckdb_results.errors import ResultSessionError
from duckdb_results.sessions.manager import ResultSessionManager
from duckdb_results.tools.formatters import format_history, format_session_view


async def run_history(
    manager: ResultSessionManager,
    action: str = "show",
    index: int | None = None,
    view_id: str | None = None,
) -> str:
    if action == "clear":
        manager.clear_history()
        return "Query history cleared."

    if action == "rerun":
        if index is None or not view_id:
            return "Error: index and view_id are required to re-run a history entry."
        try:
            session = await manager.rerun_history(index, view_id)
        except (IndexError, ResultSessionError) as e:
            return f"Error: {e}"
        return format_session_view(session, manager.render(session.id))

    return format_history(manager.history.entries())


def register_duckdb_history(mcp: FastMCP) -> None:
    """Register the duckdb_history tool with the MCP server."""

    @mcp.tool()
    async def duckdb_history(
        action: Annotated[
            Literal["show", "clear", "rerun"],
            Field(description="show the history, clear it, or rerun one entry"),
        ] = "show",
        index: Annotated[
            int | None, Field(description="History entry number to rerun", ge=1)
        ] = None,
        view_id: Annotated[
            str | None, Field(description="View to show a rerun result in")
        ] = None,
        ctx: Context | None = None,
    ) -> str:
        """Work with the history of executed queries.

        The history is deduplicated (re-running a query moves it to the top)
        and bounded by the configured capacity. It is not kept across restarts.
        """
        if ctx is None:
            raise RuntimeError("Context not injected")
        return await run_history(ctx.lifespan_context["manager"], action, index, view_id)
