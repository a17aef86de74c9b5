"""MCP tools for the database itself: schema, file load/export and reset."""

import logging
from pathlib import Path
from typing import Annotated

from fastmcp import FastMCP
from fastmcp.server.context import Context
from pydantic import Field

from duckdb_results.db.executor import DuckDBCliExecutor, QueryExecutor
from duckdb_results.db.queries import (
    default_table_name,
    describe_query,
    export_table_query,
    load_file_query,
)
from duckdb_results.errors import ResultSessionError
from duckdb_results.formatting.formatter import format_table
from duckdb_results.schema.cache import SchemaCache
from duckdb_results.tools.formatters import format_schema

logger = logging.getLogger(__name__)


async def run_schema(
    executor: QueryExecutor, cache: SchemaCache, table: str | None = None, refresh: bool = False
) -> str:
    """Describe one table, or list every table from the schema cache."""
    if table:
        try:
            rows = await executor.execute(describe_query(table))
        except ResultSessionError as e:
            return f"Error: {e}"
        return "\n".join(format_table(rows))

    tables = await (cache.refresh() if refresh else cache.get_tables())
    return format_schema(tables)


async def run_load(
    executor: QueryExecutor, cache: SchemaCache, path: str, table: str | None = None
) -> str:
    file_path = Path(path).expanduser()
    table_name = table or default_table_name(file_path)
    try:
        await executor.execute(load_file_query(file_path, table_name))
    except ResultSessionError as e:
        return f"Error: {e}"
    cache.invalidate()
    logger.info("Loaded %s into %s", file_path, table_name)
    return f'Loaded {path} into table "{table_name}"'


async def run_export(executor: QueryExecutor, table: str, path: str) -> str:
    try:
        await executor.execute(export_table_query(table, Path(path).expanduser()))
    except ResultSessionError as e:
        return f"Error: {e}"
    return f'Exported table "{table}" to {path}'


def run_reset(executor: DuckDBCliExecutor, cache: SchemaCache) -> str:
    executor.reset()
    cache.invalidate()
    return "DuckDB database reset."


def register_duckdb_data(mcp: FastMCP) -> None:
    """Register the database tools with the MCP server."""

    @mcp.tool()
    async def duckdb_schema(
        table: Annotated[
            str | None, Field(description="Table to describe. Omit to list all tables.")
        ] = None,
        refresh: Annotated[
            bool, Field(description="Bypass the schema cache when listing tables")
        ] = False,
        ctx: Context | None = None,
    ) -> str:
        """Show the database schema: every table's columns, or DESCRIBE one table."""
        if ctx is None:
            raise RuntimeError("Context not injected")
        lifespan = ctx.lifespan_context
        return await run_schema(lifespan["executor"], lifespan["schema_cache"], table, refresh)

    @mcp.tool()
    async def duckdb_load(
        path: Annotated[str, Field(description="csv, parquet, json or jsonl file to load")],
        table: Annotated[
            str | None,
            Field(description="Table name (default: file name with non-word characters as _)"),
        ] = None,
        ctx: Context | None = None,
    ) -> str:
        """Load a data file into a table, replacing any table of the same name."""
        if ctx is None:
            raise RuntimeError("Context not injected")
        lifespan = ctx.lifespan_context
        return await run_load(lifespan["executor"], lifespan["schema_cache"], path, table)

    @mcp.tool()
    async def duckdb_export(
        table: Annotated[str, Field(description="Table to export")],
        path: Annotated[
            str, Field(description="Destination file; extension picks csv, parquet, json or jsonl")
        ],
        ctx: Context | None = None,
    ) -> str:
        """Export a table to a file."""
        if ctx is None:
            raise RuntimeError("Context not injected")
        return await run_export(ctx.lifespan_context["executor"], table, path)

    @mcp.tool()
    async def duckdb_reset(ctx: Context | None = None) -> str:
        """Delete the database file and start over with an empty database."""
        if ctx is None:
            raise RuntimeError("Context not injected")
        lifespan = ctx.lifespan_context
        return run_reset(lifespan["executor"], lifespan["schema_cache"])
