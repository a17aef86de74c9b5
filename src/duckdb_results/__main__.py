"""Entry point for the duckdb-results MCP server."""

from duckdb_results.server import create_server


def main() -> None:
    """Run the duckdb-results MCP server."""
    server = create_server()
    server.run(transport="stdio")


if __name__ == "__main__":
    main()
