"""SQL text builders for the duckdb CLI.

User queries are never parsed: counting and paging wrap the query as a
subquery so that CTEs and ORDER BY stay valid.
"""

import re
from pathlib import Path

from duckdb_results.errors import UnsupportedFileTypeError

SCHEMA_QUERY = (
    "SELECT table_name, column_name, data_type "
    "FROM information_schema.columns "
    "WHERE table_schema = 'main' "
    "ORDER BY table_name, ordinal_position"
)

# A semicolon with nothing after it but more terminators and line comments.
_TRAILING_SEMICOLON = re.compile(r";(?=(?:[\s;]|--[^\n]*(?:\n|\Z))*\Z)")

_READERS = {
    "csv": "read_csv_auto",
    "parquet": "read_parquet",
    "json": "read_json_auto",
    "jsonl": "read_json_auto",
}

_EXPORT_OPTIONS = {
    "csv": "HEADER, DELIMITER ','",
    "parquet": "FORMAT PARQUET",
    "json": "FORMAT JSON, ARRAY true",
    "jsonl": "FORMAT JSON",
}


def strip_terminator(query: str) -> str:
    """Drop trailing semicolons, including ones before a trailing comment."""
    return _TRAILING_SEMICOLON.sub("", query).rstrip()


def count_query(query: str) -> str:
    # The query sits on its own lines so a trailing line comment cannot
    # swallow the closing parenthesis.
    return f"SELECT COUNT(*) AS count FROM (\n{strip_terminator(query)}\n)"


def page_query(query: str, page_size: int, page: int) -> str:
    """Window of `page_size` rows starting at 1-based `page`."""
    offset = (page - 1) * page_size
    return f"SELECT * FROM (\n{strip_terminator(query)}\n) LIMIT {page_size} OFFSET {offset}"


def describe_query(table_name: str) -> str:
    return f"DESCRIBE {table_name}"


def _quote_literal(text: str) -> str:
    return "'" + text.replace("'", "''") + "'"


def _extension(path: Path) -> str:
    return path.suffix.lstrip(".").lower()


def default_table_name(path: Path) -> str:
    """Table name derived from the file stem, e.g. sales-2024.csv -> sales_2024."""
    return re.sub(r"\W", "_", path.stem)


def load_file_query(path: Path, table_name: str) -> str:
    """CREATE OR REPLACE TABLE from a csv, parquet, json or jsonl file."""
    ext = _extension(path)
    reader = _READERS.get(ext)
    if reader is None:
        raise UnsupportedFileTypeError(ext, "load")
    return (
        f"CREATE OR REPLACE TABLE {table_name} AS "
        f"SELECT * FROM {reader}({_quote_literal(str(path))})"
    )


def export_table_query(table_name: str, path: Path) -> str:
    """COPY a table to a csv, parquet, json or jsonl file."""
    ext = _extension(path)
    options = _EXPORT_OPTIONS.get(ext)
    if options is None:
        raise UnsupportedFileTypeError(ext, "export")
    return f"COPY {table_name} TO {_quote_literal(str(path))} ({options})"
