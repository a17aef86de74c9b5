"""Render result rows as display lines.

Table and CSV output order columns by sorted name (taken from the first
row); JSONL keeps each row's own field order.
"""

import json
from collections.abc import Callable, Sequence

from duckdb_results.errors import InvalidFormatError
from duckdb_results.models.session import OutputFormat, Pagination, Row, Session

NO_RESULTS = "-- No results --"

_CSV_SPECIAL = (",", '"', "\n")


def _scalar_text(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, dict)):
        return json.dumps(value, ensure_ascii=False)
    return str(value)


def _cell_text(value: object) -> str:
    """Table cell text; missing and null values both show as NULL."""
    if value is None:
        return "NULL"
    return _scalar_text(value)


def sorted_columns(rows: Sequence[Row]) -> list[str]:
    """Column names of the first row, sorted."""
    if not rows:
        return []
    return sorted(rows[0])


def _separator(columns: list[str], widths: dict[str, int], left: str, mid: str, right: str) -> str:
    return left + mid.join("─" * (widths[col] + 2) for col in columns) + right


def format_table(rows: Sequence[Row]) -> list[str]:
    """Box-drawn table with a trailing row count."""
    if not rows:
        return [NO_RESULTS]

    columns = sorted_columns(rows)
    cells = [[_cell_text(row.get(col)) for col in columns] for row in rows]

    widths = {col: len(col) for col in columns}
    for values in cells:
        for col, text in zip(columns, values, strict=True):
            widths[col] = max(widths[col], len(text))

    def line(values: list[str]) -> str:
        padded = (f" {text.ljust(widths[col])} " for col, text in zip(columns, values, strict=True))
        return "│" + "│".join(padded) + "│"

    lines = [_separator(columns, widths, "┌", "┬", "┐"), line(columns)]
    lines.append(_separator(columns, widths, "├", "┼", "┤"))
    lines.extend(line(values) for values in cells)
    lines.append(_separator(columns, widths, "└", "┴", "┘"))

    count = len(rows)
    lines.append("")
    lines.append(f"-- {count} row{'' if count == 1 else 's'} --")
    return lines


def _csv_field(value: object) -> str:
    if value is None:
        return ""
    text = _scalar_text(value)
    if any(ch in text for ch in _CSV_SPECIAL):
        return '"' + text.replace('"', '""') + '"'
    return text


def format_csv(rows: Sequence[Row]) -> list[str]:
    """Header line plus one comma-separated line per row."""
    if not rows:
        return [NO_RESULTS]

    columns = sorted_columns(rows)
    lines = [",".join(columns)]
    for row in rows:
        lines.append(",".join(_csv_field(row.get(col)) for col in columns))
    return lines


def format_jsonl(rows: Sequence[Row]) -> list[str]:
    """One JSON object per row, fields in their original order."""
    if not rows:
        return [NO_RESULTS]
    return [json.dumps(row, ensure_ascii=False, separators=(",", ":")) for row in rows]


_FORMATTERS: dict[OutputFormat, Callable[[Sequence[Row]], list[str]]] = {
    OutputFormat.TABLE: format_table,
    OutputFormat.CSV: format_csv,
    OutputFormat.JSONL: format_jsonl,
}


def parse_format(fmt: str | OutputFormat) -> OutputFormat:
    """Validate a format token."""
    try:
        return OutputFormat(fmt)
    except ValueError:
        raise InvalidFormatError(str(fmt)) from None


def format_rows(rows: Sequence[Row], fmt: str | OutputFormat) -> list[str]:
    """Render rows in the given format."""
    return _FORMATTERS[parse_format(fmt)](rows)


def format_page_footer(pagination: Pagination) -> str:
    """Format: -- Page 2/3 (rows 3-4 of 5) --."""
    return (
        f"-- Page {pagination.current_page}/{max(pagination.total_pages, 1)} "
        f"(rows {pagination.first_row}-{pagination.last_row} of {pagination.total_count}) --"
    )


def render_session(session: Session) -> list[str]:
    """Project a session onto display lines, adding the page footer when paginated."""
    lines = format_rows(session.rows, session.format)
    if session.pagination is not None:
        lines.append("")
        lines.append(format_page_footer(session.pagination))
    return lines
