"""Text responses for the MCP tools."""

from duckdb_results.models.schema import ColumnInfo
from duckdb_results.models.session import Session

_PREVIEW_WIDTH = 80


def query_preview(query: str, width: int = _PREVIEW_WIDTH) -> str:
    """Single-line preview, truncated with '...'."""
    flat = query.replace("\n", " ")
    if len(flat) > width:
        return flat[:width] + "..."
    return flat


def format_session_header(session: Session) -> str:
    """Format: [results-1] table | 5 row(s) | source: report.sql."""
    parts = [f"[{session.id}] {session.format.value}", f"{len(session.rows)} row(s)"]
    if session.pagination is not None:
        p = session.pagination
        parts.append(f"page {p.current_page}/{max(p.total_pages, 1)}")
    if session.source_link:
        parts.append(f"source: {session.source_link}")
    return " | ".join(parts)


def format_session_view(session: Session, lines: list[str], note: str | None = None) -> str:
    """Header, optional note, then the rendered result lines."""
    out = [format_session_header(session)]
    if note:
        out.append(note)
    out.append("")
    out.extend(lines)
    return "\n".join(out)


def format_session_list(sessions: list[Session]) -> str:
    if not sessions:
        return "No open result sessions."
    lines = [f"{len(sessions)} session(s)"]
    for session in sessions:
        lines.append(format_session_header(session))
        lines.append(f"  {query_preview(session.query)}")
    return "\n".join(lines)


def format_history(entries: list[str]) -> str:
    """Most recent first, numbered by position in the history."""
    if not entries:
        return "No query history available."
    lines = ["Query history (most recent first):"]
    for index in range(len(entries), 0, -1):
        lines.append(f"{index:2d}. {query_preview(entries[index - 1])}")
    return "\n".join(lines)


def format_schema(tables: dict[str, list[ColumnInfo]]) -> str:
    if not tables:
        return "No tables in the database."
    lines: list[str] = []
    for table_name in sorted(tables):
        lines.append(table_name)
        lines.extend(f"  {c.column_name} {c.data_type}" for c in tables[table_name])
    return "\n".join(lines)
