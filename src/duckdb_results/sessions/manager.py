"""Result session manager: owns every result view and its state transitions."""

import asyncio
import logging

from duckdb_results.config import DEFAULT_PAGE_SIZE
from duckdb_results.db.executor import QueryExecutor
from duckdb_results.db.queries import count_query, page_query
from duckdb_results.errors import (
    EmptySourceError,
    NotPaginatedError,
    OutOfRangeError,
    SessionNotFoundError,
)
from duckdb_results.formatting.formatter import parse_format, render_session
from duckdb_results.models.session import OutputFormat, Pagination, Row, Session
from duckdb_results.sessions.history import QueryHistory
from duckdb_results.sessions.sources import SourceReader

logger = logging.getLogger(__name__)


def _require_query(query: str, message: str = "No SQL query to execute") -> None:
    if not query or not query.strip():
        raise EmptySourceError(message)


class ResultSessionManager:
    """Tracks live query results bound to host-supplied view ids.

    Every operation runs its executor calls first and commits the new
    session state only once they all succeed, so a failed call leaves the
    previous view intact. A single lock serializes whole operations.

    Source links are kept as two one-directional maps (source -> view and
    view -> source) updated only through _link/_unlink_view.
    """

    def __init__(
        self,
        executor: QueryExecutor,
        *,
        sources: SourceReader | None = None,
        history: QueryHistory | None = None,
        default_format: OutputFormat | str = OutputFormat.TABLE,
        default_page_size: int = DEFAULT_PAGE_SIZE,
    ):
        """Initialize with an executor and optional source reader and history."""
        self.executor = executor
        self.sources = sources
        self.history = history if history is not None else QueryHistory()
        self.default_format = parse_format(default_format)
        self.default_page_size = default_page_size
        self._sessions: dict[str, Session] = {}
        self._source_to_view: dict[str, str] = {}
        self._view_to_source: dict[str, str] = {}
        self._lock = asyncio.Lock()

    # --- Lookups ---

    def get(self, view_id: str) -> Session:
        session = self._sessions.get(view_id)
        if session is None:
            raise SessionNotFoundError(view_id)
        return session

    def list_sessions(self) -> list[Session]:
        return list(self._sessions.values())

    def view_for_source(self, source_id: str) -> str | None:
        return self._source_to_view.get(source_id)

    def render(self, view_id: str) -> list[str]:
        """Display lines for a session."""
        return render_session(self.get(view_id))

    # --- Execution ---

    async def execute(self, query: str, view_id: str, source_id: str | None = None) -> Session:
        """Run a query into a view.

        If source_id is already linked to a live session, that session is
        reused (keeping its id and format) instead of binding view_id.
        """
        _require_query(query)
        async with self._lock:
            rows = await self.executor.execute(query)

            existing = self._live_session_for_source(source_id)
            if existing is not None:
                session = existing.model_copy(
                    update={"query": query, "rows": rows, "pagination": None}
                )
                self._sessions[session.id] = session
            else:
                session = Session(
                    id=view_id,
                    query=query,
                    rows=rows,
                    format=self.default_format,
                    source_link=source_id,
                )
                self._bind(session)

            self.history.add(query)
            return session

    async def execute_paginated(
        self, query: str, view_id: str, page_size: int | None = None
    ) -> Session:
        """Count the query's rows, then fetch page 1 into a paginated view."""
        _require_query(query)
        size = page_size if page_size is not None else self.default_page_size
        if size < 1:
            raise ValueError("page_size must be a positive integer")

        async with self._lock:
            total_count = await self._count(query)
            rows = await self.executor.execute(page_query(query, size, 1))

            session = Session(
                id=view_id,
                query=query,
                rows=rows,
                format=self.default_format,
                pagination=Pagination(page_size=size, current_page=1, total_count=total_count),
            )
            self._bind(session)
            self.history.add(query)
            return session

    async def rerun_history(self, index: int, view_id: str) -> Session:
        """Execute the 1-based history entry into a view."""
        return await self.execute(self.history.get(index), view_id)

    # --- Pagination ---

    async def navigate_page(self, view_id: str, delta: int) -> Session:
        """Move relative to the current page."""
        async with self._lock:
            session, pagination = self._get_paginated(view_id)
            return await self._fetch_page(session, pagination, pagination.current_page + delta)

    async def goto_page(self, view_id: str, page: int) -> Session:
        """Jump to an absolute page."""
        async with self._lock:
            session, pagination = self._get_paginated(view_id)
            return await self._fetch_page(session, pagination, page)

    async def _fetch_page(self, session: Session, pagination: Pagination, page: int) -> Session:
        if page < 1 or page > pagination.total_pages:
            raise OutOfRangeError(page, pagination.total_pages)

        rows = await self.executor.execute(page_query(session.query, pagination.page_size, page))
        return self._commit(
            session,
            rows=rows,
            pagination=pagination.model_copy(update={"current_page": page}),
        )

    # --- Refresh and edit ---

    async def refresh(self, view_id: str) -> Session:
        """Re-run the session's query, re-reading a linked source first.

        A source that can no longer be read is detached and the stored
        query is used. Paginated sessions re-fetch the current page without
        recounting.
        """
        async with self._lock:
            session = self.get(view_id)
            query = session.query
            dead_source = None
            if session.source_link is not None and self.sources is not None:
                text = self.sources.read(session.source_link)
                if text is None:
                    dead_source = session.source_link
                else:
                    _require_query(text, f"Query source {session.source_link} is empty")
                    query = text
            _require_query(query)

            pagination = session.pagination
            if pagination is not None:
                rows = await self.executor.execute(
                    page_query(query, pagination.page_size, pagination.current_page)
                )
            else:
                rows = await self.executor.execute(query)

            if dead_source is not None:
                logger.info("Source %s is gone, detaching it from %s", dead_source, view_id)
                self._unlink_view(view_id)
                return self._commit(session, query=query, rows=rows, source_link=None)
            return self._commit(session, query=query, rows=rows)

    async def edit_query(self, view_id: str, new_query: str) -> Session:
        """Replace the session's query and re-run it.

        Blank or unchanged text is a no-op. A paginated session is recounted
        and stays on its current page, clamped to the new last page.
        """
        async with self._lock:
            session = self.get(view_id)
            if not new_query.strip() or new_query == session.query:
                return session

            pagination = session.pagination
            if pagination is None:
                rows = await self.executor.execute(new_query)
                return self._commit(session, query=new_query, rows=rows)

            total_count = await self._count(new_query)
            recounted = pagination.model_copy(update={"total_count": total_count})
            page = min(pagination.current_page, max(1, recounted.total_pages))
            rows = await self.executor.execute(page_query(new_query, pagination.page_size, page))
            return self._commit(
                session,
                query=new_query,
                rows=rows,
                pagination=recounted.model_copy(update={"current_page": page}),
            )

    # --- Presentation ---

    async def set_format(self, view_id: str, fmt: OutputFormat | str) -> Session:
        """Re-render existing rows in another format, without re-executing."""
        output_format = parse_format(fmt)
        async with self._lock:
            return self._commit(self.get(view_id), format=output_format)

    async def toggle_format(self, view_id: str) -> Session:
        """Cycle table -> csv -> jsonl -> table."""
        async with self._lock:
            session = self.get(view_id)
            return self._commit(session, format=session.format.next())

    # --- Teardown ---

    async def teardown(self, view_id: str) -> bool:
        """Forget a view and its source link. Returns False if it was unknown."""
        async with self._lock:
            session = self._sessions.pop(view_id, None)
            self._unlink_view(view_id)
            if session is not None:
                logger.info("Closed result session %s", view_id)
            return session is not None

    async def detach_source(self, source_id: str) -> None:
        """Drop the link from a source that no longer exists; its session stays open."""
        async with self._lock:
            self._detach(source_id)

    def clear_history(self) -> None:
        self.history.clear()

    # --- Internals ---

    async def _count(self, query: str) -> int:
        rows: list[Row] = await self.executor.execute(count_query(query))
        if rows and rows[0].get("count") is not None:
            return int(rows[0]["count"])
        return 0

    def _get_paginated(self, view_id: str) -> tuple[Session, Pagination]:
        session = self.get(view_id)
        if session.pagination is None:
            raise NotPaginatedError(view_id)
        return session, session.pagination


    def _live_session_for_source(self, source_id: str | None) -> Session | None:
        if source_id is None:
            return None
        view_id = self._source_to_view.get(source_id)
        if view_id is None:
            return None
        session = self._sessions.get(view_id)
        if session is None:
            self._source_to_view.pop(source_id, None)
            self._view_to_source.pop(view_id, None)
        return session

    def _commit(self, session: Session, **changes: object) -> Session:
        updated = session.model_copy(update=changes)
        self._sessions[session.id] = updated
        return updated

    def _bind(self, session: Session) -> None:
        """Store a new session, replacing whatever the view held before."""
        replaced = session.id in self._sessions
        self._unlink_view(session.id)
        self._sessions[session.id] = session
        if session.source_link is not None:
            self._link(session.source_link, session.id)
        if not replaced:
            logger.info("Opened result session %s", session.id)

    def _link(self, source_id: str, view_id: str) -> None:
        previous_view = self._source_to_view.pop(source_id, None)
        if previous_view is not None:
            self._view_to_source.pop(previous_view, None)
            previous = self._sessions.get(previous_view)
            if previous is not None:
                self._sessions[previous_view] = previous.model_copy(update={"source_link": None})
        self._source_to_view[source_id] = view_id
        self._view_to_source[view_id] = source_id

    def _unlink_view(self, view_id: str) -> None:
        source_id = self._view_to_source.pop(view_id, None)
        if source_id is not None and self._source_to_view.get(source_id) == view_id:
            del self._source_to_view[source_id]

    def _detach(self, source_id: str) -> None:
        view_id = self._source_to_view.pop(source_id, None)
        if view_id is None:
            return
        self._view_to_source.pop(view_id, None)
        session = self._sessions.get(view_id)
        if session is not None:
            self._sessions[view_id] = session.model_copy(update={"source_link": None})
