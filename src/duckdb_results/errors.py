"""Errors reported by the result session manager and its collaborators."""


class ResultSessionError(Exception):
    """Base class for recoverable, user-visible errors."""


class ExecutionError(ResultSessionError):
    """The query engine rejected the SQL or failed to run it."""

    def __init__(self, diagnostic: str):
        self.diagnostic = diagnostic
        super().__init__(diagnostic)


class OutOfRangeError(ResultSessionError):
    """Page navigation beyond the valid page range."""

    def __init__(self, page: int, total_pages: int):
        self.page = page
        self.total_pages = total_pages
        if total_pages < 1:
            message = f"Page {page} is out of range: result has no pages"
        else:
            message = f"Page {page} is out of range: must be between 1 and {total_pages}"
        super().__init__(message)


class InvalidFormatError(ResultSessionError):
    """Unsupported output format token."""

    def __init__(self, fmt: str):
        self.format = fmt
        super().__init__(f"Invalid format: {fmt!r} (expected table, csv or jsonl)")


class EmptySourceError(ResultSessionError):
    """The query to run is blank or whitespace-only."""


class SessionNotFoundError(ResultSessionError):
    """No session is bound to the given view id."""

    def __init__(self, view_id: str):
        self.view_id = view_id
        super().__init__(f"No result session for view {view_id!r}")


class NotPaginatedError(ResultSessionError):
    """Page navigation requested on a session without pagination."""

    def __init__(self, view_id: str):
        self.view_id = view_id
        super().__init__(f"Result session {view_id!r} is not paginated")


class UnsupportedFileTypeError(ResultSessionError):
    """File extension not supported for load or export."""

    def __init__(self, extension: str, action: str):
        self.extension = extension
        super().__init__(f"Unsupported file type for {action}: {extension or '(none)'}")
