"""Result session models."""

import math
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field

Row = dict[str, Any]


class OutputFormat(StrEnum):
    """Display format for a result set, in toggle order."""

    TABLE = "table"
    CSV = "csv"
    JSONL = "jsonl"

    def next(self) -> "OutputFormat":
        """Return the format after this one, wrapping around."""
        members = list(OutputFormat)
        return members[(members.index(self) + 1) % len(members)]


class Pagination(BaseModel):
    """Windowed re-execution state for a paginated session."""

    page_size: int = Field(ge=1)
    current_page: int = Field(default=1, ge=1)
    total_count: int = Field(default=0, ge=0)

    @property
    def total_pages(self) -> int:
        """Number of pages; 0 when the result is empty."""
        return math.ceil(self.total_count / self.page_size)

    @property
    def offset(self) -> int:
        return (self.current_page - 1) * self.page_size

    @property
    def first_row(self) -> int:
        """1-based index of the first row on the current page (0 when empty)."""
        if self.total_count == 0:
            return 0
        return self.offset + 1

    @property
    def last_row(self) -> int:
        return min(self.current_page * self.page_size, self.total_count)


class Session(BaseModel):
    """One tracked result view."""

    id: str
    query: str
    rows: list[Row] = Field(default_factory=list)
    format: OutputFormat = OutputFormat.TABLE
    pagination: Pagination | None = None
    source_link: str | None = None
