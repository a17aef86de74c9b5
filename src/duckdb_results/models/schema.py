"""Schema introspection models."""

from pydantic import BaseModel


class ColumnInfo(BaseModel):
    """A column of a table in the main schema."""

    table_name: str
    column_name: str
    data_type: str
