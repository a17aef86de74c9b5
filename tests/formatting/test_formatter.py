"""Tests for result row formatting."""

import csv
import io
import json

import pytest

from duckdb_results.errors import InvalidFormatError
from duckdb_results.formatting.formatter import (
    NO_RESULTS,
    format_csv,
    format_jsonl,
    format_page_footer,
    format_rows,
    format_table,
    render_session,
)
from duckdb_results.models.session import OutputFormat, Pagination, Session

ROWS = [{"name": "a", "id": 1}, {"name": "b", "id": 2}]


# --- table ---


def test_table_two_rows():
    lines = format_table(ROWS)
    assert lines == [
        "┌────┬──────┐",
        "│ id │ name │",
        "├────┼──────┤",
        "│ 1  │ a    │",
        "│ 2  │ b    │",
        "└────┴──────┘",
        "",
        "-- 2 rows --",
    ]


def test_table_single_row_footer():
    lines = format_table([{"x": 1}])
    assert lines[-1] == "-- 1 row --"


def test_table_null_and_missing_values():
    rows = [{"a": None, "b": "long value"}, {"a": 7}]
    lines = format_table(rows)
    assert "│ NULL │ long value │" in lines
    assert "│ 7    │ NULL       │" in lines


def test_table_columns_sorted_and_width_from_header():
    lines = format_table([{"zeta": 1, "alpha_long_name": 2}])
    assert lines[1] == "│ alpha_long_name │ zeta │"


def test_table_booleans_lowercase():
    lines = format_table([{"flag": True}, {"flag": False}])
    assert "│ true  │" in lines
    assert "│ false │" in lines


# --- csv ---


def test_csv_basic():
    assert format_csv(ROWS) == ["id,name", "1,a", "2,b"]


def test_csv_quotes_special_characters():
    lines = format_csv([{"v": 'say "hi", bye'}])
    assert lines[1] == '"say ""hi"", bye"'


def test_csv_null_is_empty_field():
    assert format_csv([{"a": None, "b": 2}]) == ["a,b", ",2"]


def test_csv_parses_back_to_rows():
    rows = [
        {"id": 1, "note": "plain", "extra": None},
        {"id": 2, "note": "comma, and \"quote\"", "extra": 3.5},
        {"id": 3, "note": "multi\nline", "extra": True},
    ]
    parsed = list(csv.DictReader(io.StringIO("\n".join(format_csv(rows)))))
    assert [list(r) for r in parsed] == [["extra", "id", "note"]] * 3
    assert parsed[0] == {"extra": "", "id": "1", "note": "plain"}
    assert parsed[1] == {"extra": "3.5", "id": "2", "note": 'comma, and "quote"'}
    assert parsed[2] == {"extra": "true", "id": "3", "note": "multi\nline"}


# --- jsonl ---


def test_jsonl_keeps_field_order():
    lines = format_jsonl(ROWS)
    assert lines == ['{"name":"a","id":1}', '{"name":"b","id":2}']


def test_jsonl_lines_decode_to_rows():
    rows = [{"b": None, "a": "ü", "c": [1, 2]}, {"b": False, "a": "x", "c": []}]
    lines = format_jsonl(rows)
    assert len(lines) == len(rows)
    assert [json.loads(line) for line in lines] == rows


# --- dispatch ---


@pytest.mark.parametrize("fmt", ["table", "csv", "jsonl"])
def test_empty_rows_every_format(fmt):
    assert format_rows([], fmt) == [NO_RESULTS]


def test_format_rows_dispatch():
    assert format_rows(ROWS, OutputFormat.CSV) == format_csv(ROWS)


def test_format_rows_invalid_format():
    with pytest.raises(InvalidFormatError):
        format_rows(ROWS, "xml")


# --- pagination footer ---


def test_page_footer_middle_page():
    footer = format_page_footer(Pagination(page_size=2, current_page=2, total_count=5))
    assert footer == "-- Page 2/3 (rows 3-4 of 5) --"


def test_page_footer_last_partial_page():
    footer = format_page_footer(Pagination(page_size=2, current_page=3, total_count=5))
    assert footer == "-- Page 3/3 (rows 5-5 of 5) --"


def test_page_footer_empty_result():
    footer = format_page_footer(Pagination(page_size=10, current_page=1, total_count=0))
    assert footer == "-- Page 1/1 (rows 0-0 of 0) --"


def test_render_session_appends_footer_when_paginated():
    session = Session(
        id="v1",
        query="SELECT 1",
        rows=ROWS,
        format=OutputFormat.CSV,
        pagination=Pagination(page_size=2, current_page=1, total_count=2),
    )
    assert render_session(session) == ["id,name", "1,a", "2,b", "", "-- Page 1/1 (rows 1-2 of 2) --"]


def test_render_session_plain():
    session = Session(id="v1", query="SELECT 1", rows=ROWS, format=OutputFormat.JSONL)
    assert render_session(session) == format_jsonl(ROWS)
