"""Tests for the schema, load, export and reset tools."""

import pytest

from duckdb_results.db.executor import DuckDBCliExecutor
from duckdb_results.db.queries import SCHEMA_QUERY, load_file_query
from duckdb_results.schema.cache import SchemaCache
from duckdb_results.tools.duckdb_data import run_export, run_load, run_reset, run_schema


@pytest.fixture
def cache(executor):
    executor.tables[SCHEMA_QUERY] = [
        {"table_name": "numbers", "column_name": "id", "data_type": "INTEGER"},
    ]
    return SchemaCache(executor)


@pytest.mark.asyncio
async def test_schema_listing(executor, cache):
    assert await run_schema(executor, cache) == "numbers\n  id INTEGER"


@pytest.mark.asyncio
async def test_schema_describe_table(executor, cache):
    executor.tables["DESCRIBE numbers"] = [
        {"column_name": "id", "column_type": "INTEGER", "null": "YES"},
    ]
    text = await run_schema(executor, cache, table="numbers")
    assert "│ column_name │ column_type │ null │" in text
    assert text.endswith("-- 1 row --")


@pytest.mark.asyncio
async def test_schema_describe_missing_table(executor, cache):
    assert (await run_schema(executor, cache, table="ghost")).startswith("Error:")


@pytest.mark.asyncio
async def test_load_derives_table_name_and_invalidates_cache(executor, cache, tmp_path):
    path = tmp_path / "sales-2024.csv"
    executor.tables[load_file_query(path, "sales_2024")] = []
    await cache.get_tables()

    text = await run_load(executor, cache, str(path))
    assert text == f'Loaded {path} into table "sales_2024"'
    assert cache.is_stale()


@pytest.mark.asyncio
async def test_load_unsupported_type(executor, cache):
    text = await run_load(executor, cache, "notes.txt")
    assert text == "Error: Unsupported file type for load: txt"


@pytest.mark.asyncio
async def test_export_reports_engine_error(executor):
    text = await run_export(executor, "ghost", "/tmp/out.csv")
    assert text.startswith("Error: Catalog Error")


@pytest.mark.asyncio
async def test_export_unsupported_type(executor):
    assert await run_export(executor, "t", "out.xlsx") == "Error: Unsupported file type for export: xlsx"


def test_reset_removes_database(tmp_path):
    path = tmp_path / "work.duckdb"
    path.write_text("")
    executor = DuckDBCliExecutor(db_path=path)
    cache = SchemaCache(executor)
    assert run_reset(executor, cache) == "DuckDB database reset."
    assert not path.exists()
