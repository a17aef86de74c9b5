"""Environment-variable-based configuration.

Invalid values are logged and replaced by the documented default so that a
bad setting never prevents the server from starting.
"""

import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_FORMAT = "table"
DEFAULT_PAGE_SIZE = 100
DEFAULT_MAX_HISTORY = 50
DEFAULT_CACHE_TTL = 60.0

_FORMATS = ("table", "csv", "jsonl")
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _positive_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        value = 0
    if value < 1:
        logger.warning("Invalid %s=%r: must be a positive integer. Using %d.", name, raw, default)
        return default
    return value


def get_db_path() -> Path | None:
    """Return the database file path from DUCKDB_RESULTS_DB_PATH, or None for a temp file."""
    raw = os.environ.get("DUCKDB_RESULTS_DB_PATH", "").strip()
    if not raw:
        return None
    return Path(raw).expanduser()


def get_duckdb_binary() -> str:
    """Return the duckdb executable from DUCKDB_RESULTS_BINARY."""
    return os.environ.get("DUCKDB_RESULTS_BINARY", "").strip() or "duckdb"


def get_default_format() -> str:
    """Return the initial result format from DUCKDB_RESULTS_DEFAULT_FORMAT."""
    raw = os.environ.get("DUCKDB_RESULTS_DEFAULT_FORMAT", DEFAULT_FORMAT).strip().lower()
    if raw not in _FORMATS:
        logger.warning("Invalid default format %r. Using %r.", raw, DEFAULT_FORMAT)
        return DEFAULT_FORMAT
    return raw


def get_default_page_size() -> int:
    """Return the page size for paginated queries from DUCKDB_RESULTS_PAGE_SIZE."""
    return _positive_int("DUCKDB_RESULTS_PAGE_SIZE", DEFAULT_PAGE_SIZE)


def get_max_history() -> int:
    """Return the query history capacity from DUCKDB_RESULTS_MAX_HISTORY."""
    return _positive_int("DUCKDB_RESULTS_MAX_HISTORY", DEFAULT_MAX_HISTORY)


def get_cache_ttl() -> float:
    """Return the schema cache lifetime in seconds from DUCKDB_RESULTS_CACHE_TTL."""
    raw = os.environ.get("DUCKDB_RESULTS_CACHE_TTL")
    if raw is None:
        return DEFAULT_CACHE_TTL
    try:
        value = float(raw)
    except ValueError:
        value = -1.0
    if value < 0:
        logger.warning(
            "Invalid DUCKDB_RESULTS_CACHE_TTL=%r: must be a non-negative number. Using %s.",
            raw,
            DEFAULT_CACHE_TTL,
        )
        return DEFAULT_CACHE_TTL
    return value


def get_log_level() -> str:
    """Return the logging level from DUCKDB_RESULTS_LOG_LEVEL."""
    raw = os.environ.get("DUCKDB_RESULTS_LOG_LEVEL", "WARNING").strip().upper()
    if raw not in _LOG_LEVELS:
        return "WARNING"
    return raw
