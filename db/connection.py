"""SQLite database connection manager."""

import sqlite3
import logging
from contextlib import contextmanager

logger = logging.getLogger(__name__)


@contextmanager
def get_connection(db_path: str):
    """Context manager for SQLite connections."""
    conn = sqlite3.connect(db_path)
    conn.execute("PRAGMA journal_mode=WAL")
    try:
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def execute(query: str, db_path: str, params=None):
    """Execute a SQL statement (INSERT, UPDATE, DELETE, etc.)."""
    with get_connection(db_path) as conn:
        conn.execute(query, params or [])


def fetch_value(query: str, db_path: str, params=None):
    """Return the first column of the first row, or None when there is no row."""
    with get_connection(db_path) as conn:
        row = conn.execute(query, params or []).fetchone()
    return row[0] if row else None


def table_row_count(table_name: str, db_path: str) -> int:
    """Get the row count of a table."""
    return int(fetch_value(f"SELECT COUNT(*) FROM {table_name}", db_path))
