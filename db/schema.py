"""SQLite schema definitions. One key-value table emulating browser local storage."""

import os
import logging
from db.connection import get_connection

logger = logging.getLogger(__name__)

SCHEMA_SQL = """
-- ============================================================
-- LOCAL STORAGE
-- ============================================================

CREATE TABLE IF NOT EXISTS local_storage (
    key             TEXT PRIMARY KEY,
    value           TEXT NOT NULL,
    updated_at      TEXT
);
"""


def create_all_tables(db_path: str):
    """Create all tables if they don't exist."""
    directory = os.path.dirname(db_path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with get_connection(db_path) as conn:
        conn.executescript(SCHEMA_SQL)
    logger.debug(f"Schema ready at {db_path}")
