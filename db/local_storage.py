"""getItem / setItem / removeItem over the local_storage table."""

import logging
from datetime import datetime, timezone

from db.connection import execute, fetch_value

logger = logging.getLogger(__name__)


def get_item(key: str, db_path: str):
    """Return the stored string for `key`, or None if nothing is stored."""
    return fetch_value(
        "SELECT value FROM local_storage WHERE key = ?", db_path, [key]
    )


def set_item(key: str, value: str, db_path: str):
    """Overwrite the value stored under `key`."""
    updated_at = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
    execute("""
        INSERT INTO local_storage (key, value, updated_at)
        VALUES (?, ?, ?)
        ON CONFLICT(key) DO UPDATE SET
            value = excluded.value,
            updated_at = excluded.updated_at
    """, db_path, [key, value, updated_at])
    logger.debug(f"Wrote {len(value)} chars under '{key}'")


def remove_item(key: str, db_path: str):
    """Delete `key`. Missing keys are ignored."""
    execute("DELETE FROM local_storage WHERE key = ?", db_path, [key])
    logger.debug(f"Removed '{key}'")
