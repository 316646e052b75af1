# ABOUTME: SQLite connection management for the ireaderlink lookup cache.
# ABOUTME: Opens or creates the cache database and applies the schema on first use.

import sqlite3
from pathlib import Path

from ireaderlink.cache.schema import SCHEMA_V1

DEFAULT_CACHE_PATH = Path.home() / ".ireaderlink" / "cache.db"


def _schema_exists(conn: sqlite3.Connection) -> bool:
    """Check if the schema has already been applied."""
    cursor = conn.execute(
        "SELECT name FROM sqlite_master WHERE type='table' AND name='kv_entries'"
    )
    return cursor.fetchone() is not None


def open_cache_db(path: Path | None = None) -> sqlite3.Connection:
    """Open or create the cache database.

    Creates the database file and parent directories if they don't exist
    and applies the schema on first creation.

    Args:
        path: Path to the database file. Defaults to ~/.ireaderlink/cache.db.

    Returns:
        A configured sqlite3.Connection.
    """
    db_path = path or DEFAULT_CACHE_PATH
    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(str(db_path))
    conn.execute("PRAGMA journal_mode=WAL")

    if not _schema_exists(conn):
        conn.executescript(SCHEMA_V1)

    return conn
