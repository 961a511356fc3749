# mediscan/db/db_config.py

import sqlite3

from mediscan.core.config import DB_PATH


def get_sqlite_connection() -> sqlite3.Connection:
    """
    Create and configure SQLite connection with recommended PRAGMA settings.
    Reminders, dedupe marks and session checkpoints share this file.
    """
    DB_PATH.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(DB_PATH), check_same_thread=False)

    # Performance & concurrency settings
    conn.execute("PRAGMA journal_mode=WAL;")
    conn.execute("PRAGMA synchronous=NORMAL;")
    conn.execute("PRAGMA busy_timeout=5000;")

    conn.execute(
        "CREATE TABLE IF NOT EXISTS kv ("
        "key TEXT PRIMARY KEY, "
        "value TEXT NOT NULL)"
    )
    conn.commit()

    return conn
