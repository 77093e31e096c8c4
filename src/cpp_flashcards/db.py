"""Local key-value storage backed by SQLite."""
import sqlite3
from datetime import datetime
from pathlib import Path

DEFAULT_DB_PATH = str(Path.home() / ".cpp_flashcards" / "progress.db")

SCHEMA = """
CREATE TABLE IF NOT EXISTS app_storage (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    key TEXT NOT NULL UNIQUE,
    value TEXT,
    updated_at TEXT
);
"""


def get_connection(db_path: str = DEFAULT_DB_PATH) -> sqlite3.Connection:
    """Return a SQLite connection with row factory enabled."""
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    return conn


def init_db(db_path: str = DEFAULT_DB_PATH) -> None:
    """Initialize the database, creating the storage table if it doesn't exist."""
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    conn = get_connection(db_path)
    conn.executescript(SCHEMA)
    conn.commit()
    conn.close()


def get_value(db_path: str, key: str, default: str | None = None) -> str | None:
    conn = get_connection(db_path)
    try:
        row = conn.execute("SELECT value FROM app_storage WHERE key = ?", (key,)).fetchone()
    finally:
        conn.close()
    return row["value"] if row else default


def set_value(db_path: str, key: str, value: str) -> None:
    conn = get_connection(db_path)
    try:
        conn.execute(
            """INSERT INTO app_storage (key, value, updated_at) VALUES (?, ?, ?)
            ON CONFLICT(key) DO UPDATE SET value=excluded.value, updated_at=excluded.updated_at""",
            (key, value, datetime.now().isoformat()),
        )
        conn.commit()
    finally:
        conn.close()


def delete_value(db_path: str, key: str) -> None:
    conn = get_connection(db_path)
    try:
        conn.execute("DELETE FROM app_storage WHERE key = ?", (key,))
        conn.commit()
    finally:
        conn.close()
