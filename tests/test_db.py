"""Tests for database initialization and key-value storage."""
from cpp_flashcards.db import delete_value, get_connection, get_value, init_db, set_value


def test_init_db_creates_tables(tmp_db):
    init_db(tmp_db)
    conn = get_connection(tmp_db)
    cursor = conn.execute(
        "SELECT name FROM sqlite_master WHERE type='table' ORDER BY name"
    )
    tables = {row[0] for row in cursor.fetchall()}
    assert "app_storage" in tables
    conn.close()


def test_init_db_is_idempotent(tmp_db):
    init_db(tmp_db)
    init_db(tmp_db)  # should not raise
    conn = get_connection(tmp_db)
    cursor = conn.execute("SELECT name FROM sqlite_master WHERE type='table'")
    assert len(cursor.fetchall()) > 0
    conn.close()


def test_init_db_creates_parent_directory(tmp_path):
    db_path = str(tmp_path / "nested" / "dir" / "progress.db")
    init_db(db_path)
    assert (tmp_path / "nested" / "dir" / "progress.db").exists()


def test_get_set_value(tmp_db):
    """Values can be stored, overwritten and retrieved."""
    init_db(tmp_db)
    assert get_value(tmp_db, "test_key") is None
    assert get_value(tmp_db, "test_key", "default") == "default"
    set_value(tmp_db, "test_key", "value1")
    assert get_value(tmp_db, "test_key") == "value1"
    set_value(tmp_db, "test_key", "value2")  # upsert
    assert get_value(tmp_db, "test_key") == "value2"


def test_set_value_records_timestamp(tmp_db):
    init_db(tmp_db)
    set_value(tmp_db, "k", "v")
    conn = get_connection(tmp_db)
    row = conn.execute("SELECT * FROM app_storage WHERE key = 'k'").fetchone()
    conn.close()
    assert row["updated_at"] is not None


def test_delete_value(tmp_db):
    init_db(tmp_db)
    set_value(tmp_db, "k", "v")
    delete_value(tmp_db, "k")
    assert get_value(tmp_db, "k") is None
