"""
Unit tests for database module.

Tests database initialization, schema and the singleton lifecycle.
"""

import pytest

from ledgerpro.core.database import DatabaseManager
from ledgerpro.core.exceptions import DatabaseError


class TestDatabaseInit:
    """Tests for database initialization."""

    def test_database_init_creates_tables(self, db_manager):
        """All ledger tables exist after init."""
        db_manager.init(":memory:")
        tables = db_manager.get_tables()

        for table in ("accounts", "journal_entries", "journal_lines"):
            assert table in tables

    def test_indexes_created(self, db_connection):
        cursor = db_connection.execute(
            "SELECT name FROM sqlite_master WHERE type='index' AND name LIKE 'idx_%'"
        )
        names = {row[0] for row in cursor.fetchall()}
        assert {"idx_journal_lines_entry", "idx_journal_lines_account",
                "idx_journal_entries_date"} <= names

    def test_file_database_creates_parent_dir(self, db_manager, tmp_path):
        db_path = tmp_path / "nested" / "ledger.db"
        db_manager.init(str(db_path))
        assert db_path.exists()
        assert db_manager.db_path == str(db_path)

    def test_connection_before_init_raises(self, db_manager):
        with pytest.raises(DatabaseError):
            _ = db_manager.connection


class TestSingleton:
    """Tests for the singleton pattern."""

    def test_same_instance(self, db_manager):
        assert DatabaseManager() is db_manager

    def test_reset_instance(self, db_manager):
        db_manager.init(":memory:")
        DatabaseManager.reset_instance()
        assert DatabaseManager() is not db_manager


class TestTransaction:
    """Tests for the transaction() context manager."""

    def test_commit_on_success(self, db_manager):
        db_manager.init(":memory:")
        with db_manager.transaction() as conn:
            conn.execute(
                "INSERT INTO accounts VALUES ('a1', '1000', 'Cash', 'Asset', 'Debit')"
            )
        count = db_manager.execute("SELECT COUNT(*) FROM accounts").fetchone()[0]
        assert count == 1

    def test_rollback_on_error(self, db_manager):
        db_manager.init(":memory:")
        with pytest.raises(RuntimeError):
            with db_manager.transaction() as conn:
                conn.execute(
                    "INSERT INTO accounts VALUES ('a1', '1000', 'Cash', 'Asset', 'Debit')"
                )
                raise RuntimeError("boom")
        count = db_manager.execute("SELECT COUNT(*) FROM accounts").fetchone()[0]
        assert count == 0

    def test_schema_rejects_bad_account_type(self, db_connection):
        import sqlite3
        with pytest.raises(sqlite3.IntegrityError):
            db_connection.execute(
                "INSERT INTO accounts VALUES ('a1', '1000', 'Cash', 'Income', 'Debit')"
            )
