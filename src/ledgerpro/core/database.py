"""
SQLite database initialization and connection management.

Provides the SQLite database holding the three ledger collections
(accounts, journal entries, journal lines). Uses singleton pattern for
connection management.

Notes:
- Amounts are stored as TEXT so Decimal values round-trip exactly
- journal_lines.account_id has no foreign key; the chart of accounts
  service refuses to delete an account that lines still reference
- Use the transaction() context manager for atomic operations
"""

from pathlib import Path
from typing import Optional
from contextlib import contextmanager
import logging
import sqlite3
import threading

from ledgerpro.core.exceptions import DatabaseError

logger = logging.getLogger(__name__)


SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS accounts (
    id TEXT PRIMARY KEY,
    code TEXT NOT NULL,
    name TEXT NOT NULL,
    account_type TEXT NOT NULL CHECK(account_type IN ('Asset','Liability','Equity','Revenue','Expense')),
    normal_side TEXT NOT NULL CHECK(normal_side IN ('Debit','Credit'))
);

CREATE TABLE IF NOT EXISTS journal_entries (
    id TEXT PRIMARY KEY,
    date TEXT NOT NULL,
    reference TEXT,
    description TEXT NOT NULL,
    status TEXT NOT NULL DEFAULT 'Posted',
    created_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS journal_lines (
    id TEXT PRIMARY KEY,
    entry_id TEXT NOT NULL,
    account_id TEXT NOT NULL,
    description TEXT,
    debit TEXT NOT NULL DEFAULT '0',
    credit TEXT NOT NULL DEFAULT '0',
    seq INTEGER NOT NULL DEFAULT 0
);

CREATE INDEX IF NOT EXISTS idx_accounts_code ON accounts(code);
CREATE INDEX IF NOT EXISTS idx_journal_entries_date ON journal_entries(date);
CREATE INDEX IF NOT EXISTS idx_journal_lines_entry ON journal_lines(entry_id);
CREATE INDEX IF NOT EXISTS idx_journal_lines_account ON journal_lines(account_id);
"""


class DatabaseManager:
    """
    Singleton manager for the ledger database connection.

    Usage:
        db = DatabaseManager()
        conn = db.init("/path/to/ledger.db")
        # Use connection...
        db.close()
    """

    _instance: Optional["DatabaseManager"] = None
    _lock = threading.Lock()

    def __new__(cls) -> "DatabaseManager":
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super().__new__(cls)
                    cls._instance._connection = None
                    cls._instance._db_path = None
        return cls._instance

    @property
    def connection(self) -> sqlite3.Connection:
        """Get the current database connection."""
        if self._connection is None:
            raise DatabaseError("Database not initialized. Call init() first.")
        return self._connection

    @property
    def db_path(self) -> Optional[str]:
        return self._db_path

    def init(self, db_path: str) -> sqlite3.Connection:
        """
        Initialize the database.

        Args:
            db_path: Path to database file or ":memory:" for in-memory database

        Returns:
            Database connection

        Raises:
            DatabaseError: If initialization fails
        """
        try:
            self._db_path = str(db_path)

            # Create parent directory if needed (unless in-memory)
            if self._db_path != ":memory:":
                Path(self._db_path).parent.mkdir(parents=True, exist_ok=True)

            self._connection = sqlite3.connect(self._db_path, check_same_thread=False)
            self._connection.row_factory = sqlite3.Row

            if self._db_path != ":memory:":
                self._connection.execute("PRAGMA journal_mode = WAL")
                self._connection.execute("PRAGMA synchronous = NORMAL")

            self._execute_schema()
            logger.debug(f"Ledger database ready at {self._db_path}")

            return self._connection

        except sqlite3.Error as e:
            raise DatabaseError(f"Failed to initialize database: {e}") from e

    def _execute_schema(self) -> None:
        """Create all tables if not exist."""
        try:
            self._connection.executescript(SCHEMA_SQL)
            self._connection.commit()
        except sqlite3.Error as e:
            raise DatabaseError(f"Failed to execute schema: {e}") from e

    def execute(self, sql: str, params: tuple = ()) -> sqlite3.Cursor:
        """Execute a SQL statement."""
        return self.connection.execute(sql, params)

    @contextmanager
    def transaction(self):
        """
        Context manager for atomic transactions.

        Usage:
            db = DatabaseManager()
            with db.transaction() as conn:
                conn.execute("INSERT INTO journal_entries ...")
                conn.execute("INSERT INTO journal_lines ...")
            # Auto-commits on success, auto-rolls back on exception

        Re-raises the original exception after rollback.
        """
        conn = self.connection
        conn.execute("BEGIN IMMEDIATE")
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise

    def close(self) -> None:
        """Close the database connection."""
        if self._connection:
            self._connection.close()
            self._connection = None
            self._db_path = None

    def get_tables(self) -> list[str]:
        """Get list of all tables in database."""
        cursor = self.execute(
            "SELECT name FROM sqlite_master WHERE type='table' AND name NOT LIKE 'sqlite_%'"
        )
        return [row[0] for row in cursor.fetchall()]

    @classmethod
    def reset_instance(cls) -> None:
        """Reset singleton instance (useful for testing)."""
        with cls._lock:
            if cls._instance and cls._instance._connection:
                cls._instance._connection.close()
            cls._instance = None
