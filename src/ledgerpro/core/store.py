"""
Persistence layer for the three ledger collections.

LedgerStore is the contract the engine talks to; SQLiteLedgerStore is the
implementation backed by a DatabaseManager connection. Stores know nothing
about accounting rules: referential checks and balance validation live in
the chart of accounts and journal services.
"""

from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import List, Optional
import logging
import sqlite3

from ledgerpro.core.exceptions import DatabaseError
from ledgerpro.core.models import Account, JournalEntry, JournalLine

logger = logging.getLogger(__name__)


class LedgerStore(ABC):
    """CRUD and bulk reads over accounts, journal entries and journal lines."""

    @abstractmethod
    def list_accounts(self) -> List[Account]:
        ...

    @abstractmethod
    def list_entries(self) -> List[JournalEntry]:
        ...

    @abstractmethod
    def list_lines(self) -> List[JournalLine]:
        ...

    @abstractmethod
    def get_account(self, account_id: str) -> Optional[Account]:
        ...

    @abstractmethod
    def get_entry(self, entry_id: str) -> Optional[JournalEntry]:
        ...

    @abstractmethod
    def lines_for_entry(self, entry_id: str) -> List[JournalLine]:
        ...

    @abstractmethod
    def put_account(self, account: Account) -> None:
        ...

    @abstractmethod
    def put_entry(self, entry: JournalEntry) -> None:
        ...

    @abstractmethod
    def put_line(self, line: JournalLine) -> None:
        ...

    @abstractmethod
    def delete_account(self, account_id: str) -> None:
        ...

    @abstractmethod
    def delete_entry(self, entry_id: str) -> None:
        ...

    @abstractmethod
    def delete_lines_for_entry(self, entry_id: str) -> None:
        ...

    @abstractmethod
    def clear(self) -> None:
        """Delete every line, entry and account."""

    @abstractmethod
    def atomic(self):
        """Context manager grouping writes; rolls back if the block raises."""

    def count_lines_for_account(self, account_id: str) -> int:
        return sum(1 for line in self.list_lines() if line.account_id == account_id)


class SQLiteLedgerStore(LedgerStore):
    """
    LedgerStore over a SQLite connection.

    Writes outside atomic() commit immediately. Inside atomic() they are
    held in one BEGIN IMMEDIATE transaction; nested atomic() blocks join
    the outer one.

    Usage:
        db = DatabaseManager()
        store = SQLiteLedgerStore(db.init("ledger.db"))
        with store.atomic():
            store.put_entry(entry)
            store.put_line(line)
    """

    def __init__(self, db_connection: sqlite3.Connection):
        self.conn = db_connection
        self._atomic_depth = 0

    # ------------------------------------------------------------------ reads

    def list_accounts(self) -> List[Account]:
        cursor = self.conn.execute("SELECT * FROM accounts ORDER BY code, id")
        return [Account.from_row(row) for row in cursor.fetchall()]

    def list_entries(self) -> List[JournalEntry]:
        cursor = self.conn.execute("SELECT * FROM journal_entries ORDER BY created_at, id")
        return [JournalEntry.from_row(row) for row in cursor.fetchall()]

    def list_lines(self) -> List[JournalLine]:
        cursor = self.conn.execute("SELECT * FROM journal_lines ORDER BY entry_id, seq")
        return [JournalLine.from_row(row) for row in cursor.fetchall()]

    def get_account(self, account_id: str) -> Optional[Account]:
        row = self.conn.execute(
            "SELECT * FROM accounts WHERE id = ?", (account_id,)
        ).fetchone()
        return Account.from_row(row) if row else None

    def get_entry(self, entry_id: str) -> Optional[JournalEntry]:
        row = self.conn.execute(
            "SELECT * FROM journal_entries WHERE id = ?", (entry_id,)
        ).fetchone()
        return JournalEntry.from_row(row) if row else None

    def lines_for_entry(self, entry_id: str) -> List[JournalLine]:
        cursor = self.conn.execute(
            "SELECT * FROM journal_lines WHERE entry_id = ? ORDER BY seq, id", (entry_id,)
        )
        return [JournalLine.from_row(row) for row in cursor.fetchall()]

    def count_lines_for_account(self, account_id: str) -> int:
        row = self.conn.execute(
            "SELECT COUNT(*) FROM journal_lines WHERE account_id = ?", (account_id,)
        ).fetchone()
        return row[0]

    # ----------------------------------------------------------------- writes

    def put_account(self, account: Account) -> None:
        self._write(
            """
            INSERT OR REPLACE INTO accounts (id, code, name, account_type, normal_side)
            VALUES (?, ?, ?, ?, ?)
            """,
            (
                account.id,
                account.code,
                account.name,
                account.account_type.value,
                account.normal_side.value,
            ),
        )

    def put_entry(self, entry: JournalEntry) -> None:
        self._write(
            """
            INSERT OR REPLACE INTO journal_entries
            (id, date, reference, description, status, created_at)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            (
                entry.id,
                entry.date,
                entry.reference,
                entry.description,
                entry.status.value,
                entry.created_at,
            ),
        )

    def put_line(self, line: JournalLine) -> None:
        self._write(
            """
            INSERT OR REPLACE INTO journal_lines
            (id, entry_id, account_id, description, debit, credit, seq)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (
                line.id,
                line.entry_id,
                line.account_id,
                line.description,
                str(line.debit),
                str(line.credit),
                line.seq,
            ),
        )

    def delete_account(self, account_id: str) -> None:
        self._write("DELETE FROM accounts WHERE id = ?", (account_id,))

    def delete_entry(self, entry_id: str) -> None:
        self._write("DELETE FROM journal_entries WHERE id = ?", (entry_id,))

    def delete_lines_for_entry(self, entry_id: str) -> None:
        self._write("DELETE FROM journal_lines WHERE entry_id = ?", (entry_id,))

    def clear(self) -> None:
        with self.atomic():
            self.conn.execute("DELETE FROM journal_lines")
            self.conn.execute("DELETE FROM journal_entries")
            self.conn.execute("DELETE FROM accounts")
        logger.info("Ledger store cleared")

    @contextmanager
    def atomic(self):
        if self._atomic_depth > 0:
            self._atomic_depth += 1
            try:
                yield self
            finally:
                self._atomic_depth -= 1
            return

        # Flush any implicit transaction left open by the sqlite3 module
        if self.conn.in_transaction:
            self.conn.commit()

        self.conn.execute("BEGIN IMMEDIATE")
        self._atomic_depth = 1
        try:
            yield self
            self.conn.commit()
        except Exception:
            self.conn.rollback()
            raise
        finally:
            self._atomic_depth = 0

    def _write(self, sql: str, params: tuple) -> None:
        try:
            self.conn.execute(sql, params)
        except sqlite3.Error as e:
            raise DatabaseError(f"Write failed: {e}") from e
        if self._atomic_depth == 0:
            self.conn.commit()
