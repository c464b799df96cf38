"""
Shared pytest fixtures for LedgerPro tests.

Provides database connections, a seeded ledger store and helpers for
posting entries.
"""

import pytest
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from ledgerpro.core.database import DatabaseManager
from ledgerpro.core.store import SQLiteLedgerStore
from ledgerpro.core.accounts import ChartOfAccounts
from ledgerpro.core.journal import DraftEntry, JournalEngine
from ledgerpro.core.models import Account, JournalEntry, JournalLine


@pytest.fixture
def db_manager():
    """Provide a fresh DatabaseManager instance for each test."""
    # Reset singleton to ensure clean state
    DatabaseManager.reset_instance()
    manager = DatabaseManager()
    yield manager
    # Cleanup
    manager.close()
    DatabaseManager.reset_instance()


@pytest.fixture
def db_connection(db_manager):
    """Provide an initialized in-memory database connection."""
    conn = db_manager.init(":memory:")
    yield conn
    # Connection is closed by db_manager fixture


@pytest.fixture
def store(db_connection):
    """Provide an empty ledger store."""
    return SQLiteLedgerStore(db_connection)


@pytest.fixture
def chart(store):
    """Provide a ChartOfAccounts seeded with the default chart."""
    chart = ChartOfAccounts(store)
    chart.setup()
    return chart


@pytest.fixture
def seeded_store(chart):
    """Provide a ledger store with the default chart of accounts."""
    return chart.store


@pytest.fixture
def engine(seeded_store):
    """Provide a JournalEngine over the seeded store."""
    return JournalEngine(seeded_store)


@pytest.fixture
def post(engine):
    """
    Post a balanced entry from (account_id, debit, credit) tuples.

    Usage:
        entry = post("2024-01-15", "Cash sale", ("acc_1000", 500, 0), ("acc_4000", 0, 500))
    """
    def _post(entry_date, description, *lines, reference=""):
        draft = DraftEntry(date=entry_date, description=description, reference=reference)
        for account_id, debit, credit in lines:
            draft.add_line(account_id, debit=debit, credit=credit)
        return engine.post(draft)

    return _post


def make_account(code, account_type, normal_side=None, name=None):
    """Build an Account without a store (for pure-function tests)."""
    from ledgerpro.core.models import AccountType, NormalSide

    parsed = AccountType.parse(account_type)
    return Account(
        id=f"acc_{code}",
        code=code,
        name=name or f"Account {code}",
        account_type=parsed,
        normal_side=normal_side or NormalSide.default_for(parsed),
    )


def make_entry(entry_id, entry_date, description="Entry", created_at=None, reference=""):
    """Build a JournalEntry with a deterministic created_at."""
    return JournalEntry(
        id=entry_id,
        date=entry_date,
        description=description,
        reference=reference or entry_id.upper(),
        created_at=created_at or f"{entry_date}T00:00:00.000000",
    )


def make_line(entry_id, account_id, debit=0, credit=0, seq=1, description=""):
    return JournalLine(
        id=f"{entry_id}_{seq}",
        entry_id=entry_id,
        account_id=account_id,
        debit=debit,
        credit=credit,
        description=description,
        seq=seq,
    )


@pytest.fixture
def sample_accounts():
    """A small chart for pure-function tests."""
    return [
        make_account("1000", "Asset", name="Cash"),
        make_account("1100", "Asset", name="Accounts Receivable"),
        make_account("1700", "Asset", "Credit", name="Accumulated Depreciation"),
        make_account("2000", "Liability", name="Accounts Payable"),
        make_account("3000", "Equity", name="Common Stock"),
        make_account("3300", "Equity", "Debit", name="Owner's Drawings"),
        make_account("4000", "Revenue", name="Sales Revenue"),
        make_account("4100", "Revenue", name="Service Revenue"),
        make_account("5000", "Expense", name="Cost of Goods Sold"),
        make_account("5200", "Expense", name="Rent Expense"),
    ]
