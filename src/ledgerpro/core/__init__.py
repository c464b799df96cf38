"""
Core module - Foundation components for LedgerPro.

Provides:
- DatabaseManager: SQLite database management
- LedgerStore / SQLiteLedgerStore: persistence of accounts, entries and lines
- ChartOfAccounts: default chart and account maintenance
- JournalEngine: Double-entry posting with balance validation
- Balance engine: per-account balances honoring each normal side
- LedgerPreferences: JSON-backed configuration
"""

from ledgerpro.core.database import DatabaseManager
from ledgerpro.core.store import LedgerStore, SQLiteLedgerStore
from ledgerpro.core.accounts import ChartOfAccounts, CHART_OF_ACCOUNTS, default_accounts
from ledgerpro.core.journal import (
    DraftEntry,
    DraftLine,
    EntryView,
    JournalEngine,
    entry_history,
    validate_draft,
)
from ledgerpro.core.balance import (
    AccountBalance,
    account_totals,
    balances_by_type,
    compute_balances,
    filter_lines_by_date,
    signed_balance,
)
from ledgerpro.core.models import (
    Account,
    AccountType,
    EntryStatus,
    JournalEntry,
    JournalLine,
    NormalSide,
    to_decimal,
)
from ledgerpro.core.preferences import LedgerPreferences, DEFAULT_PREFERENCES
from ledgerpro.core.exceptions import (
    LedgerError,
    DatabaseError,
    ValidationError,
    UnbalancedJournalError,
    AccountNotFoundError,
    AccountInUseError,
    EntryNotFoundError,
    ExtractionError,
)
