"""
Core models for LedgerPro - the ledger records and their invariants.

This module provides:
- AccountType / NormalSide / EntryStatus: finite sets of valid values
- Account: a node in the chart of accounts
- JournalEntry: the header of a posted transaction
- JournalLine: one debit or credit line belonging to an entry

All monetary values use Decimal for precision. Values coming from storage or
from user input pass through to_decimal(), which maps anything non-numeric
to zero instead of raising.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Dict, Optional
import uuid

ZERO = Decimal("0")

# Posting tolerance: |sum(debit) - sum(credit)| must stay below this
POSTING_TOLERANCE = Decimal("0.001")

# Statement tolerance for the "balanced" diagnostic flags
STATEMENT_TOLERANCE = Decimal("0.01")


class AccountType(Enum):
    """Account classification in the chart of accounts."""
    ASSET = "Asset"
    LIABILITY = "Liability"
    EQUITY = "Equity"
    REVENUE = "Revenue"
    EXPENSE = "Expense"

    @classmethod
    def parse(cls, value: Any) -> "AccountType":
        """Accept an enum member or a case-insensitive name/value."""
        if isinstance(value, cls):
            return value
        text = str(value or "").strip().lower()
        for member in cls:
            if text in (member.value.lower(), member.name.lower()):
                return member
        raise ValueError(f"Unknown account type: {value!r}")


class NormalSide(Enum):
    """Side on which an account's balance is reported as positive."""
    DEBIT = "Debit"
    CREDIT = "Credit"

    @classmethod
    def parse(cls, value: Any) -> "NormalSide":
        """Accept an enum member or a case-insensitive name/value."""
        if isinstance(value, cls):
            return value
        text = str(value or "").strip().lower()
        for member in cls:
            if text in (member.value.lower(), member.name.lower()):
                return member
        raise ValueError(f"Unknown normal side: {value!r}")

    @classmethod
    def default_for(cls, account_type: AccountType) -> "NormalSide":
        """Asset and Expense accounts are debit-normal, everything else credit-normal."""
        if account_type in (AccountType.ASSET, AccountType.EXPENSE):
            return cls.DEBIT
        return cls.CREDIT


class EntryStatus(Enum):
    """Journal entry status. Entries post immediately."""
    POSTED = "Posted"


def to_decimal(value: Any) -> Decimal:
    """
    Coerce a stored or user-supplied amount to Decimal.

    None, blanks, non-numeric text and non-finite numbers become zero.
    Thousands separators in strings are accepted ("1,250.00").
    """
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value if value.is_finite() else ZERO
    if isinstance(value, (int, float)):
        try:
            result = Decimal(str(value))
        except InvalidOperation:
            return ZERO
        return result if result.is_finite() else ZERO
    if isinstance(value, str):
        text = value.strip().replace(",", "")
        if not text:
            return ZERO
        try:
            result = Decimal(text)
        except InvalidOperation:
            return ZERO
        return result if result.is_finite() else ZERO
    return ZERO


def iso_date(value: Any) -> str:
    """Normalize a date, datetime or ISO string to 'YYYY-MM-DD'."""
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return str(value or "").strip()


def new_id(prefix: str) -> str:
    """Generate an opaque identifier that is never reused."""
    return f"{prefix}_{uuid.uuid4().hex}"


def now_timestamp() -> str:
    """Posting timestamp in ISO format."""
    return datetime.now().isoformat(timespec="microseconds")


@dataclass
class Account:
    """Represents an account in the Chart of Accounts."""

    id: str
    code: str
    name: str
    account_type: AccountType
    normal_side: NormalSide

    def __post_init__(self):
        self.account_type = AccountType.parse(self.account_type)
        self.normal_side = NormalSide.parse(self.normal_side)

    @property
    def label(self) -> str:
        return f"{self.code} - {self.name}"

    @classmethod
    def from_row(cls, row) -> "Account":
        """Create Account from database row."""
        return cls(
            id=row["id"],
            code=row["code"],
            name=row["name"],
            account_type=row["account_type"],
            normal_side=row["normal_side"],
        )


@dataclass
class JournalEntry:
    """Header of a posted journal entry. Lines are stored separately."""

    id: str
    date: str
    description: str
    reference: str = ""
    status: EntryStatus = EntryStatus.POSTED
    created_at: str = field(default_factory=now_timestamp)

    def __post_init__(self):
        self.date = iso_date(self.date)
        if not isinstance(self.status, EntryStatus):
            self.status = EntryStatus(self.status)

    @classmethod
    def from_row(cls, row) -> "JournalEntry":
        """Create JournalEntry from database row."""
        return cls(
            id=row["id"],
            date=row["date"],
            description=row["description"],
            reference=row["reference"] or "",
            status=row["status"],
            created_at=row["created_at"],
        )


@dataclass
class JournalLine:
    """Represents a single debit or credit line in a journal entry."""

    id: str
    entry_id: str
    account_id: str
    debit: Decimal = ZERO
    credit: Decimal = ZERO
    description: str = ""
    seq: int = 0

    def __post_init__(self):
        """Convert numeric fields to Decimal."""
        self.debit = to_decimal(self.debit)
        self.credit = to_decimal(self.credit)

    @property
    def net(self) -> Decimal:
        """Raw contribution to the account: debit - credit."""
        return self.debit - self.credit

    @classmethod
    def from_row(cls, row) -> "JournalLine":
        """Create JournalLine from database row."""
        return cls(
            id=row["id"],
            entry_id=row["entry_id"],
            account_id=row["account_id"],
            debit=row["debit"],
            credit=row["credit"],
            description=row["description"] or "",
            seq=int(row["seq"] or 0),
        )


def index_by_id(records) -> Dict[str, Any]:
    """Map record id -> record."""
    return {record.id: record for record in records}


def find_account_by_code(accounts, code: str) -> Optional[Account]:
    """First account with the given code, or None."""
    for account in accounts:
        if account.code == code:
            return account
    return None
