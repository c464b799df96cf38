"""
Balance engine: folds journal lines into per-account balances.

raw balance     = sum(debit) - sum(credit)
display balance = raw balance for debit-normal accounts, -raw otherwise

Everything here is a pure function over in-memory snapshots and never
raises on malformed amounts (they were already coerced to zero by the
model layer).
"""

from collections import OrderedDict
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Tuple
import logging

from ledgerpro.core.models import (
    ZERO,
    Account,
    AccountType,
    JournalEntry,
    JournalLine,
    NormalSide,
    index_by_id,
)

logger = logging.getLogger(__name__)


@dataclass
class AccountBalance:
    """Aggregated figures for one account."""

    account: Account
    debit_total: Decimal = ZERO
    credit_total: Decimal = ZERO

    @property
    def raw_balance(self) -> Decimal:
        return self.debit_total - self.credit_total

    @property
    def display_balance(self) -> Decimal:
        return signed_balance(self.raw_balance, self.account.normal_side)

    @property
    def has_activity(self) -> bool:
        """True when the account has any gross debit or credit."""
        return self.debit_total != ZERO or self.credit_total != ZERO


def signed_balance(raw: Decimal, normal_side: NormalSide) -> Decimal:
    """Re-sign a raw (debit - credit) balance for display."""
    if normal_side == NormalSide.DEBIT:
        return raw
    return -raw


def account_totals(lines: Iterable[JournalLine]) -> Dict[str, Tuple[Decimal, Decimal]]:
    """Gross (debit, credit) sums per account_id."""
    totals: Dict[str, Tuple[Decimal, Decimal]] = {}
    for line in lines:
        debit, credit = totals.get(line.account_id, (ZERO, ZERO))
        totals[line.account_id] = (debit + line.debit, credit + line.credit)
    return totals


def compute_balances(
    accounts: Iterable[Account],
    lines: Iterable[JournalLine],
) -> List[AccountBalance]:
    """
    Compute one AccountBalance per account, in input account order.

    Lines that reference an unknown account are ignored.
    """
    accounts = list(accounts)
    totals = account_totals(lines)

    known = {account.id for account in accounts}
    orphans = [account_id for account_id in totals if account_id not in known]
    if orphans:
        logger.debug(f"Ignoring lines for unknown accounts: {sorted(orphans)}")

    balances = []
    for account in accounts:
        debit, credit = totals.get(account.id, (ZERO, ZERO))
        balances.append(AccountBalance(account=account, debit_total=debit, credit_total=credit))
    return balances


def balances_by_type(
    balances: Iterable[AccountBalance],
) -> "OrderedDict[AccountType, List[AccountBalance]]":
    """Group balances by account type, each group sorted by account code."""
    grouped: "OrderedDict[AccountType, List[AccountBalance]]" = OrderedDict(
        (account_type, []) for account_type in AccountType
    )
    for balance in balances:
        grouped[balance.account.account_type].append(balance)
    for group in grouped.values():
        group.sort(key=lambda b: b.account.code)
    return grouped


def total_display(balances: Iterable[AccountBalance]) -> Decimal:
    return sum((b.display_balance for b in balances), ZERO)


def filter_lines_by_date(
    lines: Iterable[JournalLine],
    entries: Iterable[JournalEntry],
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
) -> List[JournalLine]:
    """
    Keep lines whose parent entry date falls in [start_date, end_date].

    Both bounds are inclusive ISO dates and optional. With no bounds every
    line is kept; otherwise lines whose entry is unknown are dropped.
    """
    lines = list(lines)
    if not start_date and not end_date:
        return lines

    entry_dates = {entry.id: entry.date for entry in entries}
    kept = []
    for line in lines:
        entry_date = entry_dates.get(line.entry_id)
        if entry_date is None:
            continue
        if start_date and entry_date < start_date:
            continue
        if end_date and entry_date > end_date:
            continue
        kept.append(line)
    return kept


def posting_order_key(entries: Iterable[JournalEntry]):
    """
    Sort key for lines in posting order.

    Lines follow their parent entry (created_at, then id), then seq.
    Lines whose entry is unknown sort last.
    """
    by_id = index_by_id(entries)

    def key(line: JournalLine):
        entry = by_id.get(line.entry_id)
        if entry is None:
            return (1, "", line.entry_id, line.seq)
        return (0, entry.created_at, entry.id, line.seq)

    return key
