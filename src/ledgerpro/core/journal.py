"""
Double-entry journal engine with balance validation.

Ensures all journal entries follow accounting principles:
- Sum of Debits = Sum of Credits (within POSTING_TOLERANCE)
- At least two lines carrying an account and an amount
- Entries and their lines are written all-or-nothing

Drafts are plain caller-owned values; validate_draft() is a pure function
and JournalEngine.post() is the only way a draft reaches the store.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional, Tuple
import logging

from ledgerpro.core.exceptions import (
    AccountNotFoundError,
    EntryNotFoundError,
    UnbalancedJournalError,
    ValidationError,
)
from ledgerpro.core.models import (
    POSTING_TOLERANCE,
    ZERO,
    Account,
    EntryStatus,
    JournalEntry,
    JournalLine,
    index_by_id,
    iso_date,
    new_id,
    to_decimal,
)
from ledgerpro.core.store import LedgerStore

logger = logging.getLogger(__name__)

CANDIDATE_DESCRIPTION_LIMIT = 80


def epoch_millis() -> int:
    return int(datetime.now().timestamp() * 1000)


def parse_entry_date(value: Any) -> date:
    """
    Parse an entry date.

    Any form date.fromisoformat() accepts is allowed; entries are stored
    as 'YYYY-MM-DD' so that date filters can compare them as text.
    """
    try:
        return date.fromisoformat(iso_date(value))
    except ValueError as e:
        raise ValidationError(f"Invalid date: {value}", field="date") from e


@dataclass
class DraftLine:
    """A line being edited. Amounts may be blank, strings or numbers."""

    account_id: Optional[str] = None
    debit: Any = ZERO
    credit: Any = ZERO
    description: str = ""

    def __post_init__(self):
        self.debit = to_decimal(self.debit)
        self.credit = to_decimal(self.credit)
        if self.account_id is not None:
            self.account_id = str(self.account_id).strip() or None

    @property
    def has_amount(self) -> bool:
        return self.debit > ZERO or self.credit > ZERO

    @property
    def qualifies(self) -> bool:
        """Counts toward the entry: has an account and a positive amount."""
        return self.account_id is not None and self.has_amount


@dataclass
class DraftEntry:
    """An unposted journal entry owned by the caller."""

    date: Any = None
    description: str = ""
    reference: str = ""
    lines: List[DraftLine] = field(default_factory=list)

    def add_line(self, account_id=None, debit=ZERO, credit=ZERO, description="") -> DraftLine:
        line = DraftLine(account_id=account_id, debit=debit, credit=credit, description=description)
        self.lines.append(line)
        return line

    @property
    def total_debit(self) -> Decimal:
        return sum((line.debit for line in self.lines if line.qualifies), ZERO)

    @property
    def total_credit(self) -> Decimal:
        return sum((line.credit for line in self.lines if line.qualifies), ZERO)

    @property
    def difference(self) -> Decimal:
        return self.total_debit - self.total_credit

    @property
    def is_balanced(self) -> bool:
        return abs(self.difference) < POSTING_TOLERANCE


def validate_draft(
    draft: DraftEntry,
    accounts: Optional[Iterable[Account]] = None,
) -> List[DraftLine]:
    """
    Validate a draft entry before posting.

    Args:
        draft: The draft to check
        accounts: Known accounts; when given, every referenced account must exist

    Returns:
        The qualifying lines (account set and a positive amount), in draft order

    Raises:
        ValidationError: Missing header fields or malformed lines
        AccountNotFoundError: A line references an unknown account
        UnbalancedJournalError: Debits and credits differ by POSTING_TOLERANCE or more
    """
    if not iso_date(draft.date) or not (draft.description or "").strip():
        raise ValidationError("Please fill in date and description")
    parse_entry_date(draft.date)

    for line in draft.lines:
        if line.debit < ZERO or line.credit < ZERO:
            raise ValidationError("Amounts cannot be negative", field="amount")
        if line.debit > ZERO and line.credit > ZERO:
            raise ValidationError(
                "A line cannot have both a debit and a credit amount", field="amount"
            )
        if line.has_amount and line.account_id is None:
            raise ValidationError("Please select an account for every line with an amount",
                                  field="account")

    qualifying = [line for line in draft.lines if line.qualifies]

    if accounts is not None:
        known = {account.id for account in accounts}
        for line in qualifying:
            if line.account_id not in known:
                raise AccountNotFoundError(line.account_id)

    total_debit = sum((line.debit for line in qualifying), ZERO)
    total_credit = sum((line.credit for line in qualifying), ZERO)

    if abs(total_debit - total_credit) >= POSTING_TOLERANCE:
        raise UnbalancedJournalError(total_debit=total_debit, total_credit=total_credit)

    if total_debit <= ZERO:
        raise ValidationError("Entry has no amounts")

    if len(qualifying) < 2:
        raise ValidationError("At least 2 lines with accounts and amounts required")

    return qualifying


@dataclass
class EntryView:
    """A posted entry with its lines, for history listings."""

    entry: JournalEntry
    lines: List[JournalLine]
    accounts: Dict[str, Account] = field(default_factory=dict)

    @property
    def total_debit(self) -> Decimal:
        return sum((line.debit for line in self.lines), ZERO)

    @property
    def total_credit(self) -> Decimal:
        return sum((line.credit for line in self.lines), ZERO)

    def account_label(self, line: JournalLine) -> str:
        account = self.accounts.get(line.account_id)
        return account.label if account else f"Unknown account ({line.account_id})"


def entry_history(
    entries: Iterable[JournalEntry],
    lines: Iterable[JournalLine],
    accounts: Iterable[Account],
    limit: Optional[int] = None,
) -> List[EntryView]:
    """
    Entries newest first (by date, then most recently created), each with
    its lines in seq order.
    """
    lines_by_entry: Dict[str, List[JournalLine]] = {}
    for line in lines:
        lines_by_entry.setdefault(line.entry_id, []).append(line)

    account_index = index_by_id(accounts)
    ordered = sorted(entries, key=lambda e: (e.date, e.created_at), reverse=True)
    if limit is not None:
        ordered = ordered[:limit]

    return [
        EntryView(
            entry=entry,
            lines=sorted(lines_by_entry.get(entry.id, []), key=lambda l: l.seq),
            accounts=account_index,
        )
        for entry in ordered
    ]


class JournalEngine:
    """
    Engine for posting and removing double-entry journal entries.

    Usage:
        engine = JournalEngine(store)

        draft = DraftEntry(date="2024-01-15", description="Cash sale")
        draft.add_line("acc_1000", debit="500")
        draft.add_line("acc_4000", credit="500")

        entry = engine.post(draft)
    """

    def __init__(self, store: LedgerStore):
        """
        Initialize the journal engine.

        Args:
            store: Ledger store holding accounts, entries and lines
        """
        self.store = store

    def post(self, draft: DraftEntry) -> JournalEntry:
        """
        Validate a draft and write it with its lines in one transaction.

        Returns:
            The posted JournalEntry

        Raises:
            ValidationError / UnbalancedJournalError / AccountNotFoundError
        """
        qualifying = validate_draft(draft, self.store.list_accounts())

        reference = (draft.reference or "").strip() or f"JE-{epoch_millis()}"
        entry = JournalEntry(
            id=new_id("je"),
            date=parse_entry_date(draft.date).isoformat(),
            description=draft.description.strip(),
            reference=reference,
            status=EntryStatus.POSTED,
        )
        lines = [
            JournalLine(
                id=new_id("jl"),
                entry_id=entry.id,
                account_id=line.account_id,
                debit=line.debit,
                credit=line.credit,
                description=(line.description or "").strip(),
                seq=seq,
            )
            for seq, line in enumerate(qualifying, start=1)
        ]

        with self.store.atomic():
            self.store.put_entry(entry)
            for line in lines:
                self.store.put_line(line)

        total = sum((line.debit for line in lines), ZERO)
        logger.info(f"Posted entry {entry.reference} ({entry.date}) with {len(lines)} lines, total {total}")
        return entry

    def delete_entry(self, entry_id: str) -> None:
        """Delete an entry and all of its lines."""
        entry = self.store.get_entry(entry_id)
        if entry is None:
            raise EntryNotFoundError(entry_id)

        with self.store.atomic():
            self.store.delete_lines_for_entry(entry_id)
            self.store.delete_entry(entry_id)

        logger.info(f"Deleted entry {entry.reference} ({entry_id})")

    def get_entry(self, entry_id: str) -> Tuple[JournalEntry, List[JournalLine]]:
        """Get an entry with its lines in seq order."""
        entry = self.store.get_entry(entry_id)
        if entry is None:
            raise EntryNotFoundError(entry_id)
        return entry, self.store.lines_for_entry(entry_id)

    def history(self, limit: Optional[int] = None) -> List[EntryView]:
        """Most recent entries first."""
        return entry_history(
            self.store.list_entries(),
            self.store.list_lines(),
            self.store.list_accounts(),
            limit=limit,
        )

    def commit_candidates(self, candidates, entry_date=None) -> List[str]:
        """
        Post each selected import candidate as a two-line entry.

        Candidates need description, amount, debit_account_id,
        credit_account_id and selected attributes. Candidates missing an
        account are skipped with a warning. The whole batch is written in
        one transaction.

        Returns:
            Ids of the created entries
        """
        entry_date = parse_entry_date(entry_date or date.today()).isoformat()
        created: List[str] = []

        with self.store.atomic():
            for candidate in candidates:
                if not candidate.selected:
                    continue
                if not candidate.debit_account_id or not candidate.credit_account_id:
                    logger.warning(
                        f"Skipping candidate without accounts: {candidate.description!r}"
                    )
                    continue

                draft = DraftEntry(
                    date=entry_date,
                    description=candidate.description[:CANDIDATE_DESCRIPTION_LIMIT],
                    reference=f"PDF-{epoch_millis()}",
                )
                draft.add_line(candidate.debit_account_id, debit=candidate.amount)
                draft.add_line(candidate.credit_account_id, credit=candidate.amount)
                entry = self.post(draft)
                created.append(entry.id)

        logger.info(f"Committed {len(created)} imported entries")
        return created
