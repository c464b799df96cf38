"""
Financial statement derivation.

Builds the Trial Balance, Income Statement, Balance Sheet, General Ledger
and Dashboard views from snapshots of accounts, journal lines and entries.
Every function here is pure: the same inputs always give the same figures,
and malformed data degrades to zero rather than raising. The balance sheet
and trial balance carry an is_balanced flag instead of failing.

Statements expose rows() for rendering. Each ReportRow has a kind:
    section  - heading for a group of items
    item     - one account
    subtotal - group total (bold)
    total    - grand total
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any, Dict, Iterable, Iterator, List, Optional
import logging

from ledgerpro.core.balance import (
    AccountBalance,
    balances_by_type,
    compute_balances,
    filter_lines_by_date,
    posting_order_key,
    signed_balance,
    total_display,
)
from ledgerpro.core.journal import EntryView, entry_history
from ledgerpro.core.models import (
    STATEMENT_TOLERANCE,
    ZERO,
    Account,
    AccountType,
    JournalEntry,
    JournalLine,
    index_by_id,
)

logger = logging.getLogger(__name__)

NET_INCOME_LABEL = "Net Income (Current Period)"


@dataclass
class ReportRow:
    """One rendered statement row."""
    label: str
    amount: Optional[Decimal] = None
    kind: str = "item"


@dataclass
class StatementLine:
    """An account and the amount it contributes to a statement."""
    account_id: Optional[str]
    code: str
    name: str
    amount: Decimal

    @classmethod
    def from_balance(cls, balance: AccountBalance) -> "StatementLine":
        return cls(
            account_id=balance.account.id,
            code=balance.account.code,
            name=balance.account.name,
            amount=balance.display_balance,
        )


def _today() -> str:
    return date.today().isoformat()


def _require_entries(entries, bound: str) -> None:
    if entries is None:
        raise ValueError(f"{bound} needs the journal entries to date each line")


def _nonzero_lines(balances: Iterable[AccountBalance]) -> List[StatementLine]:
    return [StatementLine.from_balance(b) for b in balances if b.display_balance != ZERO]


def compute_net_income(balances: Iterable[AccountBalance]) -> Decimal:
    """Revenue display balances minus Expense display balances."""
    revenue = ZERO
    expense = ZERO
    for balance in balances:
        if balance.account.account_type == AccountType.REVENUE:
            revenue += balance.display_balance
        elif balance.account.account_type == AccountType.EXPENSE:
            expense += balance.display_balance
    return revenue - expense


# ---------------------------------------------------------------------------
# Trial Balance
# ---------------------------------------------------------------------------

@dataclass
class TrialBalanceRow:
    code: str
    name: str
    account_type: AccountType
    debit: Decimal
    credit: Decimal


@dataclass
class TrialBalance:
    """Gross debit and credit totals of every account with activity."""
    as_of: str
    accounts: List[TrialBalanceRow] = field(default_factory=list)

    title = "Trial Balance"

    @property
    def total_debit(self) -> Decimal:
        return sum((row.debit for row in self.accounts), ZERO)

    @property
    def total_credit(self) -> Decimal:
        return sum((row.credit for row in self.accounts), ZERO)

    @property
    def difference(self) -> Decimal:
        return self.total_debit - self.total_credit

    @property
    def is_balanced(self) -> bool:
        return abs(self.difference) < STATEMENT_TOLERANCE

    def to_records(self) -> List[Dict[str, Any]]:
        records = [
            {
                "Code": row.code,
                "Account": row.name,
                "Type": row.account_type.value,
                "Debit": row.debit,
                "Credit": row.credit,
            }
            for row in self.accounts
        ]
        records.append({
            "Code": "",
            "Account": "TOTALS",
            "Type": "",
            "Debit": self.total_debit,
            "Credit": self.total_credit,
        })
        return records


def trial_balance(
    accounts: Iterable[Account],
    lines: Iterable[JournalLine],
    as_of: Optional[str] = None,
    entries: Optional[Iterable[JournalEntry]] = None,
) -> TrialBalance:
    """
    Build the trial balance.

    With as_of only lines of entries dated on or before as_of are counted;
    entries must then be given so each line can be dated.
    """
    if as_of:
        _require_entries(entries, "as_of")
        lines = filter_lines_by_date(lines, entries, end_date=as_of)

    rows = [
        TrialBalanceRow(
            code=b.account.code,
            name=b.account.name,
            account_type=b.account.account_type,
            debit=b.debit_total,
            credit=b.credit_total,
        )
        for b in compute_balances(accounts, lines)
        if b.has_activity
    ]
    rows.sort(key=lambda r: r.code)
    return TrialBalance(as_of=as_of or _today(), accounts=rows)


# ---------------------------------------------------------------------------
# Income Statement
# ---------------------------------------------------------------------------

@dataclass
class IncomeStatement:
    period_start: Optional[str]
    period_end: str
    revenue: List[StatementLine] = field(default_factory=list)
    cogs: List[StatementLine] = field(default_factory=list)
    operating_expenses: List[StatementLine] = field(default_factory=list)
    total_revenue: Decimal = ZERO
    cost_of_goods_sold: Decimal = ZERO
    total_operating_expenses: Decimal = ZERO
    net_income: Decimal = ZERO

    title = "Income Statement"

    @property
    def gross_profit(self) -> Decimal:
        return self.total_revenue - self.cost_of_goods_sold

    @property
    def total_expenses(self) -> Decimal:
        return self.cost_of_goods_sold + self.total_operating_expenses

    @property
    def subtitle(self) -> str:
        if self.period_start:
            return f"For the period {self.period_start} to {self.period_end}"
        return f"For the period ended {self.period_end}"

    def rows(self) -> Iterator[ReportRow]:
        yield ReportRow("Revenue", kind="section")
        for line in self.revenue:
            yield ReportRow(line.name, line.amount)
        yield ReportRow("Total Revenue", self.total_revenue, "subtotal")

        if self.cogs:
            yield ReportRow("Cost of Goods Sold", kind="section")
            for line in self.cogs:
                yield ReportRow(line.name, line.amount)
            yield ReportRow("Gross Profit", self.gross_profit, "subtotal")

        yield ReportRow("Operating Expenses", kind="section")
        for line in self.operating_expenses:
            yield ReportRow(line.name, line.amount)
        yield ReportRow("Total Operating Expenses", self.total_operating_expenses, "subtotal")

        yield ReportRow("Net Income (Loss)", self.net_income, "total")

    def to_records(self) -> List[Dict[str, Any]]:
        return [
            {"Line": row.label, "Amount": row.amount, "Kind": row.kind}
            for row in self.rows()
        ]


def income_statement(
    accounts: Iterable[Account],
    lines: Iterable[JournalLine],
    cogs_code: str = "5000",
    period_start: Optional[str] = None,
    period_end: Optional[str] = None,
    entries: Optional[Iterable[JournalEntry]] = None,
) -> IncomeStatement:
    """
    Build the income statement.

    The expense account coded cogs_code is reported as Cost of Goods Sold;
    Gross Profit = Total Revenue - COGS and Net Income = Gross Profit -
    Total Operating Expenses. Period bounds need entries to date each line.
    """
    if period_start or period_end:
        _require_entries(entries, "period bounds")
        lines = filter_lines_by_date(lines, entries, period_start, period_end)

    grouped = balances_by_type(compute_balances(accounts, lines))
    revenue = grouped[AccountType.REVENUE]
    expenses = grouped[AccountType.EXPENSE]
    cogs = [b for b in expenses if b.account.code == cogs_code]
    operating = [b for b in expenses if b.account.code != cogs_code]

    statement = IncomeStatement(
        period_start=period_start,
        period_end=period_end or _today(),
        revenue=_nonzero_lines(revenue),
        cogs=_nonzero_lines(cogs),
        operating_expenses=_nonzero_lines(operating),
        total_revenue=total_display(revenue),
        cost_of_goods_sold=total_display(cogs),
        total_operating_expenses=total_display(operating),
        net_income=compute_net_income(revenue + expenses),
    )
    return statement


# ---------------------------------------------------------------------------
# Balance Sheet
# ---------------------------------------------------------------------------

@dataclass
class BalanceSheet:
    as_of: str
    assets: List[StatementLine] = field(default_factory=list)
    liabilities: List[StatementLine] = field(default_factory=list)
    equity: List[StatementLine] = field(default_factory=list)
    net_income: Decimal = ZERO
    total_assets: Decimal = ZERO
    total_liabilities: Decimal = ZERO
    total_equity: Decimal = ZERO

    title = "Balance Sheet"

    @property
    def subtitle(self) -> str:
        return f"As of {self.as_of}"

    @property
    def total_liabilities_and_equity(self) -> Decimal:
        return self.total_liabilities + self.total_equity

    @property
    def difference(self) -> Decimal:
        return self.total_assets - self.total_liabilities_and_equity

    @property
    def is_balanced(self) -> bool:
        return abs(self.difference) < STATEMENT_TOLERANCE

    def rows(self) -> Iterator[ReportRow]:
        yield ReportRow("Assets", kind="section")
        for line in self.assets:
            yield ReportRow(line.name, line.amount)
        yield ReportRow("Total Assets", self.total_assets, "total")

        yield ReportRow("Liabilities", kind="section")
        for line in self.liabilities:
            yield ReportRow(line.name, line.amount)
        yield ReportRow("Total Liabilities", self.total_liabilities, "subtotal")

        yield ReportRow("Equity", kind="section")
        for line in self.equity:
            yield ReportRow(line.name, line.amount)
        yield ReportRow("Total Equity", self.total_equity, "subtotal")

        yield ReportRow("Total Liabilities & Equity", self.total_liabilities_and_equity, "total")

    def to_records(self) -> List[Dict[str, Any]]:
        return [
            {"Line": row.label, "Amount": row.amount, "Kind": row.kind}
            for row in self.rows()
        ]


def balance_sheet(
    accounts: Iterable[Account],
    lines: Iterable[JournalLine],
    as_of: Optional[str] = None,
    entries: Optional[Iterable[JournalEntry]] = None,
) -> BalanceSheet:
    """
    Build the balance sheet.

    Equity includes current-period net income as a synthetic line, so a
    ledger of balanced entries always satisfies
    Assets = Liabilities + Equity.
    """
    if as_of:
        _require_entries(entries, "as_of")
        lines = filter_lines_by_date(lines, entries, end_date=as_of)

    balances = compute_balances(accounts, lines)
    grouped = balances_by_type(balances)
    net_income = compute_net_income(balances)

    equity_lines = _nonzero_lines(grouped[AccountType.EQUITY])
    if net_income != ZERO:
        equity_lines.append(
            StatementLine(account_id=None, code="", name=NET_INCOME_LABEL, amount=net_income)
        )

    return BalanceSheet(
        as_of=as_of or _today(),
        assets=_nonzero_lines(grouped[AccountType.ASSET]),
        liabilities=_nonzero_lines(grouped[AccountType.LIABILITY]),
        equity=equity_lines,
        net_income=net_income,
        total_assets=total_display(grouped[AccountType.ASSET]),
        total_liabilities=total_display(grouped[AccountType.LIABILITY]),
        total_equity=total_display(grouped[AccountType.EQUITY]) + net_income,
    )


# ---------------------------------------------------------------------------
# General Ledger
# ---------------------------------------------------------------------------

@dataclass
class LedgerRow:
    """A posted line with the account's running balance after it."""
    entry_id: str
    date: str
    reference: str
    description: str
    debit: Decimal
    credit: Decimal
    balance: Decimal


@dataclass
class LedgerAccount:
    account: Account
    rows: List[LedgerRow] = field(default_factory=list)

    @property
    def total_debit(self) -> Decimal:
        return sum((row.debit for row in self.rows), ZERO)

    @property
    def total_credit(self) -> Decimal:
        return sum((row.credit for row in self.rows), ZERO)

    @property
    def closing_balance(self) -> Decimal:
        return self.rows[-1].balance if self.rows else ZERO


@dataclass
class GeneralLedger:
    start_date: Optional[str]
    end_date: Optional[str]
    accounts: List[LedgerAccount] = field(default_factory=list)

    title = "General Ledger"

    def to_records(self) -> List[Dict[str, Any]]:
        records = []
        for section in self.accounts:
            for row in section.rows:
                records.append({
                    "Code": section.account.code,
                    "Account": section.account.name,
                    "Date": row.date,
                    "Reference": row.reference,
                    "Description": row.description,
                    "Debit": row.debit,
                    "Credit": row.credit,
                    "Balance": row.balance,
                })
        return records


def general_ledger(
    accounts: Iterable[Account],
    lines: Iterable[JournalLine],
    entries: Iterable[JournalEntry],
    account_id: Optional[str] = None,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
) -> GeneralLedger:
    """
    Build the general ledger: per account, its lines in posting order with
    a running balance re-signed for the account's normal side.
    """
    entries = list(entries)
    entry_index = index_by_id(entries)
    lines = filter_lines_by_date(lines, entries, start_date, end_date)

    selected = sorted(accounts, key=lambda a: a.code)
    if account_id is not None:
        selected = [a for a in selected if a.id == account_id]

    lines_by_account: Dict[str, List[JournalLine]] = {}
    for line in lines:
        lines_by_account.setdefault(line.account_id, []).append(line)

    order = posting_order_key(entries)
    sections = []
    for account in selected:
        account_lines = sorted(lines_by_account.get(account.id, []), key=order)
        if not account_lines:
            continue

        running = ZERO
        section = LedgerAccount(account=account)
        for line in account_lines:
            running += line.debit - line.credit
            entry = entry_index.get(line.entry_id)
            section.rows.append(LedgerRow(
                entry_id=line.entry_id,
                date=entry.date if entry else "",
                reference=entry.reference if entry else "",
                description=line.description or (entry.description if entry else ""),
                debit=line.debit,
                credit=line.credit,
                balance=signed_balance(running, account.normal_side),
            ))
        sections.append(section)

    return GeneralLedger(start_date=start_date, end_date=end_date, accounts=sections)


# ---------------------------------------------------------------------------
# Dashboard
# ---------------------------------------------------------------------------

@dataclass
class DashboardSummary:
    total_assets: Decimal
    total_liabilities: Decimal
    total_revenue: Decimal
    total_expenses: Decimal
    net_income: Decimal
    active_accounts: int
    entry_count: int
    is_balanced: bool
    recent_entries: List[EntryView] = field(default_factory=list)

    @property
    def owner_equity(self) -> Decimal:
        return self.total_assets - self.total_liabilities


def dashboard_summary(
    accounts: Iterable[Account],
    lines: Iterable[JournalLine],
    entries: Iterable[JournalEntry],
    recent_limit: int = 7,
) -> DashboardSummary:
    """Headline figures plus the most recent entries."""
    accounts = list(accounts)
    lines = list(lines)
    entries = list(entries)

    balances = compute_balances(accounts, lines)
    grouped = balances_by_type(balances)
    sheet = balance_sheet(accounts, lines)

    return DashboardSummary(
        total_assets=sheet.total_assets,
        total_liabilities=sheet.total_liabilities,
        total_revenue=total_display(grouped[AccountType.REVENUE]),
        total_expenses=total_display(grouped[AccountType.EXPENSE]),
        net_income=compute_net_income(balances),
        active_accounts=sum(1 for b in balances if b.display_balance != ZERO),
        entry_count=len(entries),
        is_balanced=sheet.is_balanced,
        recent_entries=entry_history(entries, lines, accounts, limit=recent_limit),
    )
