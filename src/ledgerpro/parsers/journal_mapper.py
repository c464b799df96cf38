"""
Maps classified document items to proposed two-line journal entries.

Default account pairs by category:

    Asset      Dr first non-cash asset    Cr cash
    Liability  Dr cash                    Cr first liability
    Revenue    Dr cash                    Cr first revenue
    Expense    Dr first expense           Cr cash

When a role cannot be filled (no such account, or no cash account) the
first account of the chart is used instead and the candidate is flagged
for review.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional, Sequence

from ledgerpro.core.models import Account, AccountType
from ledgerpro.parsers.classifier import ClassifiedItem


@dataclass
class AccountSelection:
    debit: Optional[Account]
    credit: Optional[Account]
    needs_review: bool = False


@dataclass
class CandidateEntry:
    """A proposed journal entry the user may edit, select or discard."""
    description: str
    amount: Decimal
    category: AccountType
    debit_account: Optional[Account]
    credit_account: Optional[Account]
    selected: bool = True
    needs_review: bool = False
    original_line: str = ""

    @property
    def debit_account_id(self) -> Optional[str]:
        return self.debit_account.id if self.debit_account else None

    @property
    def credit_account_id(self) -> Optional[str]:
        return self.credit_account.id if self.credit_account else None


def _first_of_type(accounts: Sequence[Account], account_type: AccountType,
                   exclude_code: Optional[str] = None) -> Optional[Account]:
    for account in accounts:
        if account.account_type == account_type and account.code != exclude_code:
            return account
    return None


def _by_code(accounts: Sequence[Account], code: str) -> Optional[Account]:
    for account in accounts:
        if account.code == code:
            return account
    return None


def select_accounts(
    category: AccountType,
    accounts: Sequence[Account],
    cash_code: str = "1000",
) -> AccountSelection:
    """Default debit/credit accounts for a category."""
    accounts = list(accounts)
    if not accounts:
        return AccountSelection(debit=None, credit=None, needs_review=True)

    cash = _by_code(accounts, cash_code)
    if category == AccountType.ASSET:
        debit = _first_of_type(accounts, AccountType.ASSET, exclude_code=cash_code)
        credit = cash
    elif category == AccountType.LIABILITY:
        debit = cash
        credit = _first_of_type(accounts, AccountType.LIABILITY)
    elif category == AccountType.REVENUE:
        debit = cash
        credit = _first_of_type(accounts, AccountType.REVENUE)
    elif category == AccountType.EXPENSE:
        debit = _first_of_type(accounts, AccountType.EXPENSE)
        credit = cash
    else:
        debit = credit = None

    needs_review = debit is None or credit is None
    return AccountSelection(
        debit=debit or accounts[0],
        credit=credit or accounts[0],
        needs_review=needs_review,
    )


def map_to_journal_entries(
    items: Sequence[ClassifiedItem],
    accounts: Sequence[Account],
    cash_code: str = "1000",
) -> List[CandidateEntry]:
    """One selected CandidateEntry per classified item."""
    candidates = []
    for item in items:
        selection = select_accounts(item.category, accounts, cash_code)
        candidates.append(CandidateEntry(
            description=item.description,
            amount=item.amount,
            category=item.category,
            debit_account=selection.debit,
            credit_account=selection.credit,
            selected=True,
            needs_review=selection.needs_review,
            original_line=item.original_line,
        ))
    return candidates
