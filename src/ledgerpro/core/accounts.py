"""
Chart of Accounts management for LedgerPro.

Provides the default small-business chart (33 accounts across the five
account types) and the ChartOfAccounts service that adds, edits and deletes
accounts while protecting accounts that journal lines still reference.
"""

from typing import Optional, List, Dict, Any
import logging

from ledgerpro.core.exceptions import (
    AccountInUseError,
    AccountNotFoundError,
    ValidationError,
)
from ledgerpro.core.models import Account, AccountType, NormalSide, new_id
from ledgerpro.core.store import LedgerStore

logger = logging.getLogger(__name__)


# Chart of Accounts - seeded into an empty ledger
CHART_OF_ACCOUNTS: Dict[str, Dict[str, Any]] = {
    # Assets (1xxx)
    "1000": {"name": "Cash & Cash Equivalents", "type": "Asset", "normal": "Debit"},
    "1100": {"name": "Accounts Receivable", "type": "Asset", "normal": "Debit"},
    "1200": {"name": "Notes Receivable", "type": "Asset", "normal": "Debit"},
    "1300": {"name": "Inventory", "type": "Asset", "normal": "Debit"},
    "1400": {"name": "Prepaid Expenses", "type": "Asset", "normal": "Debit"},
    "1500": {"name": "Short-term Investments", "type": "Asset", "normal": "Debit"},
    "1600": {"name": "Property & Equipment", "type": "Asset", "normal": "Debit"},
    "1700": {"name": "Accumulated Depreciation", "type": "Asset", "normal": "Credit"},
    "1800": {"name": "Intangible Assets", "type": "Asset", "normal": "Debit"},

    # Liabilities (2xxx)
    "2000": {"name": "Accounts Payable", "type": "Liability", "normal": "Credit"},
    "2100": {"name": "Notes Payable", "type": "Liability", "normal": "Credit"},
    "2200": {"name": "Accrued Liabilities", "type": "Liability", "normal": "Credit"},
    "2300": {"name": "Deferred Revenue", "type": "Liability", "normal": "Credit"},
    "2400": {"name": "Income Tax Payable", "type": "Liability", "normal": "Credit"},
    "2500": {"name": "Long-term Debt", "type": "Liability", "normal": "Credit"},

    # Equity (3xxx)
    "3000": {"name": "Common Stock", "type": "Equity", "normal": "Credit"},
    "3100": {"name": "Additional Paid-in Capital", "type": "Equity", "normal": "Credit"},
    "3200": {"name": "Retained Earnings", "type": "Equity", "normal": "Credit"},
    "3300": {"name": "Owner's Drawings", "type": "Equity", "normal": "Debit"},

    # Revenue (4xxx)
    "4000": {"name": "Sales Revenue", "type": "Revenue", "normal": "Credit"},
    "4100": {"name": "Service Revenue", "type": "Revenue", "normal": "Credit"},
    "4200": {"name": "Interest Income", "type": "Revenue", "normal": "Credit"},
    "4300": {"name": "Other Income", "type": "Revenue", "normal": "Credit"},

    # Expenses (5xxx)
    "5000": {"name": "Cost of Goods Sold", "type": "Expense", "normal": "Debit"},
    "5100": {"name": "Salaries & Wages Expense", "type": "Expense", "normal": "Debit"},
    "5200": {"name": "Rent Expense", "type": "Expense", "normal": "Debit"},
    "5300": {"name": "Utilities Expense", "type": "Expense", "normal": "Debit"},
    "5400": {"name": "Depreciation Expense", "type": "Expense", "normal": "Debit"},
    "5500": {"name": "Insurance Expense", "type": "Expense", "normal": "Debit"},
    "5600": {"name": "Advertising Expense", "type": "Expense", "normal": "Debit"},
    "5700": {"name": "Interest Expense", "type": "Expense", "normal": "Debit"},
    "5800": {"name": "Income Tax Expense", "type": "Expense", "normal": "Debit"},
    "5900": {"name": "Miscellaneous Expense", "type": "Expense", "normal": "Debit"},
}


def default_accounts() -> List[Account]:
    """Build Account records for the default chart, ids 'acc_<code>'."""
    return [
        Account(
            id=f"acc_{code}",
            code=code,
            name=details["name"],
            account_type=details["type"],
            normal_side=details["normal"],
        )
        for code, details in CHART_OF_ACCOUNTS.items()
    ]


class ChartOfAccounts:
    """
    Account management on top of a LedgerStore.

    Usage:
        chart = ChartOfAccounts(store)
        chart.setup()
        rent = chart.get_account_by_code("5200")
        chart.add_account("5950", "Bank Charges", "Expense")
    """

    def __init__(self, store: LedgerStore):
        self.store = store

    def setup(self) -> int:
        """
        Seed the default chart if the ledger has no accounts.

        Returns:
            Number of accounts created (0 if accounts already exist)
        """
        if self.store.list_accounts():
            return 0

        accounts = default_accounts()
        with self.store.atomic():
            for account in accounts:
                self.store.put_account(account)

        logger.info(f"Seeded chart of accounts with {len(accounts)} accounts")
        return len(accounts)

    def reset(self) -> int:
        """Delete all lines, entries and accounts, then re-seed the default chart."""
        self.store.clear()
        return self.setup()

    def add_account(
        self,
        code: str,
        name: str,
        account_type,
        normal_side=None,
    ) -> Account:
        """
        Create a new account.

        Args:
            code: Account code, unique within the chart
            name: Display name
            account_type: AccountType or its name ("Asset", "Expense", ...)
            normal_side: NormalSide or its name; defaults from the type

        Raises:
            ValidationError: Missing fields, bad enum values or duplicate code
        """
        code = (code or "").strip()
        name = (name or "").strip()
        if not code or not name or not account_type:
            raise ValidationError("Please fill in all fields")

        parsed_type = self._parse_type(account_type)
        side = (
            self._parse_side(normal_side)
            if normal_side
            else NormalSide.default_for(parsed_type)
        )

        if self.get_account_by_code(code) is not None:
            raise ValidationError(f"Account code already exists: {code}", field="code")

        account = Account(
            id=new_id("acc"),
            code=code,
            name=name,
            account_type=parsed_type,
            normal_side=side,
        )
        self.store.put_account(account)
        logger.info(f"Added account {account.label}")
        return account

    def edit_account(
        self,
        account_id: str,
        code: Optional[str] = None,
        name: Optional[str] = None,
        account_type=None,
        normal_side=None,
    ) -> Account:
        """Update any of code/name/type/normal side on an existing account."""
        account = self.store.get_account(account_id)
        if account is None:
            raise AccountNotFoundError(account_id)

        if code is not None:
            code = code.strip()
            if not code:
                raise ValidationError("Please fill in all fields", field="code")
            existing = self.get_account_by_code(code)
            if existing is not None and existing.id != account_id:
                raise ValidationError(f"Account code already exists: {code}", field="code")
            account.code = code

        if name is not None:
            name = name.strip()
            if not name:
                raise ValidationError("Please fill in all fields", field="name")
            account.name = name

        if account_type is not None:
            account.account_type = self._parse_type(account_type)
        if normal_side is not None:
            account.normal_side = self._parse_side(normal_side)

        self.store.put_account(account)
        logger.info(f"Updated account {account.label}")
        return account

    def delete_account(self, account_id: str) -> None:
        """
        Delete an account that no journal line references.

        Raises:
            AccountNotFoundError: Unknown account id
            AccountInUseError: Journal lines reference the account
        """
        account = self.store.get_account(account_id)
        if account is None:
            raise AccountNotFoundError(account_id)

        line_count = self.store.count_lines_for_account(account_id)
        if line_count:
            raise AccountInUseError(account_id, line_count)

        self.store.delete_account(account_id)
        logger.info(f"Deleted account {account.label}")

    def get_account(self, account_id: str) -> Account:
        account = self.store.get_account(account_id)
        if account is None:
            raise AccountNotFoundError(account_id)
        return account

    def get_account_by_code(self, code: str) -> Optional[Account]:
        """Get an account by its code, or None."""
        for account in self.store.list_accounts():
            if account.code == code:
                return account
        return None

    def list_accounts(self, account_type=None) -> List[Account]:
        """All accounts sorted by code, optionally limited to one type."""
        accounts = self.store.list_accounts()
        if account_type is not None:
            wanted = self._parse_type(account_type)
            accounts = [a for a in accounts if a.account_type == wanted]
        return sorted(accounts, key=lambda a: a.code)

    @staticmethod
    def _parse_type(value) -> AccountType:
        try:
            return AccountType.parse(value)
        except ValueError as e:
            raise ValidationError(str(e), field="account_type") from e

    @staticmethod
    def _parse_side(value) -> NormalSide:
        try:
            return NormalSide.parse(value)
        except ValueError as e:
            raise ValidationError(str(e), field="normal_side") from e
