"""
Statement Service.

Loads ledger snapshots from a LedgerStore and derives statements with the
pure functions in financial_statements. Distinguished account codes and
list limits come from LedgerPreferences.
"""

from typing import Optional

from ledgerpro.core.exceptions import AccountNotFoundError
from ledgerpro.core.preferences import LedgerPreferences
from ledgerpro.core.store import LedgerStore
from ledgerpro.services.financial_statements import (
    BalanceSheet,
    DashboardSummary,
    GeneralLedger,
    IncomeStatement,
    TrialBalance,
    balance_sheet,
    dashboard_summary,
    general_ledger,
    income_statement,
    trial_balance,
)


class StatementService:
    """
    Service for generating financial statements from the ledger.

    Example:
        service = StatementService(store)
        sheet = service.balance_sheet()
        print(f"Balanced: {sheet.is_balanced}")
    """

    def __init__(self, store: LedgerStore, preferences: Optional[LedgerPreferences] = None):
        """
        Initialize with a ledger store.

        Args:
            store: LedgerStore to read accounts, entries and lines from
            preferences: Optional preferences (defaults used when omitted)
        """
        self.store = store
        self.preferences = preferences or LedgerPreferences()

    @property
    def cogs_code(self) -> str:
        return self.preferences.accounts.cogs_code

    def trial_balance(self, as_of: Optional[str] = None) -> TrialBalance:
        return trial_balance(
            self.store.list_accounts(),
            self.store.list_lines(),
            as_of=as_of,
            entries=self.store.list_entries(),
        )

    def income_statement(
        self,
        period_start: Optional[str] = None,
        period_end: Optional[str] = None,
    ) -> IncomeStatement:
        return income_statement(
            self.store.list_accounts(),
            self.store.list_lines(),
            self.cogs_code,
            period_start=period_start,
            period_end=period_end,
            entries=self.store.list_entries(),
        )

    def balance_sheet(self, as_of: Optional[str] = None) -> BalanceSheet:
        return balance_sheet(
            self.store.list_accounts(),
            self.store.list_lines(),
            as_of=as_of,
            entries=self.store.list_entries(),
        )

    def general_ledger(
        self,
        account_code: Optional[str] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> GeneralLedger:
        """
        Build the general ledger, optionally for one account.

        Raises:
            AccountNotFoundError: account_code does not match any account
        """
        accounts = self.store.list_accounts()
        account_id = None
        if account_code:
            matches = [a for a in accounts if a.code == account_code]
            if not matches:
                raise AccountNotFoundError(account_code)
            account_id = matches[0].id

        return general_ledger(
            accounts,
            self.store.list_lines(),
            self.store.list_entries(),
            account_id=account_id,
            start_date=start_date,
            end_date=end_date,
        )

    def dashboard(self) -> DashboardSummary:
        return dashboard_summary(
            self.store.list_accounts(),
            self.store.list_lines(),
            self.store.list_entries(),
            recent_limit=self.preferences.recent_entries,
        )
