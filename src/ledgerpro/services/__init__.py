"""
Services module - statement derivation for LedgerPro.

- financial_statements: pure Trial Balance, Income Statement, Balance Sheet,
  General Ledger and Dashboard builders
- StatementService: loads ledger snapshots and builds statements
"""

from ledgerpro.services.financial_statements import (
    BalanceSheet,
    DashboardSummary,
    GeneralLedger,
    IncomeStatement,
    ReportRow,
    TrialBalance,
    balance_sheet,
    compute_net_income,
    dashboard_summary,
    general_ledger,
    income_statement,
    trial_balance,
)
from ledgerpro.services.statement_service import StatementService
