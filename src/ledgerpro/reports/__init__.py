"""
Report export for LedgerPro.

- StatementExporter: Excel (openpyxl) and CSV (pandas) output for the
  trial balance, income statement, balance sheet and general ledger
"""

from ledgerpro.reports.exporter import StatementExporter

__all__ = ["StatementExporter"]
