"""
Unit tests for statement export.

Workbooks are read back with openpyxl and CSV files with pandas.
"""

from decimal import Decimal

import pandas as pd
import pytest
from openpyxl import load_workbook

from conftest import make_entry, make_line
from ledgerpro.core.preferences import DisplayConfig
from ledgerpro.reports.exporter import MONEY_FORMAT, StatementExporter
from ledgerpro.services.financial_statements import (
    balance_sheet,
    general_ledger,
    income_statement,
    trial_balance,
)


@pytest.fixture
def ledger(sample_accounts):
    entries = [
        make_entry("e1", "2024-01-01", "Owner investment"),
        make_entry("e2", "2024-01-05", "Cash sale"),
        make_entry("e3", "2024-01-09", "Rent"),
    ]
    lines = [
        make_line("e1", "acc_1000", debit=1000, seq=1),
        make_line("e1", "acc_3000", credit=1000, seq=2),
        make_line("e2", "acc_1000", debit=500, seq=1),
        make_line("e2", "acc_4000", credit=500, seq=2),
        make_line("e3", "acc_5200", debit="200.50", seq=1),
        make_line("e3", "acc_1000", credit="200.50", seq=2),
    ]
    return sample_accounts, lines, entries


def _column_a(ws):
    return [ws.cell(row=r, column=1).value for r in range(1, ws.max_row + 1)]


class TestExcelExport:
    """Tests for .xlsx output."""

    def test_income_statement_layout(self, ledger, tmp_path):
        accounts, lines, _ = ledger
        path = StatementExporter().export(income_statement(accounts, lines), tmp_path / "is.xlsx")

        ws = load_workbook(path).active
        assert ws.title == "Income Statement"
        assert ws["A1"].value == "Income Statement"
        assert ws["A4"].value == "Revenue"
        labels = _column_a(ws)
        assert "Sales Revenue" in labels
        net_row = labels.index("Net Income (Loss)") + 1
        assert ws.cell(row=net_row, column=2).value == pytest.approx(299.5)
        assert ws.cell(row=net_row, column=2).number_format == MONEY_FORMAT

    def test_balance_sheet_balanced(self, ledger, tmp_path):
        accounts, lines, _ = ledger
        path = StatementExporter().export(balance_sheet(accounts, lines), tmp_path / "bs.xlsx")

        labels = _column_a(load_workbook(path).active)
        assert "Net Income (Current Period)" in labels
        assert "Total Liabilities & Equity" in labels
        assert not any(str(label).startswith("Out of balance") for label in labels if label)

    def test_balance_sheet_out_of_balance_noted(self, sample_accounts, tmp_path):
        lines = [make_line("e1", "acc_1000", debit=75)]
        path = StatementExporter().export(balance_sheet(sample_accounts, lines), tmp_path / "bs.xlsx")

        labels = _column_a(load_workbook(path).active)
        assert "Out of balance by $75.00" in labels

    def test_trial_balance(self, ledger, tmp_path):
        accounts, lines, _ = ledger
        path = StatementExporter().export(trial_balance(accounts, lines), tmp_path / "tb.xlsx")

        ws = load_workbook(path).active
        assert ws.title == "Trial Balance"
        assert [ws.cell(row=4, column=c).value for c in range(1, 6)] == \
            ["Code", "Account", "Type", "Debit", "Credit"]
        assert ws["A5"].value == "1000"
        totals_row = 5 + 4
        assert ws.cell(row=totals_row, column=2).value == "TOTALS"
        assert ws.cell(row=totals_row, column=4).value == pytest.approx(1700.5)
        assert ws.cell(row=totals_row + 2, column=1).value == "Balanced"

    def test_general_ledger(self, ledger, tmp_path):
        accounts, lines, entries = ledger
        gl = general_ledger(accounts, lines, entries, account_id="acc_1000")
        path = StatementExporter().export(gl, tmp_path / "gl.xlsx")

        ws = load_workbook(path).active
        assert ws.title == "General Ledger"
        assert ws["A4"].value == "1000 - Cash"
        assert ws["A5"].value == "Date"
        assert [ws.cell(row=r, column=6).value for r in (6, 7, 8)] == \
            [1000, 1500, pytest.approx(1299.5)]
        assert ws["C9"].value == "Totals"

    def test_empty_general_ledger(self, sample_accounts, tmp_path):
        path = StatementExporter().export(general_ledger(sample_accounts, [], []), tmp_path / "gl.xlsx")
        assert "No transactions found." in _column_a(load_workbook(path).active)

    def test_creates_parent_directory(self, ledger, tmp_path):
        accounts, lines, _ = ledger
        path = StatementExporter().export(trial_balance(accounts, lines), tmp_path / "reports" / "tb.xlsx")
        assert path.exists()


class TestCsvExport:
    """Tests for .csv output."""

    def test_trial_balance_csv(self, ledger, tmp_path):
        accounts, lines, _ = ledger
        path = StatementExporter().export(trial_balance(accounts, lines), tmp_path / "tb.csv")

        df = pd.read_csv(path, dtype={"Code": str})
        assert list(df.columns) == ["Code", "Account", "Type", "Debit", "Credit"]
        assert df.iloc[-1]["Account"] == "TOTALS"
        assert df.iloc[-1]["Debit"] == pytest.approx(1700.5)

    def test_income_statement_csv(self, ledger, tmp_path):
        accounts, lines, _ = ledger
        path = StatementExporter().export(income_statement(accounts, lines), tmp_path / "is.csv")

        df = pd.read_csv(path)
        assert list(df.columns) == ["Line", "Amount", "Kind"]
        assert df.iloc[-1]["Line"] == "Net Income (Loss)"
        assert df.iloc[-1]["Amount"] == pytest.approx(299.5)


class TestExportDispatch:

    def test_unsupported_extension(self, ledger, tmp_path):
        accounts, lines, _ = ledger
        with pytest.raises(ValueError):
            StatementExporter().export(trial_balance(accounts, lines), tmp_path / "tb.pdf")

    def test_display_config_used_for_imbalance(self, sample_accounts, tmp_path):
        lines = [make_line("e1", "acc_1000", debit=Decimal("75"))]
        exporter = StatementExporter(DisplayConfig(currency_symbol="€"))
        path = exporter.export(trial_balance(sample_accounts, lines), tmp_path / "tb.xlsx")
        assert "Out of balance by €75.00" in _column_a(load_workbook(path).active)
