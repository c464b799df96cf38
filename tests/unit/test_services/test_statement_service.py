"""
Unit tests for StatementService.

Statements are derived from what is stored, so posting or deleting an
entry is reflected in the next statement without any refresh step.
"""

from decimal import Decimal

import pytest

from ledgerpro.core.exceptions import AccountNotFoundError
from ledgerpro.core.preferences import LedgerPreferences
from ledgerpro.services.statement_service import StatementService


@pytest.fixture
def service(seeded_store):
    return StatementService(seeded_store)


@pytest.fixture
def posted(post):
    """Owner investment, a cash sale, cost of goods and rent."""
    return [
        post("2024-01-01", "Owner investment", ("acc_1000", 5000, 0), ("acc_3000", 0, 5000)),
        post("2024-01-15", "Cash sale", ("acc_1000", 500, 0), ("acc_4000", 0, 500)),
        post("2024-01-20", "Goods sold", ("acc_5000", 120, 0), ("acc_1300", 0, 120)),
        post("2024-02-01", "Rent", ("acc_5200", 300, 0), ("acc_1000", 0, 300)),
    ]


class TestStatementService:
    """Tests for statements built from the store."""

    def test_empty_ledger(self, service):
        assert service.trial_balance().accounts == []
        assert service.balance_sheet().is_balanced
        assert service.income_statement().net_income == Decimal("0")

    def test_statements_agree(self, service, posted):
        statement = service.income_statement()
        sheet = service.balance_sheet()

        assert statement.total_revenue == Decimal("500")
        assert statement.cost_of_goods_sold == Decimal("120")
        assert statement.net_income == Decimal("80")
        assert sheet.net_income == statement.net_income
        assert sheet.total_assets == Decimal("5080")
        assert sheet.is_balanced
        assert service.trial_balance().is_balanced

    def test_cogs_code_from_preferences(self, seeded_store, posted):
        prefs = LedgerPreferences({"accounts": {"cogs_code": "5200"}})
        statement = StatementService(seeded_store, prefs).income_statement()
        assert [l.code for l in statement.cogs] == ["5200"]
        assert [l.code for l in statement.operating_expenses] == ["5000"]
        assert statement.net_income == Decimal("80")

    def test_as_of_and_period(self, service, posted):
        assert service.income_statement(period_end="2024-01-31").net_income == Decimal("380")
        january = service.balance_sheet(as_of="2024-01-31")
        assert january.total_assets == Decimal("5380")
        assert january.is_balanced

    def test_deleted_entry_disappears(self, service, engine, posted):
        engine.delete_entry(posted[1].id)
        assert service.income_statement().total_revenue == Decimal("0")

    def test_general_ledger_by_code(self, service, posted):
        gl = service.general_ledger("1000")
        assert [section.account.code for section in gl.accounts] == ["1000"]
        assert gl.accounts[0].closing_balance == Decimal("5200")

    def test_general_ledger_unknown_code(self, service):
        with pytest.raises(AccountNotFoundError):
            service.general_ledger("9999")

    def test_dashboard(self, service, posted):
        summary = service.dashboard()
        assert summary.entry_count == 4
        assert summary.net_income == Decimal("80")
        assert summary.recent_entries[0].entry.description == "Rent"
        assert summary.is_balanced
