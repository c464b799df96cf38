"""
Unit tests for accounts module.

Tests chart of accounts seeding, account maintenance and referential
protection on delete.
"""

import pytest

from ledgerpro.core.accounts import CHART_OF_ACCOUNTS, ChartOfAccounts, default_accounts
from ledgerpro.core.exceptions import (
    AccountInUseError,
    AccountNotFoundError,
    ValidationError,
)
from ledgerpro.core.models import AccountType, NormalSide


class TestChartSetup:
    """Tests for seeding the default chart."""

    def test_chart_of_accounts_setup(self, store):
        """Seeding creates all 33 default accounts."""
        created = ChartOfAccounts(store).setup()
        assert created == 33
        assert len(store.list_accounts()) == len(CHART_OF_ACCOUNTS) == 33

    def test_setup_only_when_empty(self, chart):
        assert chart.setup() == 0
        assert len(chart.list_accounts()) == 33

    def test_default_ids_follow_code(self):
        ids = [a.id for a in default_accounts()]
        assert "acc_1000" in ids
        assert "acc_5000" in ids

    def test_contra_accounts_keep_declared_normal_side(self, chart):
        """Accumulated Depreciation is a credit-normal asset; Drawings a debit-normal equity."""
        depreciation = chart.get_account_by_code("1700")
        drawings = chart.get_account_by_code("3300")
        assert depreciation.account_type == AccountType.ASSET
        assert depreciation.normal_side == NormalSide.CREDIT
        assert drawings.account_type == AccountType.EQUITY
        assert drawings.normal_side == NormalSide.DEBIT

    def test_reset_restores_default_chart(self, chart, post):
        post("2024-01-15", "Sale", ("acc_1000", 100, 0), ("acc_4000", 0, 100))
        chart.add_account("6000", "Extra", "Expense")

        created = chart.reset()

        assert created == 33
        assert chart.get_account_by_code("6000") is None
        assert chart.store.list_entries() == []
        assert chart.store.list_lines() == []


class TestAddAccount:
    """Tests for adding accounts."""

    def test_add_account_defaults_normal_side(self, chart):
        account = chart.add_account("5950", "Bank Charges", "Expense")
        assert account.normal_side == NormalSide.DEBIT
        assert chart.get_account(account.id).name == "Bank Charges"

    def test_add_account_explicit_normal_side(self, chart):
        account = chart.add_account("1750", "Allowance for Doubtful Accounts", "Asset", "Credit")
        assert account.normal_side == NormalSide.CREDIT

    @pytest.mark.parametrize("code,name", [("", "Name"), ("6000", ""), ("  ", "  ")])
    def test_add_account_requires_fields(self, chart, code, name):
        with pytest.raises(ValidationError) as exc_info:
            chart.add_account(code, name, "Expense")
        assert exc_info.value.message == "Please fill in all fields"

    def test_add_account_rejects_duplicate_code(self, chart):
        with pytest.raises(ValidationError):
            chart.add_account("1000", "Another Cash", "Asset")

    def test_add_account_rejects_bad_type(self, chart):
        with pytest.raises(ValidationError):
            chart.add_account("6000", "Odd", "Income")


class TestEditAccount:
    """Tests for editing accounts."""

    def test_edit_name_and_type(self, chart):
        account = chart.get_account_by_code("5900")
        updated = chart.edit_account(account.id, name="Sundry Expense", normal_side="Credit")
        assert updated.name == "Sundry Expense"
        assert updated.normal_side == NormalSide.CREDIT
        assert chart.get_account(account.id).name == "Sundry Expense"

    def test_edit_code_to_existing_rejected(self, chart):
        account = chart.get_account_by_code("5900")
        with pytest.raises(ValidationError):
            chart.edit_account(account.id, code="1000")

    def test_edit_unknown_account(self, chart):
        with pytest.raises(AccountNotFoundError):
            chart.edit_account("acc_nope", name="x")


class TestDeleteAccount:
    """Tests for deleting accounts."""

    def test_delete_unreferenced_account(self, chart):
        """An account with no journal lines can be deleted."""
        chart.delete_account("acc_5600")
        assert chart.get_account_by_code("5600") is None

    def test_delete_referenced_account_rejected(self, chart, post):
        """An account used by a journal line cannot be deleted."""
        post("2024-01-15", "Cash sale", ("acc_1000", 500, 0), ("acc_4000", 0, 500))

        with pytest.raises(AccountInUseError) as exc_info:
            chart.delete_account("acc_1000")

        assert exc_info.value.message == "Cannot delete: account has journal entries"
        assert exc_info.value.line_count == 1
        assert chart.get_account_by_code("1000") is not None

    def test_delete_unknown_account(self, chart):
        with pytest.raises(AccountNotFoundError):
            chart.delete_account("acc_nope")


class TestLookups:
    """Tests for account lookups."""

    def test_list_accounts_by_type(self, chart):
        revenue = chart.list_accounts("Revenue")
        assert [a.code for a in revenue] == ["4000", "4100", "4200", "4300"]

    def test_list_accounts_sorted(self, chart):
        codes = [a.code for a in chart.list_accounts()]
        assert codes == sorted(codes)

    def test_get_account_unknown(self, chart):
        with pytest.raises(AccountNotFoundError):
            chart.get_account("acc_nope")
