"""
Unit tests for keyword classification of document text.
"""

from decimal import Decimal

import pytest

from ledgerpro.core.models import AccountType
from ledgerpro.parsers.classifier import (
    classify,
    classify_line,
    clean_description,
    extract_amount,
)


class TestExtractAmount:
    """Tests for extract_amount()."""

    @pytest.mark.parametrize("line,expected", [
        ("Office Rent Expense $1,250.00", Decimal("1250.00")),
        ("Sales revenue 300", Decimal("300")),
        ("Loan payable $ 12,000", Decimal("12000")),
        ("Invoice 1001 Consulting Service 300.50", Decimal("300.50")),
    ])
    def test_last_token_wins(self, line, expected):
        assert extract_amount(line) == expected

    def test_no_amount(self):
        assert extract_amount("Rent expense for March") is None

    def test_lone_comma_is_not_an_amount(self):
        assert extract_amount("Rent, utilities, insurance") is None


class TestClassifyLine:
    """Tests for keyword matching."""

    @pytest.mark.parametrize("line,category", [
        ("Accounts receivable 400", AccountType.ASSET),
        ("Mortgage 90,000", AccountType.LIABILITY),
        ("Consulting service 300", AccountType.REVENUE),
        ("Utilities 120", AccountType.EXPENSE),
    ])
    def test_categories(self, line, category):
        assert classify_line(line) == category

    def test_case_insensitive(self):
        assert classify_line("SALARIES 5,000") == AccountType.EXPENSE

    def test_first_category_wins(self):
        """'bank' (Asset) is checked before 'loan' (Liability)."""
        assert classify_line("Bank loan 5,000") == AccountType.ASSET

    def test_no_keyword(self):
        assert classify_line("Miscellaneous 50") is None


class TestClassify:
    """Tests for classify()."""

    def test_single_rent_line(self):
        items = classify("Office Rent Expense $1,250.00")

        assert len(items) == 1
        assert items[0].category == AccountType.EXPENSE
        assert items[0].amount == Decimal("1250.00")
        assert items[0].description == "Office Rent Expense"
        assert items[0].original_line == "Office Rent Expense $1,250.00"

    def test_mixed_document(self):
        text = "\n".join([
            "ACME Supplies Ltd",
            "Statement for March",
            "",
            "Sales revenue $4,200.00",
            "Utilities expense 310.25",
            "Bank fee 0.50",
            "Fee 25",
            "Thank you for your business",
        ])
        items = classify(text)
        assert [(i.category, i.amount) for i in items] == [
            (AccountType.REVENUE, Decimal("4200.00")),
            (AccountType.EXPENSE, Decimal("310.25")),
        ]

    def test_amount_below_one_dropped(self):
        assert classify("Bank interest income 0.75") == []

    def test_zero_last_token_dropped(self):
        assert classify("Rent expense 1,200 adjusted to 0") == []

    def test_short_description_dropped(self):
        assert classify("Fee 25") == []

    def test_description_truncated(self):
        line = "Insurance premium " + "x" * 80 + " 500"
        assert len(classify(line)[0].description) == 60

    def test_empty_text(self):
        assert classify("") == []
        assert classify(None) == []

    def test_deterministic(self):
        text = "Sales revenue 100\nRent expense 40\nEquipment purchase 900"
        assert classify(text) == classify(text)


class TestCleanDescription:

    def test_strips_amounts_and_whitespace(self):
        assert clean_description("  Rent   expense  $1,000.00 ") == "Rent expense"
