"""
Unit tests for the document import pipeline.

A stub extractor stands in for pdfplumber so the pipeline can be driven
with plain text.
"""

from decimal import Decimal

from ledgerpro.core.exceptions import ExtractionError
from ledgerpro.parsers.importer import NO_TRANSACTIONS_MESSAGE, DocumentImporter


class StubExtractor:
    def __init__(self, text=None, error=None):
        self.text = text
        self.error = error
        self.calls = []

    def extract_text(self, file_path, password=None):
        self.calls.append((file_path, password))
        if self.error:
            raise self.error
        return self.text


class TestPreview:
    """Tests for DocumentImporter.preview()."""

    def test_candidates_proposed(self, seeded_store):
        extractor = StubExtractor("Office Rent Expense $1,250.00\nConsulting service income 300")
        result = DocumentImporter(seeded_store, extractor=extractor).preview("invoice.pdf", password="pw")

        assert result.success
        assert result.errors == []
        assert extractor.calls == [("invoice.pdf", "pw")]
        assert [c.amount for c in result.candidates] == [Decimal("1250.00"), Decimal("300")]
        assert len(result.selected) == 2

    def test_preview_writes_nothing(self, seeded_store):
        DocumentImporter(seeded_store, extractor=StubExtractor("Rent expense 100")).preview("a.pdf")
        assert seeded_store.list_entries() == []

    def test_no_transactions(self, seeded_store):
        result = DocumentImporter(seeded_store, extractor=StubExtractor("Hello world")).preview("a.pdf")
        assert not result.success
        assert result.errors == [NO_TRANSACTIONS_MESSAGE]
        assert result.candidates == []

    def test_extraction_failure_reported(self, seeded_store):
        extractor = StubExtractor(error=ExtractionError("Failed to read PDF: broken", source="a.pdf"))
        result = DocumentImporter(seeded_store, extractor=extractor).preview("a.pdf")

        assert not result.success
        assert result.errors == [NO_TRANSACTIONS_MESSAGE]
        assert result.warnings == ["Failed to read PDF: broken"]

    def test_review_warning_without_cash_account(self, store):
        from ledgerpro.core.accounts import ChartOfAccounts

        ChartOfAccounts(store).add_account("5200", "Rent Expense", "Expense")
        result = DocumentImporter(store, extractor=StubExtractor("Rent expense 100")).preview("a.pdf")

        assert result.success
        assert result.candidates[0].needs_review
        assert len(result.warnings) == 1


class TestCommit:
    """Tests for DocumentImporter.commit()."""

    def test_commit_selected(self, seeded_store):
        importer = DocumentImporter(
            seeded_store,
            extractor=StubExtractor("Office Rent Expense $1,250.00\nSales revenue 300"),
        )
        result = importer.preview("invoice.pdf")
        result.candidates[1].selected = False

        created = importer.commit(result.candidates, entry_date="2024-03-31")

        assert len(created) == 1
        entries = seeded_store.list_entries()
        assert len(entries) == 1
        assert entries[0].date == "2024-03-31"
        assert entries[0].description == "Office Rent Expense"
        lines = seeded_store.lines_for_entry(created[0])
        assert sum(l.debit for l in lines) == sum(l.credit for l in lines) == Decimal("1250.00")
