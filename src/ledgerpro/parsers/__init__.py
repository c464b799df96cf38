"""
Document import for LedgerPro.

- PDFTextExtractor: page text via pdfplumber
- classify: keyword classification of text lines into ledger categories
- map_to_journal_entries / select_accounts: proposed two-line entries
- DocumentImporter: preview and commit pipeline
"""

from ledgerpro.parsers.classifier import ClassifiedItem, classify
from ledgerpro.parsers.journal_mapper import (
    AccountSelection,
    CandidateEntry,
    map_to_journal_entries,
    select_accounts,
)
from ledgerpro.parsers.pdf_extractor import PDFTextExtractor
from ledgerpro.parsers.importer import DocumentImporter, ImportResult
