"""
Document import pipeline.

extract text -> classify lines -> propose journal entries -> (user picks)
-> post the selected candidates through the journal engine.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

from ledgerpro.core.exceptions import ExtractionError
from ledgerpro.core.journal import JournalEngine
from ledgerpro.core.preferences import LedgerPreferences
from ledgerpro.core.store import LedgerStore
from ledgerpro.parsers.classifier import classify
from ledgerpro.parsers.journal_mapper import CandidateEntry, map_to_journal_entries
from ledgerpro.parsers.pdf_extractor import PDFTextExtractor

logger = logging.getLogger(__name__)

NO_TRANSACTIONS_MESSAGE = "No recognizable transactions found"


@dataclass
class ImportResult:
    """Result of previewing a document import."""
    success: bool
    candidates: List[CandidateEntry] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    source_file: str = ""

    def add_error(self, error: str):
        """Add an error message."""
        self.errors.append(error)
        self.success = False

    def add_warning(self, warning: str):
        """Add a warning message."""
        self.warnings.append(warning)

    @property
    def selected(self) -> List[CandidateEntry]:
        return [c for c in self.candidates if c.selected]


class DocumentImporter:
    """
    Proposes journal entries from a PDF and posts the ones the user keeps.

    Usage:
        importer = DocumentImporter(store)
        result = importer.preview(Path("invoice.pdf"))
        if result.success:
            entry_ids = importer.commit(result.candidates)
    """

    def __init__(
        self,
        store: LedgerStore,
        extractor: Optional[PDFTextExtractor] = None,
        preferences: Optional[LedgerPreferences] = None,
    ):
        self.store = store
        self.extractor = extractor or PDFTextExtractor()
        self.preferences = preferences or LedgerPreferences()
        self.engine = JournalEngine(store)

    def preview(
        self,
        document: Union[str, Path],
        password: Optional[str] = None,
    ) -> ImportResult:
        """
        Extract and classify a document without writing anything.

        Extraction failures and documents with no usable lines are reported
        on the result rather than raised.
        """
        result = ImportResult(success=True, source_file=str(document))

        try:
            text = self.extractor.extract_text(document, password=password)
        except ExtractionError as e:
            logger.warning(f"Extraction failed for {document}: {e.message}")
            result.add_warning(e.message)
            result.add_error(NO_TRANSACTIONS_MESSAGE)
            return result

        items = classify(text)
        if not items:
            result.add_error(NO_TRANSACTIONS_MESSAGE)
            return result

        result.candidates = map_to_journal_entries(
            items,
            self.store.list_accounts(),
            self.preferences.accounts.cash_code,
        )
        for candidate in result.candidates:
            if candidate.needs_review:
                result.add_warning(
                    f"Default accounts unavailable for {candidate.description!r}; review before posting"
                )

        logger.info(f"Found {len(result.candidates)} candidate entries in {document}")
        return result

    def commit(self, candidates: List[CandidateEntry], entry_date=None) -> List[str]:
        """Post the selected candidates. Returns the new entry ids."""
        return self.engine.commit_candidates(candidates, entry_date=entry_date)
