"""PDF text extraction using pdfplumber.

Pages are read in order and their text joined with newlines. Pages without
a text layer (scanned images) contribute an empty string.
"""

import logging
from pathlib import Path
from typing import Optional, Union

import pdfplumber

from ledgerpro.core.exceptions import ExtractionError

logger = logging.getLogger(__name__)


class PDFTextExtractor:
    """
    Extracts plain text from PDF documents.

    Usage:
        extractor = PDFTextExtractor()
        text = extractor.extract_text(Path("statement.pdf"))
    """

    def extract_text(
        self,
        file_path: Union[str, Path],
        password: Optional[str] = None
    ) -> str:
        """
        Extract the text of every page.

        Args:
            file_path: Path to PDF file
            password: PDF password (if encrypted)

        Returns:
            Page texts joined with "\\n"

        Raises:
            ExtractionError: File missing or not readable as a PDF
        """
        file_path = Path(file_path)
        if not file_path.exists():
            raise ExtractionError(f"File not found: {file_path}", source=str(file_path))

        try:
            with pdfplumber.open(str(file_path), password=password or "") as pdf:
                pages = [page.extract_text() or "" for page in pdf.pages]
        except Exception as e:
            error_msg = str(e)
            if "password" in error_msg.lower() or "encrypted" in error_msg.lower():
                raise ExtractionError(
                    "PDF is password-protected. Please provide the password.",
                    source=str(file_path),
                ) from e
            raise ExtractionError(f"Failed to read PDF: {error_msg}", source=str(file_path)) from e

        logger.debug(f"Extracted {len(pages)} pages from {file_path.name}")
        return "\n".join(pages)
