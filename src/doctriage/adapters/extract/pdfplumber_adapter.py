"""Text extraction adapter using pdfplumber."""

import io
import logging

import pdfplumber

from ...domain.models import InputFile
from ...ports.extract import TextExtractorPort

logger = logging.getLogger(__name__)

DEFAULT_MAX_PAGES = 5


class PdfPlumberAdapter(TextExtractorPort):
    """Reads the text layer of the first pages of a PDF.

    Scanned PDFs without a text layer yield an empty string.
    """

    def __init__(self, max_pages: int = DEFAULT_MAX_PAGES) -> None:
        self.max_pages = max_pages

    def extract_text(self, file: InputFile) -> str:
        try:
            with pdfplumber.open(io.BytesIO(file.content)) as pdf:
                pages = pdf.pages[: self.max_pages]
                text = " ".join((page.extract_text() or "").strip() for page in pages)
        except Exception as e:
            logger.warning(f"Failed to read PDF {file.name}: {e}")
            return ""

        logger.debug(f"Extracted {len(text)} chars from {file.name}")
        return text.strip()
