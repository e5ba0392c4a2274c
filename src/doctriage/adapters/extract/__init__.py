"""Text extraction adapters."""

from .pdfplumber_adapter import PdfPlumberAdapter

__all__ = ["PdfPlumberAdapter"]
