"""Text extraction port - interface for reading document text."""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..domain.models import InputFile


class TextExtractorPort(ABC):
    """Interface for best-effort plain-text extraction."""

    @abstractmethod
    def extract_text(self, file: "InputFile") -> str:
        """Extract text from a PDF.

        Returns an empty or short string when nothing usable was found.
        """
        pass
