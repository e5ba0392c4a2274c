"""Text normalization for keyword and tax-ID comparison."""

import re
import unicodedata

_WHITESPACE = re.compile(r"\s+")
_NON_DIGIT = re.compile(r"[^0-9]")


def normalize(text: str | None) -> str:
    """Lowercase, strip diacritics and collapse whitespace.

    "Honorários  Contábeis" -> "honorarios contabeis"
    """
    if not text:
        return ""
    decomposed = unicodedata.normalize("NFD", text)
    stripped = "".join(c for c in decomposed if not unicodedata.combining(c))
    return _WHITESPACE.sub(" ", stripped.lower()).strip()


def normalize_digits(text: str | None) -> str:
    """Keep only digits, joining sequences split by punctuation or line wraps."""
    if not text:
        return ""
    return _NON_DIGIT.sub("", text)
