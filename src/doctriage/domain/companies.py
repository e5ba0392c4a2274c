"""Company identification by tax ID and name."""

import logging
import re
from collections.abc import Iterable

from .models import Company
from .normalize import normalize, normalize_digits

logger = logging.getLogger(__name__)

MIN_TAX_ID_DIGITS = 8  # CNPJ root, branch-independent
MIN_NAME_LENGTH = 3
MIN_BIGRAM_LENGTH = 6

# Order matters: "s.a" must go before "sa"
CORPORATE_TERMS = ("ltda", "s.a", "me", "epp", "eireli", "limitada", "sa", "cpf", "cnpj")

_CORPORATE_PATTERN = re.compile(
    "|".join(rf"(?<![a-z0-9]){re.escape(term)}(?![a-z0-9])" for term in CORPORATE_TERMS)
)
_WHITESPACE = re.compile(r"\s+")


def clean_company_name(name: str) -> str:
    """Normalize a company name and drop generic corporate-form tokens.

    "Comercial ABC Ltda - ME" -> "comercial abc"
    """
    cleaned = normalize(name).replace("-", " ")
    cleaned = _CORPORATE_PATTERN.sub(" ", cleaned)
    return _WHITESPACE.sub(" ", cleaned).strip(" .,;/&")


def match_by_tax_id(raw_text: str, companies: Iterable[Company]) -> Company | None:
    """Find the first company whose tax ID, or its 8-digit root, is in the text."""
    digits = normalize_digits(raw_text)
    if not digits:
        return None

    for company in companies:
        doc = normalize_digits(company.doc_number)
        if len(doc) < MIN_TAX_ID_DIGITS:
            continue
        if doc in digits:
            logger.debug(f"Tax ID match: {company.name}")
            return company
        if doc[:MIN_TAX_ID_DIGITS] in digits:
            logger.debug(f"Tax ID root match: {company.name}")
            return company
    return None


def match_by_name(raw_text: str, companies: Iterable[Company]) -> Company | None:
    """Find the first company whose cleaned name appears in the text."""
    text = normalize(raw_text)
    if not text:
        return None

    for company in companies:
        name = clean_company_name(company.name)
        if len(name) < MIN_NAME_LENGTH:
            continue
        if name in text:
            logger.debug(f"Name match: {company.name}")
            return company

        parts = name.split(" ")
        if len(parts) >= 2:
            bigram = f"{parts[0]} {parts[1]}"
            if len(bigram) >= MIN_BIGRAM_LENGTH and bigram in text:
                logger.debug(f"Partial name match: {company.name}")
                return company
    return None


def identify_company(raw_text: str, companies: Iterable[Company]) -> Company | None:
    """Identify the company a document belongs to.

    Tax IDs are tried across the whole roster before any name is compared.
    """
    roster = list(companies)
    return match_by_tax_id(raw_text, roster) or match_by_name(raw_text, roster)
