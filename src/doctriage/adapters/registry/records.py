"""Conversion of roster records into Company objects."""

from typing import Any

from ...domain.models import Company, CompanyType
from ...errors import RegistryError


def company_from_record(record: Any) -> Company:
    """Build a Company from an API or file record.

    Accepts both `docNumber` (API) and `doc_number` (YAML) keys.
    """
    if not isinstance(record, dict):
        raise RegistryError(f"Company record must be a mapping, got {type(record).__name__}")

    try:
        company_id = int(record["id"])
    except (KeyError, TypeError, ValueError):
        raise RegistryError(f"Company record without a valid id: {record!r}") from None

    doc_number = record.get("docNumber", record.get("doc_number")) or ""
    raw_type = str(record.get("type") or CompanyType.CNPJ.value).upper()
    try:
        company_type = CompanyType(raw_type)
    except ValueError:
        raise RegistryError(f"Unknown company type {raw_type!r} for id {company_id}") from None

    return Company(
        id=company_id,
        name=str(record.get("name") or ""),
        doc_number=str(doc_number),
        type=company_type,
    )
