"""Domain layer - core business logic."""

from .models import (
    AcceptedDocument,
    BatchResult,
    Classification,
    Company,
    CompanyType,
    Competence,
    InputFile,
    Outcome,
    ProcessingResult,
    UploadReceipt,
)

__all__ = [
    "AcceptedDocument",
    "BatchResult",
    "Classification",
    "Company",
    "CompanyType",
    "Competence",
    "InputFile",
    "Outcome",
    "ProcessingResult",
    "UploadReceipt",
]
