"""Domain models."""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum


class CompanyType(str, Enum):
    """Kind of tax identifier a company is registered under."""

    CNPJ = "CNPJ"
    CPF = "CPF"
    MEI = "MEI"


@dataclass(frozen=True)
class Company:
    """Client company as held by the company registry."""

    id: int
    name: str
    doc_number: str = ""  # CNPJ/CPF, punctuation allowed
    type: CompanyType = CompanyType.CNPJ


@dataclass(frozen=True)
class Competence:
    """Accounting period a document refers to."""

    month: int
    year: int

    def __str__(self) -> str:
        return f"{self.month:02d}/{self.year}"

    def next_month(self) -> "Competence":
        """Period in which obligations for this competence fall due."""
        if self.month == 12:
            return Competence(month=1, year=self.year + 1)
        return Competence(month=self.month + 1, year=self.year)


@dataclass(frozen=True)
class InputFile:
    """A file to classify, held in memory."""

    name: str
    content: bytes
    media_type: str | None = None


@dataclass(frozen=True)
class UploadReceipt:
    """Handle returned by the upload endpoint."""

    server_filename: str


class Outcome(str, Enum):
    ACCEPTED = "accepted"
    FILTERED = "filtered"


@dataclass(frozen=True)
class ProcessingResult:
    """Result of processing a single file in a batch."""

    file_name: str
    outcome: Outcome
    category: str | None = None
    company_id: int | None = None
    due_date: date | None = None
    reason: str | None = None  # Set for filtered outcomes

    @property
    def accepted(self) -> bool:
        return self.outcome is Outcome.ACCEPTED


@dataclass(frozen=True)
class AcceptedDocument:
    """Classified and uploaded document, ready for the document registry."""

    file_name: str
    server_filename: str
    company_id: int
    company_name: str
    category: str
    competence: str
    due_date: date | None


@dataclass
class BatchResult:
    """Summary of a batch run."""

    total: int = 0
    accepted: int = 0
    filtered: int = 0
    documents: list[AcceptedDocument] = field(default_factory=list)
    results: list[ProcessingResult] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    cancelled: bool = False

    def add(self, result: ProcessingResult) -> None:
        """Accumulate a per-file result into the counters."""
        self.results.append(result)
        self.total += 1
        if result.accepted:
            self.accepted += 1
        else:
            self.filtered += 1


@dataclass(frozen=True)
class Classification:
    """Category and company detected for a file, before filtering."""

    file_name: str
    category: str | None
    company: Company | None
