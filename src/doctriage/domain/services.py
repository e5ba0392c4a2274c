"""Domain services - orchestrate business logic."""

import io
import logging
import mimetypes
import threading
import zipfile
import zlib
from collections.abc import Collection, Iterable, Iterator, Mapping
from datetime import date
from pathlib import PurePosixPath
from types import MappingProxyType

from ..ports.extract import TextExtractorPort
from ..ports.upload import UploadPort
from .categories import identify_category
from .companies import identify_company
from .due_dates import (
    NATIONAL_HOLIDAYS,
    DueDateRule,
    compute_due_date_map,
    default_rules,
    parse_competence,
)
from .models import (
    AcceptedDocument,
    BatchResult,
    Classification,
    Company,
    InputFile,
    Outcome,
    ProcessingResult,
)
from .normalize import normalize

logger = logging.getLogger(__name__)

PDF_MEDIA_TYPE = "application/pdf"
ZIP_MEDIA_TYPES = frozenset({"application/zip", "application/x-zip-compressed"})
MIN_EXTRACTED_LENGTH = 10
ARCHIVE_ERRORS = (
    zipfile.BadZipFile,
    EOFError,
    RuntimeError,
    NotImplementedError,
    OSError,
    zlib.error,
)

REASON_CATEGORY_UNIDENTIFIED = "category unidentified"
REASON_COMPANY_UNIDENTIFIED = "company unidentified"
REASON_CATEGORY_NOT_SELECTED = "category not selected"
REASON_COMPANY_NOT_SELECTED = "company not selected"
REASON_UPLOAD_FAILED = "upload failed"
REASON_INVALID_ARCHIVE = "invalid archive"


def media_type_of(file: InputFile) -> str | None:
    if file.media_type:
        return file.media_type
    guessed, _ = mimetypes.guess_type(file.name)
    return guessed


def is_pdf(file: InputFile) -> bool:
    return media_type_of(file) == PDF_MEDIA_TYPE


def is_zip(file: InputFile) -> bool:
    return media_type_of(file) in ZIP_MEDIA_TYPES or file.name.lower().endswith(".zip")


def _skip_entry(info: zipfile.ZipInfo) -> bool:
    """Directories and platform metadata entries."""
    if info.is_dir():
        return True
    path = PurePosixPath(info.filename)
    if path.parts and path.parts[0] == "__MACOSX":
        return True
    return path.name.startswith("._") or path.name == ".DS_Store"


def expand_zip(archive: InputFile) -> list[InputFile]:
    """Read archive entries into memory, in enumeration order.

    Raises zipfile.BadZipFile if the archive cannot be opened, RuntimeError
    for encrypted entries, EOFError for entries cut short.
    """
    files = []
    with zipfile.ZipFile(io.BytesIO(archive.content)) as zf:
        for info in zf.infolist():
            if _skip_entry(info):
                continue
            name = PurePosixPath(info.filename).name
            files.append(InputFile(name=name, content=zf.read(info)))
    logger.info(f"Expanded {archive.name}: {len(files)} files")
    return files


def iter_batch_files(files: Iterable[InputFile]) -> Iterator[InputFile]:
    """Yield batch files in order, expanding ZIP archives in place.

    Archives that cannot be opened are yielded unchanged.
    """
    for file in files:
        if not is_zip(file):
            yield file
            continue
        try:
            entries = expand_zip(file)
        except ARCHIVE_ERRORS as e:
            logger.error(f"Invalid ZIP archive {file.name}: {e}")
            yield file
            continue
        yield from iter_batch_files(entries)


class BatchService:
    """Classifies, dates and uploads batches of accounting documents.

    Without an uploader the service can only classify.
    """

    def __init__(
        self,
        extractor: TextExtractorPort,
        uploader: UploadPort | None,
        keyword_map: Mapping[str, Iterable[str]],
        priority_categories: Iterable[str] = (),
        rules: Mapping[str, DueDateRule] | None = None,
        holidays: Collection[tuple[int, int]] = NATIONAL_HOLIDAYS,
    ) -> None:
        self.extractor = extractor
        self.uploader = uploader
        self.keyword_map = MappingProxyType(
            {category: tuple(keywords) for category, keywords in keyword_map.items()}
        )
        self.priority_categories = tuple(priority_categories)
        self.rules = MappingProxyType(dict(default_rules() if rules is None else rules))
        self.holidays = frozenset(holidays)

    def document_text(self, file: InputFile) -> str:
        """Text used for classification: file name plus any extracted PDF text."""
        if not is_pdf(file):
            return file.name

        try:
            extracted = self.extractor.extract_text(file)
        except Exception as e:
            logger.warning(f"Text extraction failed for {file.name}: {e}")
            extracted = ""

        if extracted and len(extracted) > MIN_EXTRACTED_LENGTH:
            return f"{file.name} {extracted}"

        logger.info(f"No usable text in {file.name}, classifying by name")
        return file.name

    def classify(self, file: InputFile, companies: Iterable[Company]) -> Classification:
        text = self.document_text(file)
        category = identify_category(
            normalize(text), self.keyword_map, self.priority_categories
        )
        company = identify_company(text, companies)
        return Classification(
            file_name=file.name,
            category=category,
            company=company,
        )

    def process_batch(
        self,
        files: Iterable[InputFile],
        competence: str,
        companies: Iterable[Company],
        category_filter: Collection[str] = (),
        company_filter: Collection[int] = (),
        cancel: threading.Event | None = None,
    ) -> BatchResult:
        """Process files one at a time, in order.

        Pipeline per file:
            1. Extract text (PDFs only, falls back to the file name)
            2. Identify category and company
            3. Apply category/company filters
            4. Look up the due date for the competence
            5. Upload (once, no retry)

        No single file can abort the batch.
        """
        if self.uploader is None:
            raise ValueError("process_batch needs an uploader")

        roster = tuple(companies)
        categories = frozenset(category_filter)
        company_ids = frozenset(company_filter)

        parsed = parse_competence(competence)
        if parsed is None:
            logger.warning(f"Invalid competence {competence!r}, due dates unavailable")
            due_dates = {}
        else:
            due_dates = compute_due_date_map(parsed, self.rules, self.holidays)

        result = BatchResult()
        logger.info(f"Processing batch for competence {competence}")

        for file in iter_batch_files(files):
            if cancel is not None and cancel.is_set():
                logger.warning("Batch cancelled")
                result.cancelled = True
                break

            processed = self._process_file(
                file, competence, roster, categories, company_ids, due_dates, result
            )
            result.add(processed)

        logger.info(
            f"Batch complete: {result.total} files, "
            f"{result.accepted} accepted, {result.filtered} filtered"
        )
        return result

    def _process_file(
        self,
        file: InputFile,
        competence: str,
        companies: tuple[Company, ...],
        category_filter: frozenset[str],
        company_filter: frozenset[int],
        due_dates: Mapping[str, date],
        result: BatchResult,
    ) -> ProcessingResult:
        logger.info(f"Processing: {file.name}")

        if is_zip(file):
            return self._filtered(file, REASON_INVALID_ARCHIVE)

        found = self.classify(file, companies)
        category, company = found.category, found.company

        if category is None:
            return self._filtered(file, REASON_CATEGORY_UNIDENTIFIED)
        if company is None:
            return self._filtered(file, REASON_COMPANY_UNIDENTIFIED, category=category)
        if category_filter and category not in category_filter:
            return self._filtered(
                file, REASON_CATEGORY_NOT_SELECTED, category=category, company=company
            )
        if company_filter and company.id not in company_filter:
            return self._filtered(
                file, REASON_COMPANY_NOT_SELECTED, category=category, company=company
            )

        due_date = due_dates.get(category)

        try:
            receipt = self.uploader.upload(file)
        except Exception as e:
            logger.exception(f"Upload failed: {file.name}")
            result.errors.append(f"{file.name}: {e}")
            return self._filtered(
                file,
                REASON_UPLOAD_FAILED,
                category=category,
                company=company,
                due_date=due_date,
            )

        result.documents.append(
            AcceptedDocument(
                file_name=file.name,
                server_filename=receipt.server_filename,
                company_id=company.id,
                company_name=company.name,
                category=category,
                competence=competence,
                due_date=due_date,
            )
        )
        logger.info(f"Accepted: {file.name} -> {company.name} / {category}")
        return ProcessingResult(
            file_name=file.name,
            outcome=Outcome.ACCEPTED,
            category=category,
            company_id=company.id,
            due_date=due_date,
        )

    def _filtered(
        self,
        file: InputFile,
        reason: str,
        category: str | None = None,
        company: Company | None = None,
        due_date: date | None = None,
    ) -> ProcessingResult:
        logger.warning(f"Filtered: {file.name} ({reason})")
        return ProcessingResult(
            file_name=file.name,
            outcome=Outcome.FILTERED,
            category=category,
            company_id=company.id if company else None,
            due_date=due_date,
            reason=reason,
        )
