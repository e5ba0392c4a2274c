"""Shared test fixtures."""

from unittest.mock import MagicMock

import pytest

from doctriage.config import default_category_keywords
from doctriage.domain.models import Company, CompanyType, InputFile, UploadReceipt
from doctriage.domain.services import BatchService
from doctriage.ports.extract import TextExtractorPort
from doctriage.ports.upload import UploadPort


@pytest.fixture
def companies() -> list[Company]:
    """Sample client roster."""
    return [
        Company(
            id=1,
            name="Comercial ABC Ltda",
            doc_number="12.345.678/0001-99",
            type=CompanyType.CNPJ,
        ),
        Company(
            id=2,
            name="Padaria Pão Quente ME",
            doc_number="98.765.432/0001-10",
            type=CompanyType.CNPJ,
        ),
        Company(id=3, name="João da Silva", doc_number="123.456", type=CompanyType.CPF),
    ]


@pytest.fixture
def keyword_map() -> dict[str, list[str]]:
    return default_category_keywords()


@pytest.fixture
def mock_extractor() -> MagicMock:
    """Mock text extraction port."""
    mock = MagicMock(spec=TextExtractorPort)
    mock.extract_text.return_value = ""
    return mock


@pytest.fixture
def mock_uploader() -> MagicMock:
    """Mock upload port."""
    mock = MagicMock(spec=UploadPort)
    mock.upload.side_effect = lambda f: UploadReceipt(server_filename=f"srv-{f.name}")
    return mock


@pytest.fixture
def service(
    mock_extractor: MagicMock,
    mock_uploader: MagicMock,
    keyword_map: dict[str, list[str]],
) -> BatchService:
    return BatchService(
        extractor=mock_extractor,
        uploader=mock_uploader,
        keyword_map=keyword_map,
    )


@pytest.fixture
def pdf_file() -> InputFile:
    return InputFile(name="guia.pdf", content=b"%PDF-1.4 test", media_type="application/pdf")
