"""Company registry adapter reading the roster from a YAML file."""

import logging
from pathlib import Path

import yaml

from ...domain.models import Company
from ...errors import RegistryError
from ...ports.registry import CompanyRegistryPort
from .records import company_from_record

logger = logging.getLogger(__name__)


class YamlCompanyRegistry(CompanyRegistryPort):
    """Roster stored as a YAML list of company mappings.

    - id: 1
      name: Comercial ABC Ltda
      doc_number: 12.345.678/0001-99
      type: CNPJ
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def get_companies(self) -> list[Company]:
        try:
            data = yaml.safe_load(self.path.read_text(encoding="utf-8"))
        except (OSError, yaml.YAMLError) as e:
            raise RegistryError(f"Failed to read {self.path}: {e}") from e

        if data is None:
            return []
        if not isinstance(data, list):
            raise RegistryError(f"{self.path} must contain a list of companies")

        companies = [company_from_record(record) for record in data]
        logger.info(f"Loaded {len(companies)} companies from {self.path.name}")
        return companies
