"""Company registry adapter reading the roster from the document API."""

import logging

import httpx

from ...domain.models import Company
from ...errors import RegistryError
from ...ports.registry import CompanyRegistryPort
from .records import company_from_record

logger = logging.getLogger(__name__)


class HttpCompanyRegistry(CompanyRegistryPort):
    """Roster from GET {base_url}/api/companies."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        client: httpx.Client | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.client = client or httpx.Client(timeout=timeout)

    def get_companies(self) -> list[Company]:
        try:
            response = self.client.get(f"{self.base_url}/api/companies")
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as e:
            raise RegistryError(f"Failed to fetch companies: {e}") from e
        except ValueError as e:
            raise RegistryError(f"Invalid companies response: {e}") from e

        if not isinstance(data, list):
            raise RegistryError("Companies response must be a list")

        companies = [company_from_record(record) for record in data]
        logger.info(f"Loaded {len(companies)} companies from {self.base_url}")
        return companies
