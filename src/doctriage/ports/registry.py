"""Company registry port - interface for the client roster."""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..domain.models import Company


class CompanyRegistryPort(ABC):
    """Interface for reading the company roster."""

    @abstractmethod
    def get_companies(self) -> list["Company"]:
        """Return a snapshot of registered companies."""
        pass
