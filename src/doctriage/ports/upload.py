"""Upload port - interface for persisting accepted files."""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..domain.models import InputFile, UploadReceipt


class UploadPort(ABC):
    """Interface for the remote upload/storage endpoint."""

    @abstractmethod
    def upload(self, file: "InputFile") -> "UploadReceipt":
        """Persist a file.

        Returns the server-assigned handle. Raises on failure.
        """
        pass
