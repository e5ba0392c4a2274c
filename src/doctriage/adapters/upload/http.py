"""Upload adapter posting files to the document API."""

import logging

import httpx

from ...domain.models import InputFile, UploadReceipt
from ...errors import UploadError
from ...ports.upload import UploadPort

logger = logging.getLogger(__name__)


class HttpUploadAdapter(UploadPort):
    """Multipart upload to POST {base_url}/api/upload."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        client: httpx.Client | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.client = client or httpx.Client(timeout=timeout)

    def upload(self, file: InputFile) -> UploadReceipt:
        logger.info(f"Uploading {file.name} to {self.base_url}")
        media_type = file.media_type or "application/octet-stream"

        try:
            response = self.client.post(
                f"{self.base_url}/api/upload",
                files={"file": (file.name, file.content, media_type)},
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as e:
            raise UploadError(f"Upload request failed: {e}") from e
        except ValueError as e:
            raise UploadError(f"Invalid upload response: {e}") from e

        filename = data.get("filename") if isinstance(data, dict) else None
        if not filename:
            raise UploadError("Upload response has no filename")

        return UploadReceipt(server_filename=filename)
