"""Upload adapter storing files in a local directory."""

import logging
import re
from pathlib import Path

from ...domain.models import InputFile, UploadReceipt
from ...errors import UploadError
from ...ports.upload import UploadPort

logger = logging.getLogger(__name__)


def sanitize_filename(name: str, max_length: int = 180) -> str:
    """Remove/replace characters invalid in filenames."""
    name = name.replace("\x00", "")
    name = name.replace("..", "_")
    name = re.sub(r'[<>:"/\\|?*]', "_", name)
    name = re.sub(r"[_\s]+", " ", name)
    name = name.strip(". ")
    if len(name) > max_length:
        name = name[:max_length].rsplit(" ", 1)[0]
    return name or "Untitled"


class FilesystemUploadAdapter(UploadPort):
    """Stores uploads under a directory, never overwriting."""

    def __init__(self, directory: Path) -> None:
        self.directory = directory

    def upload(self, file: InputFile) -> UploadReceipt:
        path = Path(file.name)
        stem = sanitize_filename(path.stem)
        suffix = sanitize_filename(path.suffix).lower() if path.suffix else ""
        if suffix and not suffix.startswith("."):
            suffix = f".{suffix}"

        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            dest = self.directory / f"{stem}{suffix}"
            counter = 1
            while dest.exists():
                dest = self.directory / f"{stem} ({counter}){suffix}"
                counter += 1
            dest.write_bytes(file.content)
        except OSError as e:
            raise UploadError(f"Could not store {file.name}: {e}") from e

        logger.info(f"Stored: {dest.name}")
        return UploadReceipt(server_filename=dest.name)
