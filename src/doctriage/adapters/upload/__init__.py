"""Upload adapters."""

from ...config import UploadBackend, UploadConfig
from ...ports.upload import UploadPort
from .filesystem import FilesystemUploadAdapter
from .http import HttpUploadAdapter

__all__ = ["FilesystemUploadAdapter", "HttpUploadAdapter", "create_uploader"]


def create_uploader(config: UploadConfig) -> UploadPort:
    """Create upload adapter based on configuration."""
    if config.backend == UploadBackend.HTTP:
        return HttpUploadAdapter(base_url=config.base_url, timeout=config.timeout)
    elif config.backend == UploadBackend.FILESYSTEM:
        return FilesystemUploadAdapter(config.directory)
    else:
        raise ValueError(f"Unknown upload backend: {config.backend}")
