"""Exceptions raised by doctriage adapters."""


class DoctriageError(Exception):
    """Base exception for doctriage."""


class UploadError(DoctriageError):
    """Raised when a file could not be persisted by the upload endpoint."""


class RegistryError(DoctriageError):
    """Raised when the company roster could not be loaded."""
