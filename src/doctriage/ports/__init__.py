"""Ports - interfaces for external dependencies."""

from .extract import TextExtractorPort
from .registry import CompanyRegistryPort
from .upload import UploadPort

__all__ = ["CompanyRegistryPort", "TextExtractorPort", "UploadPort"]
