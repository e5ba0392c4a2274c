"""Classify accounting documents by client and category, and date them."""

__version__ = "0.1.0"
