"""Listing title classification and attribute extraction for server hardware."""

__version__ = "0.1.0"
