"""Browsing and sharing gateway over a hierarchical store."""

__version__ = "0.1.0"
