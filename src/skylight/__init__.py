"""Skylight - multi-calendar schedule views with overlap-aware layout."""

__version__ = "0.1.0"
