"""Glossa: translation resolution and curation service."""

__version__ = "0.1.0"
