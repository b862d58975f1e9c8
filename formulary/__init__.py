"""Formulary - directory-backed formula namespace management for the ``rit`` CLI."""

__version__ = "0.1.0"
