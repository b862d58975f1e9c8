"""Filesystem boundary for formulary."""

from formulary.store.base import DirectoryAccessor, FileManager
from formulary.store.local import LocalDirectory, LocalFileManager

__all__ = ["DirectoryAccessor", "FileManager", "LocalDirectory", "LocalFileManager"]
