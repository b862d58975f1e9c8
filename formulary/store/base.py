"""Filesystem boundary consumed by the resolution and mutation engine.

The engine never touches ``os`` directly for listing or for removing single
files; it goes through these protocols so tests can observe (or fail)
individual operations.  Whole-subtree removal and moves stay in the
mutation layer because they are part of its invariants.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable


@runtime_checkable
class DirectoryAccessor(Protocol):
    """Read side: directory listing and existence checks."""

    def list(self, path: str | Path, include_hidden: bool = False) -> list[str]:
        """Return the names of subdirectories of ``path``, sorted.

        Raises ``DirectoryListError`` if ``path`` cannot be read.
        """
        ...

    def exists(self, path: str | Path) -> bool:
        """Check whether ``path`` exists."""
        ...


@runtime_checkable
class FileManager(Protocol):
    """Write side: single-file removal and whole-file writes."""

    def remove(self, path: str | Path) -> None:
        """Remove a single file.  Raises ``OSError`` on failure."""
        ...

    def write(self, path: str | Path, data: bytes) -> None:
        """Write ``data`` to ``path`` atomically, replacing any previous file."""
        ...
