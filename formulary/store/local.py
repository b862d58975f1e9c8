"""Local filesystem implementations of the store protocols.

Writes are atomic: data is written to a temporary file in the same
directory, then renamed over the target.  A crash mid-write never leaves a
truncated ``tree.json`` or registry file behind.
"""

from __future__ import annotations

import contextlib
import os
import tempfile
from pathlib import Path

from loguru import logger

from formulary.exceptions import DirectoryListError


class LocalDirectory:
    """Local filesystem implementation of the DirectoryAccessor protocol.

    Only directories are listed: regular files at a namespace level are
    never command words.
    """

    def list(self, path: str | Path, include_hidden: bool = False) -> list[str]:
        try:
            with os.scandir(path) as it:
                names = [e.name for e in it if e.is_dir()]
        except OSError as exc:
            raise DirectoryListError(str(path), exc.strerror or str(exc)) from exc

        if not include_hidden:
            names = [n for n in names if not n.startswith(".")]
        return sorted(names)

    def exists(self, path: str | Path) -> bool:
        return Path(path).exists()


class LocalFileManager:
    """Local filesystem implementation of the FileManager protocol."""

    def remove(self, path: str | Path) -> None:
        logger.debug("Removing file {}", path)
        os.remove(path)

    def write(self, path: str | Path, data: bytes) -> None:
        _atomic_write(Path(path), data)


def _atomic_write(path: Path, data: bytes) -> None:
    """Write data atomically: temp file + rename.

    The temp file is created in the same directory so ``os.replace`` is
    atomic on POSIX.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(dir=path.parent, suffix=".tmp")
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        os.replace(tmp_path, path)
    except BaseException:
        with contextlib.suppress(OSError):
            os.unlink(tmp_path)
        raise
