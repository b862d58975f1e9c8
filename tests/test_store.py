"""Unit tests for the local filesystem boundary.

No fixtures beyond a temporary directory.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from formulary.exceptions import DirectoryListError
from formulary.store import DirectoryAccessor, FileManager, LocalDirectory, LocalFileManager


def test_protocols_satisfied() -> None:
    assert isinstance(LocalDirectory(), DirectoryAccessor)
    assert isinstance(LocalFileManager(), FileManager)


def test_list_returns_sorted_directories_only(tmp_path: Path) -> None:
    for name in ("zeta", "alpha", ".hidden"):
        (tmp_path / name).mkdir()
    (tmp_path / "file.txt").write_text("x", encoding="utf-8")

    directory = LocalDirectory()

    assert directory.list(tmp_path) == ["alpha", "zeta"]
    assert directory.list(tmp_path, include_hidden=True) == [".hidden", "alpha", "zeta"]


def test_list_missing_dir(tmp_path: Path) -> None:
    with pytest.raises(DirectoryListError) as exc_info:
        LocalDirectory().list(tmp_path / "missing")
    assert isinstance(exc_info.value, OSError)
    assert exc_info.value.path == str(tmp_path / "missing")


def test_exists(tmp_path: Path) -> None:
    directory = LocalDirectory()
    assert directory.exists(tmp_path) is True
    assert directory.exists(tmp_path / "nope") is False


def test_write_creates_parents_and_replaces(tmp_path: Path) -> None:
    files = LocalFileManager()
    target = tmp_path / "nested" / "tree.json"

    files.write(target, b"first")
    files.write(target, b"second")

    assert target.read_bytes() == b"second"
    assert [p.name for p in target.parent.iterdir()] == ["tree.json"]


def test_remove(tmp_path: Path) -> None:
    target = tmp_path / "gone.txt"
    target.write_text("x", encoding="utf-8")

    LocalFileManager().remove(target)

    assert not target.exists()
    with pytest.raises(FileNotFoundError):
        LocalFileManager().remove(target)
