"""Structural mutation of a formula namespace: delete and move.

Both operations share the same post-order pruning rule: after the target
is gone, every ancestor directory between the workspace root and the old
location is removed if it no longer contains any subdirectory.  The
workspace root itself is never removed.

A nested formula (one that also contains other formulas or groups next to
``src``) is never removed wholesale: only what belongs to the formula
itself goes (``src``, ``bin`` and plain files), the nested children stay.

Nothing here is transactional.  A failure mid-way aborts the remaining
steps and propagates; already-removed directories are not restored.
"""

from __future__ import annotations

import os
import shutil
from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger

from formulary.exceptions import FormulaConflictError, FormulaLookupError
from formulary.execution.resolver import BIN_DIR, DOCS_DIR, SRC_DIR

if TYPE_CHECKING:
    from formulary.store.base import DirectoryAccessor, FileManager

LOCAL_REPO_PREFIX = "local"


# ---------------------------------------------------------------------------
# Inspection
# ---------------------------------------------------------------------------


def is_nested_formula(path: str | Path) -> bool:
    """True if ``path`` has a subdirectory other than ``src`` and ``bin``."""
    with os.scandir(path) as it:
        return any(e.is_dir() and e.name not in (SRC_DIR, BIN_DIR) for e in it)


def can_delete(path: str | Path) -> bool:
    """True if ``path`` holds no subdirectory (plain files don't count)."""
    with os.scandir(path) as it:
        return not any(e.is_dir() for e in it)


def formula_exists(root: str | Path, segments: list[str], directory: DirectoryAccessor) -> bool:
    return directory.exists(Path(root).joinpath(*segments))


def local_workspace_dir(repos_dir: str | Path, workspace_name: str) -> Path:
    """Mirror cache of a workspace: ``{repos_dir}/local-<name>``."""
    return Path(repos_dir) / f"{LOCAL_REPO_PREFIX}-{workspace_name.lower()}"


# ---------------------------------------------------------------------------
# Delete
# ---------------------------------------------------------------------------


def delete_formula(root: str | Path, segments: list[str], file_manager: FileManager) -> None:
    """Delete the formula at ``root/segments`` and prune emptied ancestors.

    Raises ``OSError`` (unchanged) if any listing or removal fails; pruning
    stops at the first failure.
    """
    _delete(Path(root), segments, 0, file_manager)


def _delete(path: Path, segments: list[str], index: int, file_manager: FileManager) -> None:
    if index == len(segments):
        if is_nested_formula(path):
            safe_remove_formula(path, file_manager)
        else:
            logger.info("Removing formula directory {}", path)
            shutil.rmtree(path)
        return

    _delete(path / segments[index], segments, index + 1, file_manager)

    if index == 0:
        return
    _prune(path)


def safe_remove_formula(path: str | Path, file_manager: FileManager) -> None:
    """Remove a nested formula's own content, keeping its child directories.

    ``src`` and ``bin`` go wholesale; every plain file is removed through
    ``file_manager``; any other directory is left untouched.
    """
    logger.info("Removing nested formula content in {}", path)
    with os.scandir(path) as it:
        entries = list(it)

    for entry in entries:
        if entry.is_dir():
            if entry.name in (SRC_DIR, BIN_DIR):
                shutil.rmtree(entry.path)
        else:
            file_manager.remove(entry.path)


def _prune(path: Path) -> None:
    if can_delete(path):
        logger.info("Pruning empty group {}", path)
        shutil.rmtree(path)


# ---------------------------------------------------------------------------
# Move
# ---------------------------------------------------------------------------


def move_formula(root: str | Path, old_segments: list[str], new_segments: list[str]) -> None:
    """Move the formula at ``old_segments`` to ``new_segments``.

    A plain formula directory is moved with a single rename.  For a nested
    formula only its own content (``src``, ``bin``, ``docs`` and plain
    files) moves; the nested children stay where they are.  Missing parent
    groups of the destination are created.  Afterwards the old location's
    ancestors are pruned exactly as ``delete_formula`` does.

    Raises ``FormulaLookupError`` if the source is not a formula and
    ``FormulaConflictError`` if either path lies inside the other or the
    destination is already a formula.
    """
    root = Path(root)
    if not old_segments or not new_segments:
        msg = "formula command must name at least one group"
        raise FormulaConflictError(msg)
    if _is_prefix(old_segments, new_segments) or _is_prefix(new_segments, old_segments):
        msg = "cannot move a formula into itself or one of its parents"
        raise FormulaConflictError(msg)

    src = root.joinpath(*old_segments)
    dst = root.joinpath(*new_segments)
    if not (src / SRC_DIR).is_dir():
        raise FormulaLookupError(" ".join(old_segments), str(root))
    if (dst / SRC_DIR).is_dir():
        msg = f"destination '{' '.join(new_segments)}' is already a formula"
        raise FormulaConflictError(msg)

    nested = is_nested_formula(src)
    if nested or dst.exists():
        # Merge into dst: only the formula's own entries travel.
        _move_formula_content(src, dst, nested=nested)
    else:
        logger.info("Moving formula {} -> {}", src, dst)
        dst.parent.mkdir(parents=True, exist_ok=True)
        os.replace(src, dst)

    _prune_ancestors(root, old_segments, nested=nested)


def _move_formula_content(src: Path, dst: Path, *, nested: bool) -> None:
    with os.scandir(src) as it:
        entries = [e for e in it if not (nested and e.is_dir() and e.name not in (SRC_DIR, BIN_DIR, DOCS_DIR))]

    clashes = [e.name for e in entries if (dst / e.name).exists()]
    if clashes:
        msg = f"destination '{dst}' already contains: {', '.join(sorted(clashes))}"
        raise FormulaConflictError(msg)

    logger.info("Moving formula content {} -> {}", src, dst)
    dst.mkdir(parents=True, exist_ok=True)
    for entry in entries:
        os.replace(entry.path, dst / entry.name)

    if not nested:
        src.rmdir()


def _prune_ancestors(root: Path, segments: list[str], *, nested: bool) -> None:
    """Prune from the old location up to (not including) the root.

    A nested formula's own directory is kept while it still has children,
    so the walk starts at the formula itself in that case.
    """
    depth = len(segments) if nested else len(segments) - 1
    for index in range(depth, 0, -1):
        path = root.joinpath(*segments[:index])
        if not path.exists():
            continue
        _prune(path)


def _is_prefix(prefix: list[str], segments: list[str]) -> bool:
    return segments[: len(prefix)] == prefix
