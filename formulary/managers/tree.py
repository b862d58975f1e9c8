"""Command tree generation.

Walks a workspace and rebuilds its ``tree.json`` index from scratch.  Every
namespace directory becomes a command node; nodes whose directory contains
``src`` are flagged as formulas.  Reserved directories (``src``, ``bin``,
``docs``) and hidden directories are not commands and are skipped.

Help text for a node is read from an optional ``help.json`` in its
directory::

    {"short": "Run unit tests", "long": "Run the unit test suite with coverage."}

When absent, the directory name is used.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger

from formulary.exceptions import DecodeError
from formulary.execution.resolver import BIN_DIR, DOCS_DIR, SRC_DIR
from formulary.models.tree import CommandTree

if TYPE_CHECKING:
    from formulary.store.base import DirectoryAccessor, FileManager

TREE_FILE = "tree.json"
HELP_FILE = "help.json"

_RESERVED_DIRS = frozenset({SRC_DIR, BIN_DIR, DOCS_DIR})


def generate_tree(root: str | Path, directory: DirectoryAccessor) -> CommandTree:
    """Build the command tree for the workspace at ``root``.

    Raises ``DirectoryListError`` if any directory cannot be read and
    ``DecodeError`` if a ``help.json`` is malformed.
    """
    tree = CommandTree()
    root = Path(root)

    # Explicit stack instead of recursion; reversed pushes keep sorted order.
    stack: list[list[str]] = [[name] for name in reversed(_children(root, directory))]
    while stack:
        segments = stack.pop()
        path = root.joinpath(*segments)
        entries = directory.list(path, False)
        short, long = _read_help(path, default=segments[-1])
        tree.add(segments, help=short, long_help=long, formula=SRC_DIR in entries)
        stack.extend([*segments, name] for name in reversed(_children(path, directory, entries)))

    logger.debug("Generated tree for {} ({} commands)", root, len(tree.commands))
    return tree


def write_tree(root: str | Path, tree: CommandTree, file_manager: FileManager) -> Path:
    """Serialize ``tree`` to ``{root}/tree.json``, replacing any previous index."""
    path = Path(root) / TREE_FILE
    data = tree.model_dump_json(indent=2).encode("utf-8")
    file_manager.write(path, data)
    return path


def regenerate_tree(root: str | Path, directory: DirectoryAccessor, file_manager: FileManager) -> CommandTree:
    """Generate and persist the tree for ``root`` in one step."""
    tree = generate_tree(root, directory)
    path = write_tree(root, tree, file_manager)
    logger.info("Regenerated command tree {} ({} formulas)", path, len(tree.formulas()))
    return tree


def _children(path: Path, directory: DirectoryAccessor, entries: list[str] | None = None) -> list[str]:
    if entries is None:
        entries = directory.list(path, False)
    return [e for e in entries if e not in _RESERVED_DIRS]


def _read_help(path: Path, *, default: str) -> tuple[str, str]:
    help_file = path / HELP_FILE
    if not help_file.is_file():
        return default, ""

    try:
        raw = json.loads(help_file.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        msg = f"invalid {HELP_FILE} in {path}: {exc}"
        raise DecodeError(msg) from None
    if not isinstance(raw, dict):
        msg = f"invalid {HELP_FILE} in {path}: expected an object"
        raise DecodeError(msg)

    short = raw.get("short") or default
    return str(short), str(raw.get("long") or "")
