"""Path resolver -- turns user choices or a command string into the list of
directory names (segments) leading from a workspace root to a formula.

Three entry points, one per input style:

1. ``resolve_interactive`` walks the workspace one level at a time, asking
   the user to pick a group or formula at every level.
2. ``resolve_from_flat_string`` parses ``"rit test unit"`` into
   ``["test", "unit"]`` without touching the filesystem.
3. ``resolve_from_flags`` looks the workspace up by name in the registry and
   parses the formula string.

A directory is a formula when it contains ``src``.  A formula directory may
also hold further formulas next to ``src`` (a nested formula); interactive
resolution then lets the user either stop at the current formula or keep
descending.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger

from formulary.exceptions import IncorrectFormulaNameError, WorkspaceNotFoundError
from formulary.models.enums import DirKind
from formulary.models.workspace import Workspace

if TYPE_CHECKING:
    from formulary.prompt import PromptProvider
    from formulary.registry import WorkspaceRegistry
    from formulary.store.base import DirectoryAccessor

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

DOCS_DIR = "docs"
SRC_DIR = "src"
BIN_DIR = "bin"
RESERVED_DIRS = frozenset({SRC_DIR, BIN_DIR, DOCS_DIR})

QUESTION_SELECT_FORMULA_GROUP = "Select a formula or group: "
QUESTION_FOUND_FORMULA = "we found a formula, which one do you want to {action}: "
OPTION_OTHER_FORMULA = "Another formula"


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------


def is_formula(entries: list[str]) -> bool:
    return SRC_DIR in entries


def has_formula_in_dir(entries: list[str]) -> bool:
    """True if anything besides ``docs`` and ``src`` lives at this level."""
    return any(e not in (DOCS_DIR, SRC_DIR) for e in entries)


def classify_dir(entries: list[str]) -> DirKind:
    """Classify a directory from its subdirectory names.

    Computed on demand every time; the filesystem is the source of truth.
    """
    if not is_formula(entries):
        return DirKind.GROUP
    if has_formula_in_dir(entries):
        return DirKind.NESTED_FORMULA
    return DirKind.FORMULA


def formula_path(root: str | Path, segments: list[str]) -> Path:
    """Join ``segments`` onto ``root``."""
    return Path(root).joinpath(*segments)


# ---------------------------------------------------------------------------
# Interactive
# ---------------------------------------------------------------------------


def resolve_interactive(
    directory: DirectoryAccessor,
    prompt: PromptProvider,
    start_dir: str | Path,
    start_label: str,
    *,
    action: str = "delete",
) -> list[str] | None:
    """Walk ``start_dir`` asking the user to pick a path to a formula.

    Parameters
    ----------
    directory:
        Directory accessor used to list each level.
    prompt:
        Prompt provider for the per-level choices.
    start_dir:
        Directory the walk starts from (normally the workspace root).
    start_label:
        Command label for ``start_dir`` (``"rit"`` at the workspace root).
        Offered as the "stop here" answer when a nested formula is found.
    action:
        Verb used in the stop-or-descend question.

    Returns
    -------
    list[str] | None
        The selected segments.  ``[]`` means the walk stopped at
        ``start_dir`` itself (it is a formula).  ``None`` means ``start_dir``
        is an empty group: there was nothing to select.

    Raises
    ------
    DirectoryListError:
        A level could not be read.
    PromptCancelledError:
        The user aborted a prompt.
    """
    entries = [e for e in directory.list(start_dir, False) if e != DOCS_DIR]

    kind = classify_dir(entries)
    if kind == DirKind.FORMULA:
        logger.debug("Resolver: '{}' is a formula", start_label)
        return []

    if kind == DirKind.NESTED_FORMULA:
        question = QUESTION_FOUND_FORMULA.format(action=action)
        answer = prompt.choice(question, [start_label, OPTION_OTHER_FORMULA])
        if answer == start_label:
            return []
        entries = [e for e in entries if e != SRC_DIR]

    if not entries:
        logger.debug("Resolver: '{}' has nothing to select", start_label)
        return None

    selected = prompt.choice(QUESTION_SELECT_FORMULA_GROUP, entries)
    logger.debug("Resolver: selected '{}' under '{}'", selected, start_label)

    rest = resolve_interactive(
        directory,
        prompt,
        Path(start_dir) / selected,
        f"{start_label} {selected}",
        action=action,
    )
    if rest is None:
        return None
    return [selected, *rest]


# ---------------------------------------------------------------------------
# Scripted
# ---------------------------------------------------------------------------


def resolve_from_flat_string(command: str, invocation: str = "rit") -> list[str]:
    """Split ``"rit my amazing formula"`` into ``["my", "amazing", "formula"]``.

    Raises ``IncorrectFormulaNameError`` if the first word is not
    ``invocation``.
    """
    words = command.split()
    if not words or words[0] != invocation:
        raise IncorrectFormulaNameError(command)
    return words[1:]


def check_segments(root: str | Path, segments: list[str], command: str | None = None) -> None:
    """Make sure ``segments`` name a directory strictly inside ``root``.

    Each segment must be a single plain directory name: not empty, not
    ``.`` or ``..``, free of path separators and not one of the reserved
    formula content directories.  Runs before anything on disk changes.

    Raises ``IncorrectFormulaNameError``.
    """
    separators = {sep for sep in (os.sep, os.altsep, "/") if sep}
    for segment in segments:
        if segment in ("", ".", "..") or segment in RESERVED_DIRS or any(s in segment for s in separators):
            raise IncorrectFormulaNameError(command)

    if not segments:
        return
    base = Path(root).resolve()
    target = base.joinpath(*segments).resolve()
    if target == base or not target.is_relative_to(base):
        raise IncorrectFormulaNameError(command)


def resolve_from_flags(
    workspace_name: str,
    formula: str,
    registry: WorkspaceRegistry,
    invocation: str = "rit",
) -> tuple[Workspace, list[str]]:
    """Resolve ``--workspace`` / ``--formula`` values.

    Raises ``WorkspaceNotFoundError`` if no workspace matches
    ``workspace_name`` (case-insensitive) and ``IncorrectFormulaNameError``
    if ``formula`` does not start with ``invocation`` or names a path outside
    the workspace.
    """
    workspace = registry.get(workspace_name)
    if workspace is None:
        raise WorkspaceNotFoundError(workspace_name)
    segments = resolve_from_flat_string(formula, invocation)
    check_segments(workspace.dir, segments, formula)
    return workspace, segments


def find_workspace_by_dir(path: str, registry: WorkspaceRegistry) -> Workspace | None:
    """Exact, case-insensitive match of ``path`` against registered workspace dirs."""
    return registry.find_by_dir(path)
