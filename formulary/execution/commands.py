"""Command runners -- apply a resolved target to disk.

A workspace may exist twice: the user's own copy (the primary) and a local
mirror under ``{home}/repos/local-<name>`` that feeds autocomplete and
dispatch.  Every mutation is applied to the primary first, then repeated
on the mirror when the mirror holds the same formula.  Only the mirror's
``tree.json`` is regenerated, once per successful mutation.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger

from formulary.execution.resolver import formula_path
from formulary.managers.formulas import (
    delete_formula,
    formula_exists,
    local_workspace_dir,
    move_formula,
)
from formulary.managers.tree import regenerate_tree

if TYPE_CHECKING:
    from formulary.context import CommandContext
    from formulary.models.input import DeleteTarget, RenameTarget
    from formulary.models.workspace import Workspace


def mirror_dir(workspace: Workspace, ctx: CommandContext) -> Path | None:
    """Local mirror of ``workspace``, or ``None`` for an unregistered one."""
    if not workspace.name:
        return None
    return local_workspace_dir(ctx.settings.repos_dir, workspace.name)


def run_delete(target: DeleteTarget, ctx: CommandContext) -> bool:
    """Delete ``target`` from the primary workspace and its mirror.

    Returns ``False`` without touching the disk when the target is empty
    (the user declined, or the command named no formula).
    """
    if target.is_empty or target.workspace is None:
        logger.debug("Nothing to delete")
        return False

    segments = target.segments
    logger.info("Deleting formula {} from {}", segments, target.workspace.dir)
    delete_formula(target.workspace.dir, segments, ctx.file_manager)

    mirror = mirror_dir(target.workspace, ctx)
    if mirror is not None and formula_exists(mirror, segments, ctx.directory):
        logger.info("Deleting formula {} from mirror {}", segments, mirror)
        delete_formula(mirror, segments, ctx.file_manager)
        regenerate_tree(mirror, ctx.directory, ctx.file_manager)

    return True


def run_rename(target: RenameTarget, ctx: CommandContext) -> None:
    """Move ``target.old_segments`` to ``target.new_segments`` in the primary
    workspace and, when it holds the old formula, in the mirror.
    """
    workspace = target.workspace
    logger.info("Renaming formula {} -> {} in {}", target.old_segments, target.new_segments, workspace.dir)
    move_formula(workspace.dir, target.old_segments, target.new_segments)

    mirror = mirror_dir(workspace, ctx)
    if mirror is not None and ctx.directory.exists(formula_path(mirror, target.old_segments)):
        logger.info("Renaming formula in mirror {}", mirror)
        move_formula(mirror, target.old_segments, target.new_segments)
        regenerate_tree(mirror, ctx.directory, ctx.file_manager)
