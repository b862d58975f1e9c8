from __future__ import annotations

import sys
from collections.abc import Callable
from functools import wraps
from typing import TypeVar

import click

from formulary.context import CommandContext
from formulary.exceptions import FormularyError, WorkspaceNotFoundError
from formulary.execution.commands import mirror_dir, run_delete, run_rename
from formulary.execution.input import (
    FORMULA_FLAG,
    NEW_FORMULA_FLAG,
    OLD_FORMULA_FLAG,
    WORKSPACE_FLAG,
    resolve_delete_input,
    resolve_rename_input,
    select_input_mode,
)
from formulary.log import setup_logging
from formulary.managers.tree import regenerate_tree
from formulary.models.enums import InputMode
from formulary.settings import get_settings

F = TypeVar("F", bound=Callable[..., None])


def _domain_errors(func: F) -> F:
    """Report domain and filesystem errors on stderr with exit code 1."""

    @wraps(func)
    def wrapper(*args: object, **kwargs: object) -> None:
        try:
            func(*args, **kwargs)
        except (FormularyError, OSError) as exc:
            raise click.ClickException(str(exc)) from exc

    return wrapper  # type: ignore[return-value]


def _success(message: str) -> None:
    click.secho(message, fg="green")


@click.group()
@click.option("-v", "--verbose", is_flag=True, default=False, help="Log resolution and filesystem steps.")
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """rit - manage a namespace of directory-backed formulas."""
    settings = get_settings()
    setup_logging("DEBUG" if verbose else settings.log_level)
    if ctx.obj is None:
        ctx.obj = CommandContext.from_settings(settings)


# ---------------------------------------------------------------------------
# Delete
# ---------------------------------------------------------------------------


@main.group()
def delete() -> None:
    """Delete namespace objects."""


@delete.command("formula")
@click.option(f"--{WORKSPACE_FLAG}", "workspace", default=None, help="Workspace name (e.g.: Default or default).")
@click.option(f"--{FORMULA_FLAG}", "formula", default=None, help="Formula to remove (e.g.: rit test delete).")
@click.option("--stdin", "use_stdin", is_flag=True, default=False, help="Read a JSON payload from stdin.")
@click.pass_obj
@_domain_errors
def delete_formula_cmd(obj: CommandContext, workspace: str | None, formula: str | None, use_stdin: bool) -> None:
    """Delete a specific formula.

    \b
    Example:
      rit delete formula
      rit delete formula --workspace default --formula "rit test unit"
      echo '{"workspace_path": "...", "formula": "rit test unit"}' | rit delete formula --stdin
    """
    mode = select_input_mode({WORKSPACE_FLAG: workspace, FORMULA_FLAG: formula}, stdin=use_stdin)
    target = resolve_delete_input(mode, obj, workspace=workspace, formula=formula, stream=sys.stdin)

    if run_delete(target, obj) and mode != InputMode.STDIN:
        _success("Formula successfully deleted!")


# ---------------------------------------------------------------------------
# Rename
# ---------------------------------------------------------------------------


@main.group()
def rename() -> None:
    """Rename namespace objects."""


@rename.command("formula")
@click.option(f"--{WORKSPACE_FLAG}", "workspace", default=None, help="Name of the workspace holding the formula.")
@click.option(f"--{OLD_FORMULA_FLAG}", "old_formula", default=None, help="Current formula command.")
@click.option(f"--{NEW_FORMULA_FLAG}", "new_formula", default=None, help="New formula command.")
@click.option("--stdin", "use_stdin", is_flag=True, default=False, help="Read a JSON payload from stdin.")
@click.pass_obj
@_domain_errors
def rename_formula_cmd(
    obj: CommandContext,
    workspace: str | None,
    old_formula: str | None,
    new_formula: str | None,
    use_stdin: bool,
) -> None:
    """Rename (move) a formula inside its workspace.

    \b
    Example:
      rit rename formula
      rit rename formula --workspace default --old-name-formula "rit test unit" --new-name-formula "rit test integration"
    """
    flags = {WORKSPACE_FLAG: workspace, OLD_FORMULA_FLAG: old_formula, NEW_FORMULA_FLAG: new_formula}
    mode = select_input_mode(flags, stdin=use_stdin)
    target = resolve_rename_input(
        mode,
        obj,
        workspace=workspace,
        old_formula=old_formula,
        new_formula=new_formula,
        stream=sys.stdin,
    )

    run_rename(target, obj)
    invocation = obj.settings.invocation
    _success(
        f"Formula '{invocation} {' '.join(target.old_segments)}' renamed to "
        f"'{invocation} {' '.join(target.new_segments)}'."
    )


# ---------------------------------------------------------------------------
# Tree
# ---------------------------------------------------------------------------


@main.group()
def tree() -> None:
    """Command tree index management."""


@tree.command("generate")
@click.option(f"--{WORKSPACE_FLAG}", "workspace", required=True, help="Workspace name.")
@click.option("--mirror", is_flag=True, default=False, help="Regenerate the local mirror instead of the workspace.")
@click.pass_obj
@_domain_errors
def tree_generate_cmd(obj: CommandContext, workspace: str, mirror: bool) -> None:
    """Regenerate tree.json for a workspace."""
    ws = obj.registry.get(workspace)
    if ws is None:
        raise WorkspaceNotFoundError(workspace)

    root = mirror_dir(ws, obj) if mirror else ws.dir
    result = regenerate_tree(root, obj.directory, obj.file_manager)
    _success(f"Command tree regenerated: {len(result.formulas())} formulas.")


if __name__ == "__main__":
    main()
