"""Input resolution -- decides where a command's target comes from and
turns that input into a resolved target.

Each invocation uses exactly one channel, picked once up front by
``select_input_mode``:

- **stdin**: a JSON payload is read from the input stream (``--stdin``).
  No prompts are shown.
- **flags**: ``--workspace`` / ``--formula`` (or the rename flags) carry
  everything.  A missing value is an error, never a prompt.
- **prompt**: the user picks (or registers) a workspace and walks the
  namespace interactively.  Deletes ask for confirmation.
"""

from __future__ import annotations

import re
from typing import IO, TYPE_CHECKING, TypeVar

from loguru import logger
from pydantic import BaseModel, ValidationError

from formulary.exceptions import (
    DecodeError,
    FormulaLookupError,
    FormulaNotFoundError,
    InvalidFormulaCommandError,
    MissingFlagError,
    WorkspaceNotFoundError,
)
from formulary.execution.resolver import (
    RESERVED_DIRS,
    SRC_DIR,
    check_segments,
    find_workspace_by_dir,
    formula_path,
    resolve_from_flags,
    resolve_from_flat_string,
    resolve_interactive,
)
from formulary.models.enums import InputMode
from formulary.models.input import DeleteFormulaStdin, DeleteTarget, RenameFormulaStdin, RenameTarget
from formulary.models.workspace import Workspace
from formulary.prompt import required

if TYPE_CHECKING:
    from formulary.context import CommandContext

ModelT = TypeVar("ModelT", bound=BaseModel)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

WORKSPACE_FLAG = "workspace"
FORMULA_FLAG = "formula"
OLD_FORMULA_FLAG = "old-name-formula"
NEW_FORMULA_FLAG = "new-name-formula"

QUESTION_SELECT_WORKSPACE = "Select a formula workspace: "
OPTION_NEW_WORKSPACE = "Type new formula workspace?"
QUESTION_WORKSPACE_NAME = "Workspace name: "
QUESTION_WORKSPACE_PATH = "Workspace path (e.g.: /home/user/github): "
QUESTION_NEW_FORMULA = "Enter the new formula command: "
HELPER_NEW_FORMULA = "You must create your command based in this example [{invocation} group verb noun]"

CORE_COMMANDS = frozenset(
    {
        "add",
        "build",
        "completion",
        "create",
        "delete",
        "help",
        "init",
        "list",
        "metrics",
        "rename",
        "set",
        "show",
        "tutorial",
        "update",
        "upgrade",
    }
)

_WORD_RE = re.compile(r"^[a-z0-9][a-z0-9_-]*$")


# ---------------------------------------------------------------------------
# Mode selection
# ---------------------------------------------------------------------------


def select_input_mode(flag_values: dict[str, str | None], *, stdin: bool = False) -> InputMode:
    """Pick the input channel for this invocation.

    ``--stdin`` wins; otherwise any flag given on the command line selects
    flag mode, even with an empty value; otherwise the user is prompted.
    """
    if stdin:
        mode = InputMode.STDIN
    elif any(value is not None for value in flag_values.values()):
        mode = InputMode.FLAGS
    else:
        mode = InputMode.PROMPT
    logger.debug("Input mode: {}", mode)
    return mode


def read_stdin_payload(stream: IO[str], model: type[ModelT]) -> ModelT:
    """Decode one JSON payload from ``stream``.  Raises ``DecodeError``."""
    raw = stream.read()
    try:
        return model.model_validate_json(raw)
    except ValidationError as exc:
        msg = f"invalid stdin payload: {exc.errors(include_url=False)}"
        raise DecodeError(msg) from None


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def validate_formula_command(command: str, invocation: str = "rit") -> None:
    """Check a new formula command such as ``rit group verb``.

    Raises ``InvalidFormulaCommandError`` describing the first problem found.
    """
    if not command.strip():
        msg = "this input must not be empty"
        raise InvalidFormulaCommandError(msg)

    words = command.split(" ")
    if words[0] != invocation:
        msg = f'formula command needs to start with "{invocation}" [ex.: {invocation} group verb <noun>]'
        raise InvalidFormulaCommandError(msg)

    if len(words) <= 2:
        msg = f'formula command needs at least 2 words following "{invocation}" [ex.: {invocation} group verb]'
        raise InvalidFormulaCommandError(msg)

    if words[1] in CORE_COMMANDS:
        msg = f'"{words[1]}" is a core command and cannot start a formula command'
        raise InvalidFormulaCommandError(msg)

    for word in words[1:]:
        if word in RESERVED_DIRS:
            msg = f'"{word}" is reserved for formula content and cannot be a command word'
            raise InvalidFormulaCommandError(msg)
        if not _WORD_RE.match(word):
            msg = f'"{word}" is not allowed: use lowercase letters, digits, "-" and "_"'
            raise InvalidFormulaCommandError(msg)


def _require(flag: str, value: str | None) -> str:
    if not value:
        raise MissingFlagError(flag)
    return value


# ---------------------------------------------------------------------------
# Workspace prompt
# ---------------------------------------------------------------------------


def select_workspace(ctx: CommandContext) -> Workspace:
    """Ask the user to pick a registered workspace or describe a new one.

    The returned workspace is not registered here; callers decide.
    """
    workspaces = ctx.registry.list()
    labels = {f"{name} ({path})": Workspace(name=name, dir=path) for name, path in workspaces.items()}

    selected = ctx.prompt.choice(QUESTION_SELECT_WORKSPACE, [*labels, OPTION_NEW_WORKSPACE])
    if selected != OPTION_NEW_WORKSPACE:
        return labels[selected]

    name = ctx.prompt.text(QUESTION_WORKSPACE_NAME, required("workspace name"))
    path = ctx.prompt.text(QUESTION_WORKSPACE_PATH, required("workspace path"))
    return Workspace(name=name, dir=path)


def _walk(ctx: CommandContext, workspace: Workspace, action: str) -> list[str]:
    segments = resolve_interactive(
        ctx.directory,
        ctx.prompt,
        workspace.dir,
        ctx.settings.invocation,
        action=action,
    )
    if not segments:
        raise FormulaNotFoundError
    return segments


# ---------------------------------------------------------------------------
# Delete
# ---------------------------------------------------------------------------


def resolve_delete_stdin(stream: IO[str], ctx: CommandContext) -> DeleteTarget:
    """Resolve a delete from a ``{"workspace_path", "formula"}`` payload.

    The workspace is matched by directory.  An unregistered directory is
    still used as the primary workspace; it just has no mirror.
    """
    payload = read_stdin_payload(stream, DeleteFormulaStdin)
    segments = resolve_from_flat_string(payload.formula, ctx.settings.invocation)
    check_segments(payload.workspace_path, segments, payload.formula)

    workspace = find_workspace_by_dir(payload.workspace_path, ctx.registry)
    if workspace is None:
        logger.debug("Workspace path {} is not registered", payload.workspace_path)
        workspace = Workspace(name="", dir=payload.workspace_path)
    return DeleteTarget(workspace=workspace, segments=segments)


def resolve_delete_flags(workspace: str | None, formula: str | None, ctx: CommandContext) -> DeleteTarget:
    workspace_name = _require(WORKSPACE_FLAG, workspace)
    formula = _require(FORMULA_FLAG, formula)
    ws, segments = resolve_from_flags(workspace_name, formula, ctx.registry, ctx.settings.invocation)
    return DeleteTarget(workspace=ws, segments=segments)


def resolve_delete_prompt(ctx: CommandContext) -> DeleteTarget:
    """Interactive delete: workspace, formula walk, then confirmation.

    Declining the confirmation returns an empty target, which the runner
    treats as "nothing to do".
    """
    workspace = select_workspace(ctx)
    ctx.registry.add(workspace)

    segments = _walk(ctx, workspace, "delete")

    invocation = ctx.settings.invocation
    question = f"Are you sure you want to delete the formula: {invocation} {' '.join(segments)}"
    if not ctx.prompt.confirm(question, ["no", "yes"]):
        logger.debug("Delete declined by user")
        return DeleteTarget()

    return DeleteTarget(workspace=workspace, segments=segments)


def resolve_delete_input(
    mode: InputMode,
    ctx: CommandContext,
    *,
    workspace: str | None = None,
    formula: str | None = None,
    stream: IO[str] | None = None,
) -> DeleteTarget:
    match mode:
        case InputMode.STDIN:
            if stream is None:
                msg = "stdin mode requires an input stream"
                raise ValueError(msg)
            return resolve_delete_stdin(stream, ctx)
        case InputMode.FLAGS:
            return resolve_delete_flags(workspace, formula, ctx)
        case InputMode.PROMPT:
            return resolve_delete_prompt(ctx)


# ---------------------------------------------------------------------------
# Rename
# ---------------------------------------------------------------------------


def _rename_target(workspace: Workspace, old_formula: str, new_formula: str, ctx: CommandContext) -> RenameTarget:
    invocation = ctx.settings.invocation
    old_segments = resolve_from_flat_string(old_formula, invocation)
    check_segments(workspace.dir, old_segments, old_formula)
    # Only a formula can be renamed; a group has no src of its own.
    if not old_segments or not ctx.directory.exists(formula_path(workspace.dir, old_segments) / SRC_DIR):
        raise FormulaLookupError(old_formula, workspace.dir)

    validate_formula_command(new_formula, invocation)
    new_segments = resolve_from_flat_string(new_formula, invocation)
    check_segments(workspace.dir, new_segments, new_formula)
    return RenameTarget(workspace=workspace, old_segments=old_segments, new_segments=new_segments)


def resolve_rename_stdin(stream: IO[str], ctx: CommandContext) -> RenameTarget:
    payload = read_stdin_payload(stream, RenameFormulaStdin)
    workspace = find_workspace_by_dir(payload.workspace_path, ctx.registry)
    if workspace is None:
        workspace = Workspace(name="", dir=payload.workspace_path)
    return _rename_target(workspace, payload.old_formula, payload.new_formula, ctx)


def resolve_rename_flags(
    workspace: str | None,
    old_formula: str | None,
    new_formula: str | None,
    ctx: CommandContext,
) -> RenameTarget:
    workspace_name = _require(WORKSPACE_FLAG, workspace)
    ws = ctx.registry.get(workspace_name)
    if ws is None:
        raise WorkspaceNotFoundError(workspace_name)

    old_formula = _require(OLD_FORMULA_FLAG, old_formula)
    new_formula = _require(NEW_FORMULA_FLAG, new_formula)
    return _rename_target(ws, old_formula, new_formula, ctx)


def resolve_rename_prompt(ctx: CommandContext) -> RenameTarget:
    """Interactive rename: workspace, formula walk, then the new command.

    No confirmation is asked: a rename is reversible.
    """
    workspace = select_workspace(ctx)
    old_segments = _walk(ctx, workspace, "rename")

    invocation = ctx.settings.invocation

    def _validator(value: str) -> None:
        validate_formula_command(value, invocation)

    new_formula = ctx.prompt.text(
        QUESTION_NEW_FORMULA,
        _validator,
        HELPER_NEW_FORMULA.format(invocation=invocation),
    )
    return RenameTarget(
        workspace=workspace,
        old_segments=old_segments,
        new_segments=resolve_from_flat_string(new_formula, invocation),
    )


def resolve_rename_input(
    mode: InputMode,
    ctx: CommandContext,
    *,
    workspace: str | None = None,
    old_formula: str | None = None,
    new_formula: str | None = None,
    stream: IO[str] | None = None,
) -> RenameTarget:
    match mode:
        case InputMode.STDIN:
            if stream is None:
                msg = "stdin mode requires an input stream"
                raise ValueError(msg)
            return resolve_rename_stdin(stream, ctx)
        case InputMode.FLAGS:
            return resolve_rename_flags(workspace, old_formula, new_formula, ctx)
        case InputMode.PROMPT:
            return resolve_rename_prompt(ctx)
