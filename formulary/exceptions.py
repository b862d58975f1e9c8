"""Domain exceptions for formula resolution and namespace mutation.

Managers and resolvers raise these; only ``formulary.cli`` translates them
into user-facing output and exit codes.  Each error also subclasses the
builtin it is closest to so callers can catch ``LookupError`` /
``ValueError`` / ``OSError`` generically.
"""

from __future__ import annotations


class FormularyError(Exception):
    """Base class for all formulary domain errors."""


# ---------------------------------------------------------------------------
# Lookup
# ---------------------------------------------------------------------------


class FormulaNotFoundError(FormularyError, LookupError):
    """Interactive resolution found nothing selectable."""

    def __init__(self) -> None:
        super().__init__("could not find formula")


class WorkspaceNotFoundError(FormularyError, LookupError):
    """Referenced workspace is not registered (or its directory is missing)."""

    def __init__(self, workspace: str) -> None:
        self.workspace = workspace
        super().__init__(f"no workspace found with this name: '{workspace}'")


class FormulaLookupError(FormularyError, LookupError):
    """A formula named on the command line does not exist in the workspace."""

    def __init__(self, formula: str, workspace_dir: str) -> None:
        self.formula = formula
        self.workspace_dir = workspace_dir
        super().__init__(f"formula '{formula}' does not exist in workspace '{workspace_dir}'")


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


class IncorrectFormulaNameError(FormularyError, ValueError):
    """First word of a formula command is not the invocation name."""

    def __init__(self, formula: str | None = None) -> None:
        self.formula = formula
        super().__init__("formula name is incorrect")


class InvalidFormulaCommandError(FormularyError, ValueError):
    """A new formula command does not satisfy the naming rules."""


class MissingFlagError(FormularyError, ValueError):
    """A required flag was not supplied in flag mode."""

    def __init__(self, flag: str) -> None:
        self.flag = flag
        super().__init__(f"please provide a value for '{flag}'")


class FormulaConflictError(FormularyError, ValueError):
    """A rename target collides with an existing formula or with itself."""


class DuplicateWorkspaceError(FormularyError, ValueError):
    """A workspace name is already registered for a different directory."""

    def __init__(self, name: str, existing_dir: str) -> None:
        self.name = name
        self.existing_dir = existing_dir
        super().__init__(f"workspace '{name}' is already registered at '{existing_dir}'")


class DecodeError(FormularyError, ValueError):
    """Structured input (stdin payload, registry file, help.json) is malformed."""


# ---------------------------------------------------------------------------
# I/O and interaction
# ---------------------------------------------------------------------------


class DirectoryListError(FormularyError, OSError):
    """A directory could not be read."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        super().__init__(f"could not list directory '{path}': {reason}")


class PromptCancelledError(FormularyError, RuntimeError):
    """The user aborted an interactive prompt."""

    def __init__(self) -> None:
        super().__init__("operation cancelled by user")
