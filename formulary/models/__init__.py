"""Data models for formulary."""

from formulary.models.enums import DirKind, InputMode
from formulary.models.input import (
    DeleteFormulaStdin,
    DeleteTarget,
    RenameFormulaStdin,
    RenameTarget,
)
from formulary.models.tree import CommandNode, CommandTree
from formulary.models.workspace import Workspace

__all__ = [
    # Tree
    "CommandNode",
    "CommandTree",
    # Input
    "DeleteFormulaStdin",
    "DeleteTarget",
    # Enums
    "DirKind",
    "InputMode",
    "RenameFormulaStdin",
    "RenameTarget",
    # Workspace
    "Workspace",
]
