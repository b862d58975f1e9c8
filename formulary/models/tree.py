"""Command tree index model.

The tree is a derived document written to ``tree.json`` at a workspace
root.  Autocomplete and dispatch read it instead of walking the workspace.
It is regenerated wholesale after every structural mutation, never patched.

Layout::

    {
      "version": "v2",
      "commands": {
        "root/test":      {"id": "root/test", "parent": "root", "usage": "test", ...},
        "root/test/unit": {"id": "root/test/unit", "parent": "root/test", ..., "formula": true}
      }
    }
"""

from __future__ import annotations

from pydantic import BaseModel, Field

TREE_VERSION = "v2"
ROOT_ID = "root"
ID_SEPARATOR = "/"


def command_id(segments: list[str]) -> str:
    """``["test", "unit"]`` -> ``root/test/unit``.

    Joined with a character no directory name can contain, so distinct
    paths never share an id.
    """
    return ID_SEPARATOR.join([ROOT_ID, *segments])


class CommandNode(BaseModel):
    id: str
    parent: str
    usage: str
    help: str = ""
    long_help: str = ""
    formula: bool = False


class CommandTree(BaseModel):
    version: str = TREE_VERSION
    commands: dict[str, CommandNode] = Field(default_factory=dict)

    def add(self, segments: list[str], *, help: str = "", long_help: str = "", formula: bool = False) -> CommandNode:  # noqa: A002
        node = CommandNode(
            id=command_id(segments),
            parent=command_id(segments[:-1]),
            usage=segments[-1],
            help=help,
            long_help=long_help,
            formula=formula,
        )
        self.commands[node.id] = node
        return node

    def formulas(self) -> list[CommandNode]:
        return [node for node in self.commands.values() if node.formula]
