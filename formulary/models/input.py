"""Input models: batch (stdin) payloads and resolved command targets.

Batch payloads are the wire format accepted on stdin for non-interactive
use, e.g.::

    echo '{"workspace_path": "/home/me/formulas", "formula": "rit test unit"}' \
        | rit delete formula --stdin

Resolved targets are what every input channel produces; the mutation layer
only ever sees these.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from formulary.models.workspace import Workspace

# ---------------------------------------------------------------------------
# Stdin payloads
# ---------------------------------------------------------------------------


class DeleteFormulaStdin(BaseModel):
    workspace_path: str
    formula: str


class RenameFormulaStdin(BaseModel):
    workspace_path: str
    old_formula: str
    new_formula: str


# ---------------------------------------------------------------------------
# Resolved targets
# ---------------------------------------------------------------------------


class DeleteTarget(BaseModel):
    """Formula to delete.  Empty ``segments`` means the user declined."""

    workspace: Workspace | None = None
    segments: list[str] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.segments


class RenameTarget(BaseModel):
    workspace: Workspace
    old_segments: list[str]
    new_segments: list[str]
