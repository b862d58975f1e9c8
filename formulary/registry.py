"""Workspace registry.

Persists the user's named workspaces as a JSON object (name -> directory)
in ``{home}/formula_workspaces.json``.  The default workspace
(``Default`` -> ``{user_home}/ritchie-formulas-local``) is always listed,
whether or not it has been written to the file.

Names are unique case-insensitively: ``default`` and ``Default`` are the
same workspace.
"""

from __future__ import annotations

import json
from pathlib import Path

from loguru import logger

from formulary.exceptions import DecodeError, DuplicateWorkspaceError, WorkspaceNotFoundError
from formulary.models.workspace import Workspace
from formulary.store.base import FileManager


class WorkspaceRegistry:
    """File-backed registry of formula workspaces.

    The registry is injected into every resolver rather than read from
    process-wide state, so tests can point it at a temporary directory.
    """

    def __init__(
        self,
        registry_file: str | Path,
        file_manager: FileManager,
        *,
        default_workspace: Workspace | None = None,
    ) -> None:
        self._file = Path(registry_file)
        self._files = file_manager
        self._default = default_workspace

    # -- Query -----------------------------------------------------------------

    def list(self) -> dict[str, str]:
        """Return ``{name: dir}`` for every registered workspace.

        Raises ``DecodeError`` if the registry file is not a JSON object of
        strings.
        """
        workspaces: dict[str, str] = {}
        if self._default is not None:
            workspaces[self._default.name] = self._default.dir
        workspaces.update(self._read())
        return workspaces

    def get(self, name: str) -> Workspace | None:
        """Case-insensitive lookup by name."""
        for ws_name, ws_dir in self.list().items():
            if ws_name.casefold() == name.casefold():
                return Workspace(name=ws_name, dir=ws_dir)
        return None

    def find_by_dir(self, path: str) -> Workspace | None:
        """Case-insensitive exact match on the workspace directory."""
        for ws_name, ws_dir in self.list().items():
            if ws_dir.casefold() == path.casefold():
                return Workspace(name=ws_name, dir=ws_dir)
        return None

    # -- Mutation --------------------------------------------------------------

    def add(self, workspace: Workspace) -> None:
        """Register a workspace.

        Re-adding an identical entry is a no-op.  Raises
        ``WorkspaceNotFoundError`` if the directory does not exist and
        ``DuplicateWorkspaceError`` if the name is taken by another directory.
        """
        if not Path(workspace.dir).is_dir():
            raise WorkspaceNotFoundError(workspace.dir)

        existing = self.get(workspace.name)
        if existing is not None:
            if existing.dir == workspace.dir:
                return
            raise DuplicateWorkspaceError(existing.name, existing.dir)

        stored = self._read()
        stored[workspace.name] = workspace.dir
        data = json.dumps(stored, indent=2, sort_keys=True).encode("utf-8")
        self._files.write(self._file, data)
        logger.info("Registered workspace {} -> {}", workspace.name, workspace.dir)

    # -- Internals -------------------------------------------------------------

    def _read(self) -> dict[str, str]:
        if not self._file.exists():
            return {}
        try:
            raw = json.loads(self._file.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            msg = f"invalid workspace registry {self._file}: {exc}"
            raise DecodeError(msg) from None
        if not isinstance(raw, dict) or not all(isinstance(v, str) for v in raw.values()):
            msg = f"invalid workspace registry {self._file}: expected an object of paths"
            raise DecodeError(msg)
        return raw
