"""Command context.

Bundles the collaborators a command needs (settings, filesystem boundary,
workspace registry, prompts) so they are passed explicitly into every
resolver and runner instead of living in module-level state.
"""

from __future__ import annotations

from dataclasses import dataclass

from formulary.models.workspace import Workspace
from formulary.prompt import ClickPrompt, PromptProvider
from formulary.registry import WorkspaceRegistry
from formulary.settings import FormularySettings
from formulary.store.base import DirectoryAccessor, FileManager
from formulary.store.local import LocalDirectory, LocalFileManager


@dataclass
class CommandContext:
    """Collaborators for a single CLI invocation."""

    settings: FormularySettings
    directory: DirectoryAccessor
    file_manager: FileManager
    registry: WorkspaceRegistry
    prompt: PromptProvider

    @classmethod
    def from_settings(
        cls,
        settings: FormularySettings,
        *,
        prompt: PromptProvider | None = None,
    ) -> CommandContext:
        """Wire the local filesystem implementations for ``settings``."""
        file_manager = LocalFileManager()
        registry = WorkspaceRegistry(
            settings.registry_file,
            file_manager,
            default_workspace=Workspace(
                name=settings.default_workspace_name,
                dir=str(settings.default_workspace_path),
            ),
        )
        return cls(
            settings=settings,
            directory=LocalDirectory(),
            file_manager=file_manager,
            registry=registry,
            prompt=prompt or ClickPrompt(),
        )
