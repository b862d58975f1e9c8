"""Shared test fixtures: temporary workspaces, scripted prompts, and a
filesystem boundary that records what the engine asked it to do.

Everything runs against ``tmp_path``; no test touches the real home
directory.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

import pytest

from formulary.context import CommandContext
from formulary.exceptions import PromptCancelledError
from formulary.models.workspace import Workspace
from formulary.registry import WorkspaceRegistry
from formulary.settings import FormularySettings
from formulary.store.local import LocalDirectory, LocalFileManager

CANCEL = object()
"""Scripted answer that makes ``FakePrompt`` behave like Ctrl-C."""


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def make_tree(root: Path, paths: Iterable[str]) -> None:
    """Create files and directories under ``root``.

    Paths ending in ``/`` are directories; anything else is a file (its
    parents are created).
    """
    for rel in paths:
        target = root / rel
        if rel.endswith("/"):
            target.mkdir(parents=True, exist_ok=True)
        else:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(rel, encoding="utf-8")


def listing(root: Path) -> list[str]:
    """Every path under ``root`` relative to it, sorted, dirs suffixed with ``/``."""
    return sorted(
        f"{p.relative_to(root).as_posix()}/" if p.is_dir() else p.relative_to(root).as_posix()
        for p in root.rglob("*")
    )


class FakePrompt:
    """PromptProvider that replays scripted answers in order.

    Every question asked is recorded in ``asked`` as ``(kind, question, options)``.
    """

    def __init__(self, *answers: object) -> None:
        self._answers = list(answers)
        self.asked: list[tuple[str, str, list[str]]] = []

    def script(self, *answers: object) -> FakePrompt:
        """Append scripted answers; returns self for chaining."""
        self._answers.extend(answers)
        return self

    def _next(self) -> object:
        if not self._answers:
            msg = "FakePrompt ran out of scripted answers"
            raise AssertionError(msg)
        answer = self._answers.pop(0)
        if answer is CANCEL:
            raise PromptCancelledError
        return answer

    def choice(self, question: str, options: list[str]) -> str:
        self.asked.append(("choice", question, list(options)))
        answer = self._next()
        assert answer in options, f"{answer!r} not offered in {options!r}"
        return answer  # type: ignore[return-value]

    def confirm(self, question: str, options: list[str]) -> bool:
        self.asked.append(("confirm", question, list(options)))
        return bool(self._next())

    def text(self, question: str, validator=None, helper: str = "") -> str:  # noqa: ANN001
        self.asked.append(("text", question, []))
        answer = str(self._next())
        if validator is not None:
            validator(answer)
        return answer

    @property
    def exhausted(self) -> bool:
        return not self._answers


class RecordingFileManager(LocalFileManager):
    """LocalFileManager that remembers every removal and write."""

    def __init__(self) -> None:
        self.removed: list[Path] = []
        self.written: list[Path] = []

    def remove(self, path: str | Path) -> None:
        self.removed.append(Path(path))
        super().remove(path)

    def write(self, path: str | Path, data: bytes) -> None:
        self.written.append(Path(path))
        super().write(path, data)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def settings(tmp_path: Path) -> FormularySettings:
    return FormularySettings(home=tmp_path / "home", user_home=tmp_path / "user")


@pytest.fixture
def file_manager() -> RecordingFileManager:
    return RecordingFileManager()


@pytest.fixture
def directory() -> LocalDirectory:
    return LocalDirectory()


@pytest.fixture
def prompt() -> FakePrompt:
    return FakePrompt()


@pytest.fixture
def registry(settings: FormularySettings, file_manager: RecordingFileManager) -> WorkspaceRegistry:
    return WorkspaceRegistry(
        settings.registry_file,
        file_manager,
        default_workspace=Workspace(name=settings.default_workspace_name, dir=str(settings.default_workspace_path)),
    )


@pytest.fixture
def ctx(
    settings: FormularySettings,
    directory: LocalDirectory,
    file_manager: RecordingFileManager,
    registry: WorkspaceRegistry,
    prompt: FakePrompt,
) -> CommandContext:
    return CommandContext(
        settings=settings,
        directory=directory,
        file_manager=file_manager,
        registry=registry,
        prompt=prompt,
    )


@pytest.fixture
def workspace_dir(tmp_path: Path) -> Path:
    """Primary workspace root, created empty."""
    path = tmp_path / "ws"
    path.mkdir()
    return path


@pytest.fixture
def tree_factory():  # noqa: ANN201
    """``make_tree`` as a fixture, for tests that build workspaces."""
    return make_tree


@pytest.fixture
def ls():  # noqa: ANN201
    """``listing`` as a fixture."""
    return listing


@pytest.fixture
def cancel() -> object:
    return CANCEL
