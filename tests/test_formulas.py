"""Unit tests for namespace mutation: delete, safe removal, pruning, move."""

from __future__ import annotations

from pathlib import Path

import pytest

from formulary.exceptions import FormulaConflictError, FormulaLookupError
from formulary.managers.formulas import (
    can_delete,
    delete_formula,
    is_nested_formula,
    local_workspace_dir,
    move_formula,
)

# ---------------------------------------------------------------------------
# Inspection
# ---------------------------------------------------------------------------


def test_can_delete_ignores_files(tmp_path: Path, tree_factory) -> None:
    tree_factory(tmp_path, ["a.txt", "b.txt", "c.json"])
    assert can_delete(tmp_path) is True
    # Idempotent: asking again gives the same answer.
    assert can_delete(tmp_path) is True


def test_can_delete_false_with_subdir(tmp_path: Path, tree_factory) -> None:
    tree_factory(tmp_path, ["a.txt", "child/"])
    assert can_delete(tmp_path) is False


def test_is_nested_formula(tmp_path: Path, tree_factory) -> None:
    tree_factory(tmp_path, ["plain/src/", "plain/bin/", "plain/README.md", "nested/src/", "nested/group/"])
    assert is_nested_formula(tmp_path / "plain") is False
    assert is_nested_formula(tmp_path / "nested") is True


def test_local_workspace_dir(tmp_path: Path) -> None:
    assert local_workspace_dir(tmp_path, "Default") == tmp_path / "local-default"


# ---------------------------------------------------------------------------
# Delete
# ---------------------------------------------------------------------------


def test_delete_prunes_emptied_ancestors(workspace_dir: Path, file_manager, tree_factory, ls) -> None:
    tree_factory(workspace_dir, ["test/unit/src/main"])

    delete_formula(workspace_dir, ["test", "unit"], file_manager)

    assert workspace_dir.is_dir()
    assert ls(workspace_dir) == []


def test_delete_nested_formula_keeps_children(workspace_dir: Path, file_manager, tree_factory, ls) -> None:
    tree_factory(workspace_dir, ["test/src/main", "test/group/src/main"])

    delete_formula(workspace_dir, ["test"], file_manager)

    assert ls(workspace_dir) == ["test/", "test/group/", "test/group/src/", "test/group/src/main"]


def test_delete_nested_formula_removes_own_content(workspace_dir: Path, file_manager, tree_factory, ls) -> None:
    tree_factory(
        workspace_dir,
        [
            "test/src/main.go",
            "test/bin/run.sh",
            "test/Makefile",
            "test/config.json",
            "test/child/src/main.go",
            "test/child/help.json",
        ],
    )

    delete_formula(workspace_dir, ["test"], file_manager)

    assert ls(workspace_dir) == [
        "test/",
        "test/child/",
        "test/child/help.json",
        "test/child/src/",
        "test/child/src/main.go",
    ]
    # Plain files go through the file manager; directories do not.
    assert sorted(p.name for p in file_manager.removed) == ["Makefile", "config.json"]


def test_delete_plain_formula_removes_everything(workspace_dir: Path, file_manager, tree_factory, ls) -> None:
    tree_factory(workspace_dir, ["a/b/src/main", "a/b/bin/out", "a/b/Makefile", "a/c/src/main"])

    delete_formula(workspace_dir, ["a", "b"], file_manager)

    # a still holds c, so it is not pruned
    assert ls(workspace_dir) == ["a/", "a/c/", "a/c/src/", "a/c/src/main"]
    assert file_manager.removed == []


def test_delete_prunes_only_childless_ancestors(workspace_dir: Path, file_manager, tree_factory, ls) -> None:
    tree_factory(workspace_dir, ["a/README.md", "a/b/c/src/main", "a/b/notes.txt"])

    delete_formula(workspace_dir, ["a", "b", "c"], file_manager)

    # b had only files left -> pruned; a had only files left -> pruned too
    assert ls(workspace_dir) == []


def test_delete_parent_that_is_formula_is_kept(workspace_dir: Path, file_manager, tree_factory, ls) -> None:
    tree_factory(workspace_dir, ["test/src/main", "test/unit/src/main"])

    delete_formula(workspace_dir, ["test", "unit"], file_manager)

    assert ls(workspace_dir) == ["test/", "test/src/", "test/src/main"]


def test_delete_never_prunes_root(tmp_path: Path, file_manager, tree_factory) -> None:
    root = tmp_path / "root"
    tree_factory(root, ["only/src/main"])

    delete_formula(root, ["only"], file_manager)

    assert root.is_dir()


def test_delete_missing_formula_raises(workspace_dir: Path, file_manager) -> None:
    with pytest.raises(FileNotFoundError):
        delete_formula(workspace_dir, ["ghost"], file_manager)


def test_delete_remove_failure_aborts(workspace_dir: Path, tree_factory) -> None:
    tree_factory(workspace_dir, ["g/f/src/main", "g/f/child/src/main", "g/f/notes.txt"])

    class FailingFileManager:
        def remove(self, path: str | Path) -> None:
            raise PermissionError(path)

        def write(self, path: str | Path, data: bytes) -> None:
            raise AssertionError("unexpected write")

    with pytest.raises(PermissionError):
        delete_formula(workspace_dir, ["g", "f"], FailingFileManager())

    assert (workspace_dir / "g" / "f" / "notes.txt").exists()


# ---------------------------------------------------------------------------
# Move
# ---------------------------------------------------------------------------


def test_move_plain_formula(workspace_dir: Path, tree_factory, ls) -> None:
    tree_factory(workspace_dir, ["test/unit/src/main", "test/unit/Makefile"])

    move_formula(workspace_dir, ["test", "unit"], ["check", "fast"])

    assert ls(workspace_dir) == ["check/", "check/fast/", "check/fast/Makefile", "check/fast/src/", "check/fast/src/main"]


def test_move_keeps_non_empty_old_ancestors(workspace_dir: Path, tree_factory, ls) -> None:
    tree_factory(workspace_dir, ["test/unit/src/main", "test/e2e/src/main"])

    move_formula(workspace_dir, ["test", "unit"], ["test", "fast"])

    assert ls(workspace_dir) == [
        "test/",
        "test/e2e/",
        "test/e2e/src/",
        "test/e2e/src/main",
        "test/fast/",
        "test/fast/src/",
        "test/fast/src/main",
    ]


def test_move_nested_formula_leaves_children(workspace_dir: Path, tree_factory, ls) -> None:
    tree_factory(workspace_dir, ["test/src/main", "test/docs/README.md", "test/Makefile", "test/group/src/main"])

    move_formula(workspace_dir, ["test"], ["other"])

    assert ls(workspace_dir) == [
        "other/",
        "other/Makefile",
        "other/docs/",
        "other/docs/README.md",
        "other/src/",
        "other/src/main",
        "test/",
        "test/group/",
        "test/group/src/",
        "test/group/src/main",
    ]


def test_move_into_existing_group(workspace_dir: Path, tree_factory, ls) -> None:
    tree_factory(workspace_dir, ["old/src/main", "grp/child/src/main"])

    move_formula(workspace_dir, ["old"], ["grp"])

    assert ls(workspace_dir) == ["grp/", "grp/child/", "grp/child/src/", "grp/child/src/main", "grp/src/", "grp/src/main"]


def test_move_onto_existing_formula_rejected(workspace_dir: Path, tree_factory, ls) -> None:
    tree_factory(workspace_dir, ["a/src/main", "b/src/main"])
    before = ls(workspace_dir)

    with pytest.raises(FormulaConflictError):
        move_formula(workspace_dir, ["a"], ["b"])

    assert ls(workspace_dir) == before


def test_move_into_itself_rejected(workspace_dir: Path, tree_factory) -> None:
    tree_factory(workspace_dir, ["a/src/main"])

    with pytest.raises(FormulaConflictError):
        move_formula(workspace_dir, ["a"], ["a", "b"])


def test_move_group_rejected(workspace_dir: Path, tree_factory, ls) -> None:
    tree_factory(workspace_dir, ["grp/a/src/main", "grp/b/src/main"])

    with pytest.raises(FormulaLookupError):
        move_formula(workspace_dir, ["grp"], ["other", "thing"])

    assert ls(workspace_dir) == [
        "grp/",
        "grp/a/",
        "grp/a/src/",
        "grp/a/src/main",
        "grp/b/",
        "grp/b/src/",
        "grp/b/src/main",
    ]
