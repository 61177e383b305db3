"""Tests for per-compile workspaces."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from lume.errors import WorkspaceError
from lume.workspace import Workspace


def test_allocate_creates_unique_directories(tmp_path: Path) -> None:
    root = tmp_path / "a" / "b"
    first = Workspace.allocate(root)
    second = Workspace.allocate(root)

    assert first.path != second.path
    assert first.path.parent == root
    assert first.path.is_dir() and second.path.is_dir()


def test_write_source_overwrites(tmp_path: Path) -> None:
    workspace = Workspace.allocate(tmp_path)
    workspace.write_source("old")
    workspace.write_source("new")

    assert workspace.source_path.read_text() == "new"
    assert workspace.list_files() == ["main.tex"]


def test_release_removes_directory(tmp_path: Path) -> None:
    with Workspace.allocate(tmp_path) as workspace:
        workspace.write_source("x")
    assert not workspace.path.exists()


def test_release_keeps_directory_when_asked(tmp_path: Path) -> None:
    with Workspace.allocate(tmp_path, keep=True) as workspace:
        workspace.write_source("x")
    assert workspace.source_path.exists()


def test_list_files_is_best_effort(tmp_path: Path) -> None:
    workspace = Workspace(tmp_path / "never-created")
    assert workspace.list_files() == []


def test_write_failure(tmp_path: Path) -> None:
    workspace = Workspace.allocate(tmp_path)
    with patch.object(Path, "write_text", side_effect=OSError(28, "No space left on device")):
        with pytest.raises(WorkspaceError, match="No space left on device"):
            workspace.write_source("x")
