"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from claude_stacks.files.local import LocalFileService
from claude_stacks.paths import StackPaths
from claude_stacks.presenter import CollectingPresenter


@pytest.fixture
def paths(tmp_path: Path) -> StackPaths:
    return StackPaths.under(tmp_path / "home")


@pytest.fixture
def project(tmp_path: Path) -> str:
    path = tmp_path / "project"
    path.mkdir()
    return str(path)


@pytest.fixture
def files() -> LocalFileService:
    return LocalFileService()


@pytest.fixture
def presenter() -> CollectingPresenter:
    return CollectingPresenter()

