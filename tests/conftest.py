"""Shared fixtures for skillbudget tests."""

from pathlib import Path

import pytest


@pytest.fixture
def tmp_project(tmp_path: Path) -> Path:
    """Alias for a project directory under tmp_path.

    Tests that use 'tmp_project' communicate that they operate on a
    project's files (markers, .skillbudget/ state, rule files).
    """
    project = tmp_path / "project"
    project.mkdir()
    return project


@pytest.fixture
def tmp_home(tmp_path: Path) -> Path:
    """Isolated home directory holding agent config dirs."""
    home = tmp_path / "home"
    home.mkdir()
    return home
