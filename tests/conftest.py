"""Shared fixtures for branch ancestry tests."""

import tempfile
from pathlib import Path

import pytest


@pytest.fixture
def temp_git_repo():
    """Create a temporary directory laid out like a clone's .git/logs."""
    with tempfile.TemporaryDirectory() as temp_dir:
        repo_path = Path(temp_dir)
        (repo_path / ".git" / "logs" / "refs" / "heads").mkdir(parents=True)
        yield repo_path
