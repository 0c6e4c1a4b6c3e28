"""Pytest configuration for dep-workspace tests."""

import os
import shutil
import subprocess
from pathlib import Path

import pytest

from dep_workspace.context import WorkspaceContext

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git is not installed")


def make_dirs(base: Path, *relative: str) -> list[Path]:
    """Create directories below base and return them."""
    created = []
    for rel in relative:
        path = base / rel
        path.mkdir(parents=True, exist_ok=True)
        created.append(path)
    return created


def symlink_or_skip(link: Path, target: Path) -> None:
    try:
        os.symlink(target, link, target_is_directory=True)
    except (OSError, NotImplementedError) as e:
        pytest.skip(f"Symlinks not available: {e}")


def git(repo: Path, *args: str) -> str:
    """Run git in repo with a fixed identity and return stripped stdout."""
    cmd = [
        "git",
        "-c",
        "user.name=Test",
        "-c",
        "user.email=test@example.com",
        "-c",
        "commit.gpgsign=false",
        "-c",
        "tag.gpgsign=false",
        *args,
    ]
    result = subprocess.run(cmd, cwd=repo, capture_output=True, text=True, check=True)
    return result.stdout.strip()


@pytest.fixture
def gopath(tmp_path):
    """A single workspace root with an empty src directory."""
    root = tmp_path / "go"
    (root / "src").mkdir(parents=True)
    return root


@pytest.fixture
def ctx(gopath):
    return WorkspaceContext.create(gopath, [gopath])
