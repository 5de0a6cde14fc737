"""
Shared fixtures: throwaway git repositories for packages and the registry.
"""

import shutil
import subprocess
from pathlib import Path

import pytest

from pkgmeta.config import Workspace
from pkgmeta.infra.git_client import GitClient

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")


def run_git(path, *args) -> str:
    result = subprocess.run(
        ['git'] + list(args), cwd=str(path), capture_output=True, text=True, check=True
    )
    return result.stdout.strip()


def commit_file(path: Path, relpath: str, content: str, message: str = "update") -> str:
    """Write a file, commit it and return the new commit id."""
    target = path / relpath
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(content)
    run_git(path, 'add', relpath)
    run_git(path, 'commit', '-q', '-m', message)
    return run_git(path, 'rev-parse', 'HEAD')


@pytest.fixture(autouse=True)
def git_identity(monkeypatch, tmp_path):
    """Isolate git from the user's configuration."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.setenv("GIT_AUTHOR_NAME", "Test Author")
    monkeypatch.setenv("GIT_AUTHOR_EMAIL", "author@example.com")
    monkeypatch.setenv("GIT_COMMITTER_NAME", "Test Author")
    monkeypatch.setenv("GIT_COMMITTER_EMAIL", "author@example.com")


@pytest.fixture
def git():
    return GitClient(timeout=60)


@pytest.fixture
def workspace(tmp_path):
    """A packages directory with an initialized registry on metadata-v2."""
    packages = tmp_path / "packages"
    registry = packages / "METADATA"
    registry.mkdir(parents=True)
    run_git(registry, 'init', '-q')
    run_git(registry, 'checkout', '-q', '-b', 'metadata-v2')
    commit_file(registry, "README.md", "registry\n", "Initial commit")
    return Workspace(packages_dir=packages, registry=registry)


@pytest.fixture
def make_package(workspace):
    """Factory creating a package repository with one commit."""
    def _make(name: str, require: str = None, origin: str = None) -> Path:
        path = workspace.package_path(name)
        path.mkdir(parents=True)
        run_git(path, 'init', '-q')
        commit_file(path, "README.md", f"{name}\n", "Initial commit")
        if require is not None:
            commit_file(path, "REQUIRE", require, "Add REQUIRE")
        if origin:
            run_git(path, 'remote', 'add', 'origin', origin)
        return path
    return _make
