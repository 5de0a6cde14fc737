"""
Tests for RegistryTransaction against real git repositories.
"""

import pytest

from pkgmeta.infra.transaction import RegistryTransaction
from conftest import requires_git, run_git, commit_file

pytestmark = requires_git


class TestRegistryTransaction:
    """Commit and discard behavior."""

    def test_commit_staged_file(self, git, workspace):
        registry = workspace.registry
        with RegistryTransaction(git, registry) as txn:
            (registry / "Foo").mkdir()
            (registry / "Foo" / "url").write_text("u\n")
            txn.stage("Foo/url")
            commit = txn.commit("Register Foo")

        assert commit == run_git(registry, 'rev-parse', 'HEAD')
        assert run_git(registry, 'log', '-1', '--format=%s') == "Register Foo"

    def test_no_empty_commit(self, git, workspace):
        registry = workspace.registry
        head = run_git(registry, 'rev-parse', 'HEAD')
        with RegistryTransaction(git, registry) as txn:
            (registry / "README.md").write_text("registry\n")
            txn.stage("README.md")
            assert not txn.has_changes()
            assert txn.commit("nothing") is None
        assert run_git(registry, 'rev-parse', 'HEAD') == head

    def test_exception_discards(self, git, workspace):
        registry = workspace.registry
        head = run_git(registry, 'rev-parse', 'HEAD')
        with pytest.raises(RuntimeError):
            with RegistryTransaction(git, registry) as txn:
                (registry / "Foo").mkdir()
                (registry / "Foo" / "url").write_text("u\n")
                txn.stage("Foo/url")
                (registry / "README.md").write_text("changed\n")
                txn.stage("README.md")
                raise RuntimeError("boom")

        assert run_git(registry, 'rev-parse', 'HEAD') == head
        assert not (registry / "Foo" / "url").exists()
        assert (registry / "README.md").read_text() == "registry\n"
        assert run_git(registry, 'status', '--porcelain') == ""

    def test_discard_restores_prior_uncommitted_changes(self, git, workspace):
        """Unrelated edits made before the transaction survive a discard."""
        registry = workspace.registry
        commit_file(registry, "Bar/url", "bar\n", "Register Bar")
        (registry / "Bar" / "url").write_text("edited\n")

        with RegistryTransaction(git, registry) as txn:
            (registry / "README.md").write_text("changed\n")
            txn.stage("README.md")
            txn.discard()

        assert (registry / "Bar" / "url").read_text() == "edited\n"
        assert (registry / "README.md").read_text() == "registry\n"

    def test_commit_after_close(self, git, workspace):
        txn = RegistryTransaction(git, workspace.registry)
        txn.open()
        txn.discard()
        with pytest.raises(RuntimeError):
            txn.commit("late")
