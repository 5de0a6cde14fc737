"""
Tests for package registration.
"""

import pytest

from pkgmeta.domain.registry import RegistryLayout
from pkgmeta.domain.version import Version
from pkgmeta.errors import AlreadyRegistered, NoURLConfigured, NotAGitRepo
from pkgmeta.services.registrar import Registrar
from conftest import requires_git, run_git, commit_file

pytestmark = requires_git

URL = "https://github.com/owner/Foo.jl.git"


@pytest.fixture
def foo(make_package):
    """Foo with v1.0.0 (lightweight) and v1.1.0 (annotated) tags."""
    path = make_package("Foo", require="Bar 0.3\n", origin="git@github.com:owner/Foo.jl.git")
    run_git(path, 'tag', 'v1.0.0')
    first = run_git(path, 'rev-parse', 'HEAD')
    second = commit_file(path, "src/Foo.jl", "module Foo end\n", "Add module")
    run_git(path, 'tag', '-a', '-m', 'Foo v1.1.0', 'v1.1.0')
    run_git(path, 'tag', 'not-a-version')
    return path, first, second


class TestRegister:
    """Tests for Registrar.register."""

    def test_records_url_and_every_tag(self, git, workspace, foo):
        _, first, second = foo
        result = Registrar(workspace, git=git).register("Foo", URL)

        layout = RegistryLayout(workspace.registry)
        assert layout.url_file("Foo").read_text() == f"{URL}\n"
        assert layout.sha1_file("Foo", Version(1, 0, 0)).read_text().strip() == first
        assert layout.sha1_file("Foo", Version(1, 1, 0)).read_text().strip() == second
        assert layout.requires_file("Foo", Version(1, 1, 0)).read_text() == "Bar 0.3.0\n"
        assert result.versions == [Version(1, 0, 0), Version(1, 1, 0)]
        assert result.committed

    def test_commit_message(self, git, workspace, foo):
        Registrar(workspace, git=git).register("Foo", URL)
        message = run_git(workspace.registry, 'log', '-1', '--format=%s')
        assert message == "Register Foo: v1.0.0, v1.1.0"

    def test_default_url_is_normalized_origin(self, git, workspace, foo):
        result = Registrar(workspace, git=git).register("Foo")
        assert result.url == URL

    def test_already_registered(self, git, workspace, foo):
        registrar = Registrar(workspace, git=git)
        registrar.register("Foo", URL)
        with pytest.raises(AlreadyRegistered):
            registrar.register("Foo", URL)

    def test_no_origin(self, git, workspace, make_package):
        make_package("Baz")
        with pytest.raises(NoURLConfigured) as exc_info:
            Registrar(workspace, git=git).register("Baz")
        assert exc_info.value.context["package"] == "Baz"
        assert run_git(workspace.registry, 'status', '--porcelain') == ""

    def test_missing_package_repo(self, git, workspace):
        with pytest.raises(NotAGitRepo):
            Registrar(workspace, git=git).register("Missing", URL)

    def test_package_without_tags(self, git, workspace, make_package):
        make_package("Baz")
        result = Registrar(workspace, git=git).register("Baz", "https://example.com/Baz.git")
        assert result.versions == []
        assert run_git(workspace.registry, 'log', '-1', '--format=%s') == "Register Baz"
