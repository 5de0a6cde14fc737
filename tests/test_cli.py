"""
Tests for the pkgmeta CLI.
"""

import json
from pathlib import Path
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from pkgmeta.cli import cli
from pkgmeta.domain.operation import PullRequestResult
from pkgmeta.exit_codes import DATA_ERROR, SUCCESS
from conftest import requires_git, run_git


def last_json(result):
    return json.loads(result.stdout.strip().splitlines()[-1])


@pytest.fixture
def runner():
    return CliRunner()


def invoke(runner, workspace, *args):
    return runner.invoke(cli, [
        '--packages-dir', str(workspace.packages_dir),
        '--registry', str(workspace.registry),
    ] + list(args))


class TestCliBasics:
    """Command wiring."""

    def test_help_lists_commands(self, runner):
        result = runner.invoke(cli, ['--help'])
        assert result.exit_code == 0
        for name in ['register', 'tag', 'publish', 'submit', 'check', 'config']:
            assert name in result.output

    def test_config_show_path(self, runner):
        result = runner.invoke(cli, ['config', 'show', '--path'])
        assert result.exit_code == 0
        assert json.loads(result.stdout)["config_path"].endswith("config.json")

    def test_check_empty_registry(self, runner, tmp_path):
        registry = tmp_path / "reg"
        registry.mkdir()
        result = runner.invoke(cli, ['--registry', str(registry), 'check', '--json'])
        assert result.exit_code == SUCCESS
        assert last_json(result)["ok"] is True

    def test_submit_uses_github_settings(self, runner, tmp_path):
        config_dir = Path.home() / ".pkgmeta"
        config_dir.mkdir()
        (config_dir / "config.json").write_text(json.dumps({
            "github": {"token": "t0ken", "rate_limit": {"max_retries": 7, "max_delay_seconds": 5}},
        }))
        pr = PullRequestResult(commit="c" * 40, branch="pull-request/cccccccc",
                               fork_url="git@github.com:me/Foo.jl.git",
                               compare_url="https://github.com/me/Foo.jl/compare/pull-request/cccccccc")

        with patch("pkgmeta.commands.submit.GitHubClient") as client_cls, \
             patch("pkgmeta.commands.submit.PullRequestCreator") as creator_cls:
            creator_cls.return_value.submit.return_value = pr
            result = runner.invoke(cli, ["--packages-dir", str(tmp_path), "submit", "Foo", "--json"])

        assert result.exit_code == SUCCESS, result.output
        client_cls.assert_called_once_with(token="t0ken", max_retries=7, max_delay=5.0)
        assert last_json(result)["branch"] == "pull-request/cccccccc"


@requires_git
class TestCliCommands:
    """Commands against real repositories."""

    def test_register_and_tag(self, runner, workspace, make_package):
        path = make_package("Foo", origin="git@github.com:owner/Foo.jl.git")
        run_git(path, 'tag', 'v0.1.0')

        result = invoke(runner, workspace, 'register', 'Foo', '--json')
        assert result.exit_code == SUCCESS, result.output
        data = last_json(result)
        assert data["url"] == "https://github.com/owner/Foo.jl.git"
        assert data["versions"] == ["0.1.0"]

        result = invoke(runner, workspace, 'tag', 'Foo', 'patch', '--json')
        assert result.exit_code == SUCCESS, result.output
        data = last_json(result)
        assert data["version"] == "0.1.1"
        assert data["registered"] is True

    def test_tag_human_output(self, runner, workspace, make_package):
        make_package("Foo")
        result = invoke(runner, workspace, 'tag', 'Foo', 'minor')
        assert result.exit_code == SUCCESS
        assert "v0.1.0" in result.stdout

    def test_invalid_selector(self, runner, workspace, make_package):
        make_package("Foo")
        result = invoke(runner, workspace, 'tag', 'Foo', 'huge', '--json')
        assert result.exit_code == DATA_ERROR
        assert last_json(result)["type"] == "InvalidSelector"

    def test_register_missing_package(self, runner, workspace):
        result = invoke(runner, workspace, 'register', 'Missing', '--json')
        assert result.exit_code == DATA_ERROR
        assert last_json(result)["type"] == "NotAGitRepo"

    def test_publish_nothing(self, runner, workspace, tmp_path):
        remote = tmp_path / "remote.git"
        remote.mkdir()
        run_git(remote, 'init', '-q', '--bare')
        run_git(workspace.registry, 'remote', 'add', 'origin', str(remote))
        run_git(workspace.registry, 'push', '-q', 'origin', 'metadata-v2')

        result = invoke(runner, workspace, 'publish', '--json')
        assert result.exit_code == DATA_ERROR
        assert last_json(result)["type"] == "NothingToPublish"
