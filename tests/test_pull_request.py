"""
Tests for pull-request preparation with mocked git and GitHub clients.
"""

import pytest
from pathlib import Path
from unittest.mock import MagicMock

from pkgmeta.config import Workspace
from pkgmeta.errors import CommitNotFound, NotAGitHubRemote, PushFailed, RemoteForkFailed
from pkgmeta.infra.git_client import GitClient
from pkgmeta.infra.github_client import GitHubClient, GitHubAPIError, GitHubFork, GitHubUser
from pkgmeta.services.pull_request_service import PullRequestCreator

COMMIT = "0123456789abcdef0123456789abcdef01234567"


@pytest.fixture
def mock_git():
    git = MagicMock(spec=GitClient)
    git.is_git_repo.return_value = True
    git.head.return_value = COMMIT
    git.rev_parse.return_value = COMMIT
    git.remote_url.return_value = "git@github.com:JuliaLang/METADATA.jl.git"
    git.push.return_value = (True, "")
    return git


@pytest.fixture
def mock_github():
    github = MagicMock(spec=GitHubClient)
    github.current_user.return_value = GitHubUser(login="me")
    github.fork.return_value = GitHubFork(
        full_name="me/METADATA.jl",
        ssh_url="git@github.com:me/METADATA.jl.git",
        html_url="https://github.com/me/METADATA.jl",
    )
    return github


class TestOpenPullRequest:
    """Tests for PullRequestCreator.open_pull_request."""

    def test_pushes_branch_to_fork(self, mock_git, mock_github):
        creator = PullRequestCreator(git=mock_git, github=mock_github)
        result = creator.open_pull_request("/reg")

        mock_github.fork.assert_called_once_with("JuliaLang", "METADATA.jl")
        mock_git.push.assert_called_once_with(
            Path("/reg"),
            "git@github.com:me/METADATA.jl.git",
            [f"{COMMIT}:refs/heads/pull-request/01234567"],
        )
        assert result.branch == "pull-request/01234567"
        assert result.compare_url == "https://github.com/me/METADATA.jl/compare/pull-request/01234567"

    def test_explicit_commit_is_resolved(self, mock_git, mock_github):
        creator = PullRequestCreator(git=mock_git, github=mock_github)
        creator.open_pull_request("/reg", commit="HEAD~1")
        mock_git.rev_parse.assert_called_once_with(Path("/reg"), "HEAD~1^{commit}")

    def test_unknown_commit(self, mock_git, mock_github):
        mock_git.rev_parse.return_value = None
        creator = PullRequestCreator(git=mock_git, github=mock_github)
        with pytest.raises(CommitNotFound):
            creator.open_pull_request("/reg", commit="nope")

    def test_not_github(self, mock_git, mock_github):
        mock_git.remote_url.return_value = "https://gitlab.com/o/r.git"
        creator = PullRequestCreator(git=mock_git, github=mock_github)
        with pytest.raises(NotAGitHubRemote):
            creator.open_pull_request("/reg")
        mock_github.fork.assert_not_called()

    def test_fork_failure(self, mock_git, mock_github):
        mock_github.fork.side_effect = GitHubAPIError("forbidden", status_code=403)
        creator = PullRequestCreator(git=mock_git, github=mock_github)
        with pytest.raises(RemoteForkFailed, match="forbidden"):
            creator.open_pull_request("/reg")
        mock_git.push.assert_not_called()

    def test_push_failure(self, mock_git, mock_github):
        mock_git.push.return_value = (False, "permission denied")
        creator = PullRequestCreator(git=mock_git, github=mock_github)
        with pytest.raises(PushFailed):
            creator.open_pull_request("/reg")


class TestSubmit:
    """Tests for submitting a package commit."""

    def test_uses_registered_url(self, fs, mock_git, mock_github):
        fs.create_file("/reg/Foo/url", contents="https://github.com/owner/Foo.jl.git\n")
        workspace = Workspace(packages_dir=Path("/pkgs"), registry=Path("/reg"))
        creator = PullRequestCreator(git=mock_git, github=mock_github)

        creator.submit(workspace, "Foo")

        mock_github.fork.assert_called_once_with("owner", "Foo.jl")
        mock_git.remote_url.assert_not_called()
        assert mock_git.push.call_args.args[0] == Path("/pkgs/Foo")

    def test_unregistered_falls_back_to_origin(self, fs, mock_git, mock_github):
        fs.create_dir("/reg")
        workspace = Workspace(packages_dir=Path("/pkgs"), registry=Path("/reg"))
        creator = PullRequestCreator(git=mock_git, github=mock_github)

        creator.submit(workspace, "Foo")

        mock_git.remote_url.assert_called_once_with(Path("/pkgs/Foo"), "origin")
