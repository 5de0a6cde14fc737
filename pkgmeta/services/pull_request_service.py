"""
Pull-request preparation: fork the upstream repository, push a branch
to the fork and report the GitHub compare URL. The pull request itself
is opened by the user from that URL.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from ..config import Workspace
from ..domain.operation import PullRequestResult
from ..errors import CommitNotFound, NotAGitHubRemote, PushFailed, RemoteForkFailed
from ..infra.git_client import GitClient
from ..infra.github_client import GitHubClient, GitHubAPIError, parse_github_url
from .package_repo import ensure_git_repo
from .registry_reader import read_url

logger = logging.getLogger(__name__)


class PullRequestCreator:
    """
    Pushes a commit to a fork as `pull-request/<commit[:8]>`.

    Example:
        creator = PullRequestCreator()
        result = creator.open_pull_request("/path/to/METADATA")
        print(result.compare_url)
    """

    def __init__(self, git: Optional[GitClient] = None, github: Optional[GitHubClient] = None):
        self.git = git or GitClient()
        self._github = github

    @property
    def github(self) -> GitHubClient:
        if self._github is None:
            self._github = GitHubClient()
        return self._github

    def open_pull_request(
        self,
        repo_dir: Union[str, Path],
        commit: str = "",
        url: str = "",
    ) -> PullRequestResult:
        """
        Fork the upstream repository and push `commit` to the fork.

        Args:
            repo_dir: Local repository holding the commit
            commit: Commit to submit (default: HEAD)
            url: Upstream GitHub url (default: the repository's origin url)

        Raises:
            NotAGitRepo: if repo_dir is not a git repository
            CommitNotFound: if the commit does not exist
            NotAGitHubRemote: if the url is not a GitHub url
            RemoteForkFailed: if GitHub refuses the fork
            PushFailed: if the branch cannot be pushed to the fork
        """
        repo_dir = Path(repo_dir)
        ensure_git_repo(self.git, repo_dir)

        if not commit:
            commit = self.git.head(repo_dir)
        else:
            resolved = self.git.rev_parse(repo_dir, f"{commit}^{{commit}}")
            if resolved is None:
                raise CommitNotFound(str(repo_dir), commit)
            commit = resolved

        if not url:
            url = self.git.remote_url(repo_dir, "origin") or ""
        parsed = parse_github_url(url)
        if parsed is None:
            raise NotAGitHubRemote(url)
        owner, repo = parsed

        try:
            user = self.github.current_user()
            logger.info(f"Forking {owner}/{repo} to {user.login}")
            fork = self.github.fork(owner, repo)
        except GitHubAPIError as e:
            raise RemoteForkFailed(owner, repo, str(e)) from e

        branch = f"pull-request/{commit[:8]}"
        logger.info(f"Pushing changes as branch {branch}")
        success, output = self.git.push(repo_dir, fork.ssh_url, [f"{commit}:refs/heads/{branch}"])
        if not success:
            raise PushFailed(str(repo_dir), fork.ssh_url, output)

        compare_url = f"{fork.html_url}/compare/{branch}"
        logger.info(f"To create a pull-request, open:\n\n  {compare_url}\n")
        return PullRequestResult(commit=commit, branch=branch, fork_url=fork.ssh_url, compare_url=compare_url)

    def submit(self, workspace: Workspace, pkg: str, commit: str = "") -> PullRequestResult:
        """Open a pull request for a package against its registered url."""
        url = read_url(workspace.registry, pkg) or ""
        return self.open_pull_request(workspace.package_path(pkg), commit, url)
