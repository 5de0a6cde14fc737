"""
Publishing a registry branch.

Publishing validates that the local registry branch is strictly ahead
of its upstream, checks every changed version pointer against the tag
in the package's own repository, validates the registry, pushes the
package tags and finally prepares a pull request for the registry
branch.

Nothing is pushed until every changed entry has been verified and the
registry has passed validation. Tag pushes then go package by package;
a failure stops the publish with the earlier packages already pushed
(recorded in `last_result`). Re-running is safe.
"""

import logging
from typing import Dict, List, Optional

from ..config import Workspace
from ..domain.operation import PackageTagPush, PublishResult
from ..domain.registry import RegistryLayout
from ..domain.version import Version
from ..errors import (
    BehindUpstream,
    NothingToPublish,
    PointerDivergence,
    PushFailed,
    TagMismatch,
    UntaggedEntry,
    WrongBranch,
)
from ..infra.git_client import GitClient, GitError
from ..version_policy import is_rewritable
from .consistency import ConsistencyChecker
from .package_repo import ensure_git_repo
from .pull_request_service import PullRequestCreator

logger = logging.getLogger(__name__)


class PublishWorkflow:
    """
    Pushes verified package tags and submits the registry branch.

    Example:
        workflow = PublishWorkflow(workspace)
        result = workflow.publish("metadata-v2")
        print(result.pull_request.compare_url)
    """

    def __init__(
        self,
        workspace: Workspace,
        git: Optional[GitClient] = None,
        pull_requests: Optional[PullRequestCreator] = None,
        checker: Optional[ConsistencyChecker] = None,
    ):
        self.workspace = workspace
        self.git = git or GitClient()
        self.pull_requests = pull_requests or PullRequestCreator(git=self.git)
        self.checker = checker or ConsistencyChecker(workspace)
        self.last_result: Optional[PublishResult] = None

    def check_upstream(self, branch: str) -> str:
        """
        Fetch and compare the branch with its upstream.

        Returns:
            The upstream ref ("<remote>/<branch>")

        Raises:
            WrongBranch, BehindUpstream, NothingToPublish
        """
        registry = self.workspace.registry
        current = self.git.current_branch(registry)
        if current != branch:
            raise WrongBranch(branch, current)

        remote = self.workspace.remote
        if not self.git.fetch(registry, remote):
            raise GitError(['fetch', remote], 1, f"could not fetch {remote}")

        upstream = f"{remote}/{branch}"
        ahead_remote, ahead_local = self.git.rev_count(registry, upstream, branch)
        if ahead_remote > 0:
            raise BehindUpstream(branch, ahead_remote)
        if ahead_local == 0:
            raise NothingToPublish(branch)
        return upstream

    def changed_versions(self, upstream: str, branch: str) -> Dict[str, List[Version]]:
        """
        Versions whose pointer changed between upstream and branch,
        verified against each package's own tags.

        Raises:
            PointerDivergence: if an already-published pointer was edited
            UntaggedEntry: if the package has no tag for a changed version
            TagMismatch: if the package's tag points elsewhere
        """
        registry = self.workspace.registry
        tags: Dict[str, List[Version]] = {}

        for relpath in self.git.diff_files(registry, upstream, branch):
            parsed = RegistryLayout.parse_sha1_relpath(relpath)
            if parsed is None:
                continue
            pkg, version = parsed

            sha1 = self.git.cat_file(registry, branch, relpath)
            if sha1 is None:
                continue  # entry removed on this branch
            old = self.git.cat_file(registry, upstream, relpath)
            if old is not None and old != sha1:
                raise PointerDivergence(pkg, version, old, sha1)

            pkg_path = self.workspace.package_path(pkg)
            ensure_git_repo(self.git, pkg_path)
            tag_commit = self.git.rev_parse(pkg_path, f"{version.tag_name}^{{commit}}")
            if tag_commit is None:
                raise UntaggedEntry(pkg, version, sha1)
            if tag_commit != sha1:
                raise TagMismatch(pkg, version, sha1, tag_commit)

            tags.setdefault(pkg, []).append(version)

        return tags

    def push_tags(self, pkg: str, versions: List[Version]) -> PackageTagPush:
        """Push one package's tags: rewritable ones forced, then the rest unforced."""
        pushed = PackageTagPush(package=pkg)
        for version in sorted(versions):
            (pushed.forced if is_rewritable(version) else pushed.unforced).append(version.tag_name)

        path = self.workspace.package_path(pkg)
        if pushed.forced:
            logger.info(f"Pushing {pkg} temporary tags: {', '.join(pushed.forced)}")
            self._push(path, pushed.forced, force=True)
        if pushed.unforced:
            logger.info(f"Pushing {pkg} permanent tags: {', '.join(pushed.unforced)}")
            self._push(path, pushed.unforced, force=False)
        return pushed

    def _push(self, path, tag_names: List[str], force: bool) -> None:
        remote = self.workspace.package_remote
        refspecs = [f"refs/tags/{tag}:refs/tags/{tag}" for tag in tag_names]
        success, output = self.git.push(path, remote, refspecs, force=force)
        if not success:
            raise PushFailed(str(path), remote, output)

    def publish(self, branch: Optional[str] = None) -> PublishResult:
        """
        Publish the registry branch.

        Args:
            branch: Registry branch to publish (default: configured branch)

        Returns:
            PublishResult with the pushed tags and pull-request details
        """
        branch = branch or self.workspace.branch
        registry = self.workspace.registry
        ensure_git_repo(self.git, registry)

        result = PublishResult(branch=branch)
        self.last_result = result

        upstream = self.check_upstream(branch)
        tags = self.changed_versions(upstream, branch)
        if not tags:
            logger.info("No new package versions to publish")

        logger.info("Validating METADATA")
        self.checker.check_metadata(set(tags))

        for pkg in sorted(tags):
            result.pushed.append(self.push_tags(pkg, tags[pkg]))

        logger.info("Submitting METADATA changes")
        url = self.git.remote_url(registry, self.workspace.remote) or ""
        result.pull_request = self.pull_requests.open_pull_request(registry, url=url)
        return result
