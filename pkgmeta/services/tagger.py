"""
Version tagging for package repositories.

Tagging creates (or moves) a `v<version>` tag on the package repository
and, when the package is registered, records the tagged commit in the
registry in the same step. If the registry update fails the new tag is
deleted again, so a tag never exists without its registry entry.
"""

import logging
from typing import Dict, Optional, Union

from ..config import Workspace
from ..domain.operation import TagResult
from ..domain.registry import RegistryLayout
from ..domain.version import Version, ZERO
from ..errors import CommitNotFound, DirtyWorkingTree, MistaggedVersion, TagCreationError
from ..infra.git_client import GitClient, GitError
from ..infra.transaction import RegistryTransaction
from ..version_policy import check_new_version, is_rewritable, next_selector
from .package_repo import ensure_git_repo, version_tags, requirements_at
from .registry_reader import is_registered, read_package_versions
from .registry_writer import RegistryWriter

logger = logging.getLogger(__name__)


class Tagger:
    """
    Creates version tags and keeps the registry in step with them.

    Example:
        tagger = Tagger(workspace)
        tagger.tag("Foo", "minor")                  # next minor after the latest ancestor
        tagger.tag("Foo", Version.parse("1.2.0"), commitish="abc123")
    """

    def __init__(self, workspace: Workspace, git: Optional[GitClient] = None):
        self.workspace = workspace
        self.git = git or GitClient()
        self.layout = RegistryLayout(workspace.registry)
        self.writer = RegistryWriter(self.layout)

    def check_clean(self, pkg: str) -> None:
        """
        Raises:
            DirtyWorkingTree: if the package's registry directory or the
                package repository has uncommitted changes
        """
        registry = self.workspace.registry
        if self.git.is_git_repo(registry) and self.git.has_uncommitted_changes(registry, scope=pkg):
            raise DirtyWorkingTree(f"METADATA/{pkg}")
        if self.git.has_uncommitted_changes(self.workspace.package_path(pkg)):
            raise DirtyWorkingTree(pkg)

    def existing_versions(self, pkg: str, registered: bool) -> Dict[Version, str]:
        """
        Known versions of a package with the commit each points to.

        Registered packages are read from the registry, others from
        their own version tags.
        """
        if registered:
            entries = read_package_versions(self.layout, pkg)
            return {v: entry.pointer for v, entry in entries.items()}
        return version_tags(self.git, self.workspace.package_path(pkg))

    def resolve_version(
        self,
        pkg: str,
        requested: Union[str, Version],
        commit: str,
        existing: Dict[Version, str],
    ) -> Version:
        """
        Turn a selector into a concrete version.

        The base version is the highest existing version whose commit is
        an ancestor of `commit`, else the highest existing version, else 0.0.0.
        """
        if isinstance(requested, Version):
            return requested

        path = self.workspace.package_path(pkg)
        ancestors = [
            v for v, sha in existing.items()
            if self.git.is_commit(path, sha) and self.git.is_ancestor(path, sha, commit)
        ]
        if ancestors:
            base = max(ancestors)
        elif existing:
            base = max(existing)
        else:
            base = ZERO
        version = next_selector(requested, base)
        logger.debug(f"{pkg}: {requested} of v{base} is v{version}")
        return version

    def check_version(self, pkg: str, version: Version, commit: str, existing: Dict[Version, str]) -> None:
        """
        Raises:
            VersionConflict: if the version does not fit the existing ones
            MistaggedVersion: if an immutable version would land on a
                commit already registered as another immutable version
        """
        others = dict(existing)
        if is_rewritable(version):
            others.pop(version, None)
        check_new_version(others, version)

        if is_rewritable(version):
            return
        for other, sha in sorted(others.items()):
            if sha == commit and not is_rewritable(other):
                raise MistaggedVersion(pkg, version, commit, other)

    def tag(
        self,
        pkg: str,
        requested: Union[str, Version],
        force: bool = False,
        commitish: str = "HEAD",
    ) -> TagResult:
        """
        Tag a package version.

        Args:
            pkg: Package name (its repository is <packages_dir>/<pkg>)
            requested: A Version, or one of bump/patch/minor/major
            force: Skip version checks and overwrite an existing registry entry
            commitish: Commit to tag (default: HEAD)

        Returns:
            TagResult describing the tag and registry commit

        Raises:
            NotAGitRepo, DirtyWorkingTree, CommitNotFound, InvalidSelector,
            VersionConflict, MistaggedVersion, TagCreationError,
            PointerConflict (after rolling the tag back)
        """
        path = self.workspace.package_path(pkg)
        ensure_git_repo(self.git, path)
        self.check_clean(pkg)

        commit = self.git.rev_parse(path, f"{commitish}^{{commit}}")
        if commit is None:
            raise CommitNotFound(str(path), commitish)
        registered = is_registered(self.layout, pkg)

        existing = self.existing_versions(pkg, registered)
        version = self.resolve_version(pkg, requested, commit, existing)
        if not force:
            self.check_version(pkg, version, commit, existing)

        rewritable = is_rewritable(version)
        tag_name = version.tag_name
        message = "" if rewritable else f"{pkg} v{version} [{commit[:10]}]"

        logger.info(f"Tagging {pkg} v{version}")
        try:
            self.git.tag_create(path, tag_name, commit, message=message, force=force or rewritable)
        except GitError as e:
            raise TagCreationError(pkg, tag_name, e.stderr or str(e)) from e

        result = TagResult(
            package=pkg,
            version=version,
            commit=commit,
            rewritable=rewritable,
            registered=registered,
        )
        if not registered:
            return result

        try:
            result.committed = self._record(pkg, version, commit, force or rewritable)
        except Exception:
            logger.info(f"Removing tag {tag_name} from {pkg}")
            self.git.tag_delete(path, tag_name)
            raise
        return result

    def _record(self, pkg: str, version: Version, commit: str, overwrite: bool) -> bool:
        """
        Write the registry entry for a new tag; True if a commit was made.

        `overwrite` is set for forced and rewritable versions, whose
        pointer follows the moved tag.
        """
        path = self.workspace.package_path(pkg)
        with RegistryTransaction(self.git, self.workspace.registry) as txn:
            requirements = requirements_at(self.git, path, commit, self.workspace.requirements_file)
            self.writer.write_entry(txn, pkg, version, commit, requirements, force=overwrite)
            if txn.has_changes():
                logger.info(f"Committing METADATA for {pkg}")
            committed = txn.commit(f"Tag {pkg} v{version}")
            if committed is None:
                logger.info("No METADATA changes to commit")
            return committed is not None
