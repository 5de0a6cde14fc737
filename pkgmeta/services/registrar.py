"""
First-time registration of a package in the registry.
"""

import logging
from typing import Optional

from ..config import Workspace
from ..domain.operation import RegisterResult
from ..domain.registry import RegistryLayout
from ..errors import AlreadyRegistered, NoURLConfigured
from ..infra.git_client import GitClient
from ..infra.github_client import normalize_url
from ..infra.transaction import RegistryTransaction
from .package_repo import ensure_git_repo, version_tags, requirements_at
from .registry_reader import is_registered
from .registry_writer import RegistryWriter

logger = logging.getLogger(__name__)


class Registrar:
    """
    Registers a package: records its url and back-fills an entry for
    every version tag the package repository already has.

    Example:
        registrar = Registrar(workspace)
        result = registrar.register("Foo", "https://github.com/owner/Foo.jl.git")
        print(result.versions)
    """

    def __init__(self, workspace: Workspace, git: Optional[GitClient] = None):
        self.workspace = workspace
        self.git = git or GitClient()
        self.layout = RegistryLayout(workspace.registry)
        self.writer = RegistryWriter(self.layout)

    def default_url(self, pkg: str) -> str:
        """
        The package's own origin url, normalized.

        Raises:
            NoURLConfigured: if the package repository has no origin
        """
        path = self.workspace.package_path(pkg)
        ensure_git_repo(self.git, path)
        url = self.git.remote_url(path, "origin")
        if not url:
            raise NoURLConfigured(pkg)
        return normalize_url(url)

    def register(self, pkg: str, url: Optional[str] = None) -> RegisterResult:
        """
        Register a package.

        Args:
            pkg: Package name (its repository is <packages_dir>/<pkg>)
            url: Canonical url; defaults to the package's origin url

        Returns:
            RegisterResult listing the versions recorded

        Raises:
            NotAGitRepo: if the package or registry is not a git repository
            AlreadyRegistered: if the package already has a url file
            NoURLConfigured: if no url is given and none is configured
        """
        path = self.workspace.package_path(pkg)
        ensure_git_repo(self.git, path)
        ensure_git_repo(self.git, self.workspace.registry)
        if is_registered(self.layout, pkg):
            raise AlreadyRegistered(pkg)
        if not url:
            url = self.default_url(pkg)

        tags = version_tags(self.git, path)
        result = RegisterResult(package=pkg, url=url, versions=sorted(tags))

        with RegistryTransaction(self.git, self.workspace.registry) as txn:
            logger.info(f"Registering {pkg} at {url}")
            self.writer.write_url(txn, pkg, url)

            for version in result.versions:
                logger.info(f"Tagging {pkg} v{version}")
                requirements = requirements_at(self.git, path, tags[version], self.workspace.requirements_file)
                self.writer.write_entry(txn, pkg, version, tags[version], requirements, force=True)

            if txn.has_changes():
                logger.info(f"Committing METADATA for {pkg}")
            commit = txn.commit(result.commit_message)
            if commit is None:
                logger.info("No METADATA changes to commit")
            result.committed = commit is not None

        return result
