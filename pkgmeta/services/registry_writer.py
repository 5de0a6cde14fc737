"""
Writes version entries into a registry working copy.

Each entry is a sha1 pointer file plus an optional requires file. The
writer stages its changes through a RegistryTransaction and never
commits; committing is the caller's decision.
"""

import logging
from typing import Iterable

from ..domain.registry import RegistryLayout
from ..domain.requirements import Requirement, write_requirements
from ..domain.version import Version
from ..errors import PointerConflict
from ..infra.transaction import RegistryTransaction

logger = logging.getLogger(__name__)


class RegistryWriter:
    """
    Write (package, version) entries with pointer-conflict detection.

    Example:
        with RegistryTransaction(git, registry) as txn:
            RegistryWriter(RegistryLayout(registry)).write_entry(
                txn, "Foo", Version.parse("1.0.0"), commit, requirements)
            txn.commit("Tag Foo v1.0.0")
    """

    def __init__(self, layout: RegistryLayout):
        self.layout = layout

    def write_url(self, txn: RegistryTransaction, pkg: str, url: str) -> None:
        """Record a package's canonical url."""
        path = self.layout.url_file(pkg)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(f"{url}\n")
        txn.stage(self.layout.url_relpath(pkg))

    def write_entry(
        self,
        txn: RegistryTransaction,
        pkg: str,
        version: Version,
        commit: str,
        requirements: Iterable[Requirement] = (),
        force: bool = False,
    ) -> None:
        """
        Write the pointer and requirements for one package version.

        Args:
            txn: Open transaction on the registry working copy
            pkg: Package name
            version: Version being recorded
            commit: Commit id the version's tag points to
            requirements: Requirements at that commit; none removes the requires file
            force: Overwrite an existing, different pointer

        Raises:
            PointerConflict: if an entry exists with a different pointer
                and force is False
        """
        requirements = list(requirements)
        sha1_file = self.layout.sha1_file(pkg, version)

        if not force and sha1_file.is_file():
            current = sha1_file.read_text().strip()
            if current != commit:
                raise PointerConflict(pkg, version, current, commit)

        sha1_file.parent.mkdir(parents=True, exist_ok=True)
        sha1_file.write_text(f"{commit}\n")
        txn.stage(self.layout.sha1_relpath(pkg, version))

        requires_file = self.layout.requires_file(pkg, version)
        if requirements:
            write_requirements(requires_file, requirements)
            txn.stage(self.layout.requires_relpath(pkg, version))
        elif requires_file.exists():
            txn.unstage_remove(self.layout.requires_relpath(pkg, version))
            if requires_file.exists():
                requires_file.unlink()
        logger.debug(f"Wrote {pkg} v{version} -> {commit[:10]}")
