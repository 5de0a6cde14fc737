"""
Registry-wide consistency checks.
"""

import logging
from typing import Iterable, Optional

from ..config import Workspace
from ..errors import UnregisteredDependency, UnsatisfiableRequirements
from . import resolver
from .registry_reader import read_available

logger = logging.getLogger(__name__)


class ConsistencyChecker:
    """
    Cross-checks every registry entry's requirements.

    Example:
        ConsistencyChecker(workspace).check_metadata({"Foo"})
    """

    def __init__(self, workspace: Workspace):
        self.workspace = workspace

    def check_metadata(self, restrict_to: Optional[Iterable[str]] = None) -> None:
        """
        Validate the registry.

        Args:
            restrict_to: Only sanity-check these packages and their
                dependents (all packages when empty)

        Raises:
            UnregisteredDependency: if a requirement names a package that
                is not registered
            UnsatisfiableRequirements: if some versions have requirements
                no registered version satisfies
        """
        available = read_available(self.workspace.registry)
        deps, conflicts = resolver.build_graph(available, self.workspace.fixed)
        for pkg, fixed in sorted(conflicts.items()):
            logger.debug(f"{pkg}: some versions excluded by {', '.join(sorted(fixed))}")

        for pkg, versions in sorted(deps.items()):
            for version, entry in sorted(versions.items()):
                for req in entry.requirements:
                    if req.package not in deps:
                        raise UnregisteredDependency(pkg, version, req.package)

        problems = resolver.sanity_check(deps, set(restrict_to or ()))
        if problems:
            raise UnsatisfiableRequirements(problems)
