"""
Dependency graph construction and sanity checking.

Works on the availability table read from the registry
(package -> version -> RegistryEntry).
"""

import logging
from typing import Dict, List, Optional, Set, Tuple

from ..domain.registry import RegistryEntry
from ..domain.version import Version
from .registry_reader import Availability

logger = logging.getLogger(__name__)

Conflicts = Dict[str, Set[str]]
Problem = Tuple[str, Version, str]


def build_graph(
    available: Availability,
    fixed: Optional[Dict[str, Version]] = None,
) -> Tuple[Availability, Conflicts]:
    """
    Build the dependency graph.

    Requirements on a fixed package (one pinned by configuration, such
    as a language runtime) are checked against the pinned version and
    then dropped from the graph.

    Returns:
        (deps, conflicts): deps is the availability table without versions
        that are incompatible with a fixed package; conflicts maps each
        package to the fixed packages that excluded some of its versions
    """
    fixed = fixed or {}
    deps: Availability = {}
    conflicts: Conflicts = {}

    for pkg, versions in available.items():
        if pkg in fixed:
            continue
        kept: Dict[Version, RegistryEntry] = {}
        for version, entry in versions.items():
            compatible = True
            requirements = []
            for req in entry.requirements:
                if req.package in fixed:
                    if not req.versions.contains(fixed[req.package]):
                        compatible = False
                        conflicts.setdefault(pkg, set()).add(req.package)
                    continue
                requirements.append(req)
            if compatible:
                kept[version] = RegistryEntry(version=version, pointer=entry.pointer, requirements=requirements)
            else:
                logger.debug(f"{pkg} v{version} excluded by fixed requirement")
        deps[pkg] = kept

    return deps, conflicts


def dependents_closure(deps: Availability, packages: Set[str]) -> Set[str]:
    """`packages` plus every package that depends on them, transitively."""
    reverse: Dict[str, Set[str]] = {}
    for pkg, versions in deps.items():
        for entry in versions.values():
            for req in entry.requirements:
                reverse.setdefault(req.package, set()).add(pkg)

    closure = set(packages)
    frontier = list(packages)
    while frontier:
        current = frontier.pop()
        for dependent in reverse.get(current, ()):
            if dependent not in closure:
                closure.add(dependent)
                frontier.append(dependent)
    return closure


def sanity_check(deps: Availability, scope: Optional[Set[str]] = None) -> List[Problem]:
    """
    Find versions with a requirement no available version satisfies.

    Args:
        deps: Dependency graph from build_graph
        scope: Packages to check (plus their dependents); all when empty

    Returns:
        Sorted list of (package, version, unsatisfied requirement)
    """
    packages = dependents_closure(deps, set(scope)) if scope else set(deps)

    problems: List[Problem] = []
    for pkg in sorted(packages):
        for version, entry in sorted(deps.get(pkg, {}).items()):
            for req in entry.requirements:
                candidates = deps.get(req.package, {})
                if not any(req.versions.contains(v) for v in candidates):
                    problems.append((pkg, version, req.package))

    return sorted(problems)
