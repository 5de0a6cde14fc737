"""
Read access to a registry working copy.

Builds the availability table (package -> version -> RegistryEntry)
that the tagger and the consistency checker work from.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional, Union

from ..domain.registry import RegistryLayout, RegistryEntry, PackageRecord
from ..domain.requirements import parse_requirements
from ..domain.version import Version

logger = logging.getLogger(__name__)

Availability = Dict[str, Dict[Version, RegistryEntry]]


def _layout(registry: Union[str, Path, RegistryLayout]) -> RegistryLayout:
    if isinstance(registry, RegistryLayout):
        return registry
    return RegistryLayout(Path(registry))


def is_registered(registry: Union[str, Path, RegistryLayout], pkg: str) -> bool:
    """A package is registered once its url file exists."""
    return _layout(registry).url_file(pkg).is_file()


def read_url(registry: Union[str, Path, RegistryLayout], pkg: str) -> Optional[str]:
    path = _layout(registry).url_file(pkg)
    if not path.is_file():
        return None
    return path.read_text().strip()


def read_package_versions(registry: Union[str, Path, RegistryLayout], pkg: str) -> Dict[Version, RegistryEntry]:
    """
    Read every version entry of one package.

    Version directories whose name is not a valid version, or that have
    no sha1 file, are skipped.
    """
    layout = _layout(registry)
    versions_dir = layout.package_dir(pkg) / "versions"
    entries: Dict[Version, RegistryEntry] = {}
    if not versions_dir.is_dir():
        return entries

    for version_dir in sorted(versions_dir.iterdir()):
        if not version_dir.is_dir() or not Version.is_valid(version_dir.name):
            continue
        sha1_file = version_dir / "sha1"
        if not sha1_file.is_file():
            logger.debug(f"Skipping {pkg} {version_dir.name}: no sha1 file")
            continue
        version = Version.parse(version_dir.name)
        requires_file = version_dir / "requires"
        requirements = parse_requirements(requires_file.read_text()) if requires_file.is_file() else []
        entries[version] = RegistryEntry(
            version=version,
            pointer=sha1_file.read_text().strip(),
            requirements=requirements,
        )
    return entries


def list_packages(registry: Union[str, Path, RegistryLayout]) -> List[str]:
    """Names of registered packages (directories holding a url file)."""
    layout = _layout(registry)
    if not layout.root.is_dir():
        return []
    return sorted(
        p.name for p in layout.root.iterdir()
        if p.is_dir() and not p.name.startswith('.') and (p / "url").is_file()
    )


def read_package(registry: Union[str, Path, RegistryLayout], pkg: str) -> Optional[PackageRecord]:
    url = read_url(registry, pkg)
    if url is None:
        return None
    return PackageRecord(name=pkg, url=url, entries=read_package_versions(registry, pkg))


def read_available(registry: Union[str, Path, RegistryLayout], pkg: Optional[str] = None) -> Availability:
    """
    Build the availability table.

    Args:
        registry: Registry working copy
        pkg: Restrict to one package

    Returns:
        Dict of package name -> Version -> RegistryEntry
    """
    names = [pkg] if pkg else list_packages(registry)
    return {name: read_package_versions(registry, name) for name in names}
