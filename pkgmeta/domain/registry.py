"""
Registry domain objects for pkgmeta.

The registry is a git repository holding one directory per package:

    <pkg>/url                        canonical remote location
    <pkg>/versions/<ver>/sha1        commit the version tag points to
    <pkg>/versions/<ver>/requires    requirements at that commit (optional)

All files are plain text, one value per line.
"""

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from .requirements import Requirement
from .version import Version

SHA1_PATH_REGEX = re.compile(r"^(.+?)/versions/([^/]+)/sha1$")


@dataclass(frozen=True)
class RegistryLayout:
    """
    Path arithmetic for a registry working copy.

    Relative paths are posix-style (as git reports them); absolute
    paths are rooted at the registry working copy.
    """
    root: Path

    def package_dir(self, pkg: str) -> Path:
        return self.root / pkg

    def url_file(self, pkg: str) -> Path:
        return self.root / self.url_relpath(pkg)

    def version_dir(self, pkg: str, version: Version) -> Path:
        return self.root / pkg / "versions" / str(version)

    def sha1_file(self, pkg: str, version: Version) -> Path:
        return self.root / self.sha1_relpath(pkg, version)

    def requires_file(self, pkg: str, version: Version) -> Path:
        return self.root / self.requires_relpath(pkg, version)

    @staticmethod
    def url_relpath(pkg: str) -> str:
        return f"{pkg}/url"

    @staticmethod
    def sha1_relpath(pkg: str, version: Version) -> str:
        return f"{pkg}/versions/{version}/sha1"

    @staticmethod
    def requires_relpath(pkg: str, version: Version) -> str:
        return f"{pkg}/versions/{version}/requires"

    @staticmethod
    def parse_sha1_relpath(relpath: str) -> Optional[Tuple[str, Version]]:
        """
        Split a "<pkg>/versions/<ver>/sha1" path into (pkg, Version).

        Returns None for any other path, or when <ver> is not a valid
        version string.
        """
        m = SHA1_PATH_REGEX.match(relpath)
        if m is None or not Version.is_valid(m.group(2)):
            return None
        return m.group(1), Version.parse(m.group(2))


@dataclass
class RegistryEntry:
    """Metadata recorded for one (package, version)."""
    version: Version
    pointer: str
    requirements: List[Requirement] = field(default_factory=list)

    @property
    def requires(self) -> Dict[str, Requirement]:
        """Requirements keyed by required package name."""
        return {req.package: req for req in self.requirements}

    def to_dict(self) -> dict:
        return {
            'version': str(self.version),
            'pointer': self.pointer,
            'requires': [req.to_line() for req in self.requirements],
        }


@dataclass
class PackageRecord:
    """A registered package: its url plus its version entries."""
    name: str
    url: str
    entries: Dict[Version, RegistryEntry] = field(default_factory=dict)

    @property
    def versions(self) -> List[Version]:
        return sorted(self.entries)

    def to_dict(self) -> dict:
        return {
            'name': self.name,
            'url': self.url,
            'versions': [self.entries[v].to_dict() for v in self.versions],
        }
