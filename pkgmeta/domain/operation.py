"""
Operation result domain objects for pkgmeta.

Provides standardized result types for the write operations
(register, tag, publish, submit) that modify package and registry
repositories.
"""

from dataclasses import dataclass, field
from typing import Dict, Any, List, Optional

from .version import Version


@dataclass
class RegisterResult:
    """Result of registering a package."""
    package: str
    url: str
    versions: List[Version] = field(default_factory=list)
    committed: bool = False

    @property
    def commit_message(self) -> str:
        message = f"Register {self.package}"
        if self.versions:
            message += ": " + ", ".join(v.tag_name for v in self.versions)
        return message

    def to_dict(self) -> Dict[str, Any]:
        return {
            'operation': 'register',
            'package': self.package,
            'url': self.url,
            'versions': [str(v) for v in self.versions],
            'committed': self.committed,
        }


@dataclass
class TagResult:
    """Result of tagging a package version."""
    package: str
    version: Version
    commit: str
    rewritable: bool = False
    registered: bool = False
    committed: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            'operation': 'tag',
            'package': self.package,
            'version': str(self.version),
            'tag': self.version.tag_name,
            'commit': self.commit,
            'rewritable': self.rewritable,
            'registered': self.registered,
            'committed': self.committed,
        }


@dataclass
class PackageTagPush:
    """
    Tags pushed for one package during publish.

    Rewritable tags are force-pushed; immutable tags are pushed
    in a separate, unforced batch.
    """
    package: str
    forced: List[str] = field(default_factory=list)
    unforced: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'package': self.package,
            'forced': self.forced,
            'unforced': self.unforced,
        }


@dataclass
class PullRequestResult:
    """Result of pushing a pull-request branch to a fork."""
    commit: str
    branch: str
    fork_url: str
    compare_url: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            'operation': 'pull_request',
            'commit': self.commit,
            'branch': self.branch,
            'fork_url': self.fork_url,
            'compare_url': self.compare_url,
        }


@dataclass
class PublishResult:
    """
    Result of publishing a registry branch.

    `pushed` lists packages whose tags reached their remotes, in push
    order. It is filled in as pushes succeed so a caller that catches a
    failure mid-publish can report the partial progress.
    """
    branch: str
    pushed: List[PackageTagPush] = field(default_factory=list)
    pull_request: Optional[PullRequestResult] = None

    @property
    def packages(self) -> List[str]:
        return [p.package for p in self.pushed]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'operation': 'publish',
            'branch': self.branch,
            'pushed': [p.to_dict() for p in self.pushed],
            'pull_request': self.pull_request.to_dict() if self.pull_request else None,
        }
