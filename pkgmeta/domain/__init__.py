"""
Domain layer for pkgmeta.

Contains pure domain objects with no I/O or side effects:
- Version: Semantic version with placeholder conventions
- Requirement/VersionSet: Dependency declarations
- RegistryLayout/RegistryEntry/PackageRecord: Registry contents
- *Result: Outcomes of register/tag/publish/submit operations
"""

from .version import Version, InvalidVersion, ZERO
from .requirements import Requirement, VersionSet, parse_requirements, write_requirements
from .registry import RegistryLayout, RegistryEntry, PackageRecord
from .operation import (
    RegisterResult,
    TagResult,
    PackageTagPush,
    PullRequestResult,
    PublishResult,
)

__all__ = [
    'Version',
    'InvalidVersion',
    'ZERO',
    'Requirement',
    'VersionSet',
    'parse_requirements',
    'write_requirements',
    'RegistryLayout',
    'RegistryEntry',
    'PackageRecord',
    'RegisterResult',
    'TagResult',
    'PackageTagPush',
    'PullRequestResult',
    'PublishResult',
]
