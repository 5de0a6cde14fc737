"""
Service layer for pkgmeta.

Contains the registry workflow, orchestrating domain objects and
infrastructure:
- RegistryWriter: Write version entries into a registry working copy
- Registrar: First-time package registration
- Tagger: Version tagging with registry update and rollback
- ConsistencyChecker: Registry-wide requirement validation
- PublishWorkflow: Verify, push tags, submit the registry branch
- PullRequestCreator: Fork, push a branch, report the compare URL

Services are the primary API for commands to use.
"""

from .registry_writer import RegistryWriter
from .registrar import Registrar
from .tagger import Tagger
from .consistency import ConsistencyChecker
from .publish_service import PublishWorkflow
from .pull_request_service import PullRequestCreator

__all__ = [
    'RegistryWriter',
    'Registrar',
    'Tagger',
    'ConsistencyChecker',
    'PublishWorkflow',
    'PullRequestCreator',
]
