"""
pkgmeta - Version tagging and registry publishing for packages.

Each package is a git repository; a separate git repository (the
registry) records, for every package, its canonical url and for every
released version the commit it points at and the requirements read
from the package at that commit.

Quick Start:
    from pkgmeta import Registrar, Tagger, PublishWorkflow, Workspace

    workspace = Workspace(packages_dir=Path("~/dev"), registry=Path("~/dev/METADATA"))

    # Register a package and all of its existing version tags
    Registrar(workspace).register("Foo")

    # Tag the next minor version and record it in the registry
    Tagger(workspace).tag("Foo", "minor")

    # Push the tags and the registry branch for a pull request
    result = PublishWorkflow(workspace).publish()
    print(result.pull_request.compare_url)

Domain Objects:
    Version - Semantic version with prerelease and build identifiers
    Requirement - One line of a package's requirements file
    RegistryEntry - Commit pointer and requirements of one version

Services:
    Registrar - First-time package registration
    Tagger - Version tagging with registry update and rollback
    PublishWorkflow - Verify, push tags, submit the registry branch
"""

__version__ = "0.1.0"

# Domain objects
from .domain import (
    Version,
    InvalidVersion,
    Requirement,
    VersionSet,
    RegistryEntry,
    RegistryLayout,
)

# Services
from .services import (
    RegistryWriter,
    Registrar,
    Tagger,
    ConsistencyChecker,
    PublishWorkflow,
    PullRequestCreator,
)

# Errors
from .errors import PkgMetaError

# Configuration
from .config import load_config, save_config, Workspace, workspace_from_config

__all__ = [
    # Version
    "__version__",
    # Domain objects
    "Version",
    "InvalidVersion",
    "Requirement",
    "VersionSet",
    "RegistryEntry",
    "RegistryLayout",
    # Services
    "RegistryWriter",
    "Registrar",
    "Tagger",
    "ConsistencyChecker",
    "PublishWorkflow",
    "PullRequestCreator",
    # Errors
    "PkgMetaError",
    # Configuration
    "load_config",
    "save_config",
    "Workspace",
    "workspace_from_config",
]
