"""
Infrastructure layer for pkgmeta.

Contains abstractions for external systems:
- GitClient: Git command execution
- RegistryTransaction: Scoped stage/commit/discard on a working copy
- GitHubClient: GitHub API access (identity, forks)

These provide clean interfaces that can be mocked for testing.
"""

from .git_client import GitClient, GitError
from .transaction import RegistryTransaction
from .github_client import (
    GitHubClient,
    GitHubAPIError,
    GitHubUser,
    GitHubFork,
    parse_github_url,
    normalize_url,
)

__all__ = [
    'GitClient',
    'GitError',
    'RegistryTransaction',
    'GitHubClient',
    'GitHubAPIError',
    'GitHubUser',
    'GitHubFork',
    'parse_github_url',
    'normalize_url',
]
