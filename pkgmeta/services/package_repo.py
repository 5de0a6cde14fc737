"""
Read helpers for package repositories.
"""

from pathlib import Path
from typing import Dict, List

from ..domain.requirements import Requirement, parse_requirements
from ..domain.version import Version
from ..errors import NotAGitRepo
from ..infra.git_client import GitClient, GitError


def ensure_git_repo(git: GitClient, path: Path) -> None:
    if not git.is_git_repo(path):
        raise NotAGitRepo(str(path))


def version_tags(git: GitClient, path: Path) -> Dict[Version, str]:
    """
    Version tags of a package repository.

    Returns:
        Dict of Version -> commit id the tag resolves to; tags that are
        not version tags are ignored
    """
    tags: Dict[Version, str] = {}
    for name in git.tag_list(path):
        version = Version.from_tag(name)
        if version is None:
            continue
        commit = git.rev_parse(path, f"{name}^{{commit}}")
        if commit is None:
            raise GitError(['rev-parse', f"{name}^{{commit}}"], 128, f"tag {name} does not point to a commit")
        tags[version] = commit
    return tags


def requirements_at(git: GitClient, path: Path, commit: str, filename: str) -> List[Requirement]:
    """Requirements declared by a package at a given commit."""
    content = git.cat_file(path, commit, filename)
    if content is None:
        return []
    return parse_requirements(content)
