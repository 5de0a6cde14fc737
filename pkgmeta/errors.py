"""
Error kinds for pkgmeta operations.

Every failure of a register/tag/publish/submit operation is reported as
a subclass of PkgMetaError. Each one carries:
- kind: stable error-kind name (e.g. "PointerConflict")
- context: the package/version/path/commit fields that identify the problem
- exit_code: the process exit code the CLI maps it to

Errors are raised where they are detected and propagate to the caller
unchanged; the only automatic corrective action is the tag rollback
performed by the tagger.
"""

from typing import Any, Dict, Iterable, List, Optional, Tuple

from .exit_codes import CommandError, API_ERROR, CONFIG_ERROR, DATA_ERROR


class PkgMetaError(CommandError):
    """Base class for all pkgmeta error kinds."""

    exit_code_default = DATA_ERROR

    def __init__(self, message: str, **context: Any):
        super().__init__(message, self.exit_code_default)
        self.context: Dict[str, Any] = context

    @property
    def kind(self) -> str:
        return type(self).__name__

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON error output."""
        result = {'error': str(self), 'type': self.kind, 'exit_code': self.exit_code}
        result.update({k: str(v) for k, v in self.context.items() if v is not None})
        return result


# Repository and configuration errors

class NotAGitRepo(PkgMetaError):
    def __init__(self, path: str):
        super().__init__(f"{path} is not a git repo", path=path)


class CommitNotFound(PkgMetaError):
    def __init__(self, path: str, ref: str):
        super().__init__(f"Cannot find commit {ref} in {path}", path=path, ref=ref)


class NoURLConfigured(PkgMetaError):
    exit_code_default = CONFIG_ERROR

    def __init__(self, package: str):
        super().__init__(f"{package}: no URL configured", package=package)


class AlreadyRegistered(PkgMetaError):
    def __init__(self, package: str):
        super().__init__(f"{package} already registered", package=package)


class DirtyWorkingTree(PkgMetaError):
    def __init__(self, what: str):
        super().__init__(f"{what} is dirty – commit or stash changes to tag", path=what)


# Version errors

class InvalidSelector(PkgMetaError):
    def __init__(self, selector: str):
        super().__init__(f"invalid version selector: {selector}", selector=selector)


class VersionConflict(PkgMetaError):
    def __init__(self, version, reason: str):
        super().__init__(reason, version=version)


class MistaggedVersion(PkgMetaError):
    def __init__(self, package: str, version, commit: str, existing):
        super().__init__(
            f"{package} v{version}: commit {commit[:10]} is already registered as v{existing}",
            package=package, version=version, commit=commit, existing=existing,
        )


class TagCreationError(PkgMetaError):
    def __init__(self, package: str, tag: str, reason: str):
        super().__init__(f"{package}: failed to create tag {tag}: {reason}",
                         package=package, tag=tag)


# Registry errors

class PointerConflict(PkgMetaError):
    def __init__(self, package: str, version, current: str, requested: str):
        super().__init__(
            f"{package} v{version} is already registered as {current}, bailing",
            package=package, version=version, current=current, requested=requested,
        )


class UnregisteredDependency(PkgMetaError):
    def __init__(self, package: str, version, requirement: str):
        super().__init__(
            f"package {package} v{version} requires a non-registered package: {requirement}",
            package=package, version=version, requirement=requirement,
        )


class UnsatisfiableRequirements(PkgMetaError):
    def __init__(self, problems: Iterable[Tuple[str, Any, str]]):
        self.problems: List[Tuple[str, Any, str]] = list(problems)
        lines = ["packages with unsatisfiable requirements found:"]
        for pkg, version, missing in self.problems:
            lines.append(f"    {pkg} v{version} – no valid versions exist for package {missing}")
        super().__init__("\n".join(lines))


# Publish errors

class WrongBranch(PkgMetaError):
    def __init__(self, expected: str, actual: Optional[str]):
        super().__init__(f"METADATA must be on {expected} to publish changes",
                         expected=expected, actual=actual)


class BehindUpstream(PkgMetaError):
    def __init__(self, branch: str, behind: int):
        super().__init__(
            f"METADATA is behind origin/{branch} – update before publishing",
            branch=branch, behind=behind,
        )


class NothingToPublish(PkgMetaError):
    def __init__(self, branch: str):
        super().__init__("There are no METADATA changes to publish", branch=branch)


class PointerDivergence(PkgMetaError):
    def __init__(self, package: str, version, old: str, new: str):
        super().__init__(
            f"{package} v{version} SHA1 changed in METADATA – refusing to publish",
            package=package, version=version, old=old, new=new,
        )


class TagMismatch(PkgMetaError):
    def __init__(self, package: str, version, expected: str, actual: str):
        super().__init__(
            f"{package} v{version} is incorrectly tagged – {expected} expected",
            package=package, version=version, expected=expected, actual=actual,
        )


class UntaggedEntry(PkgMetaError):
    def __init__(self, package: str, version, pointer: str):
        super().__init__(
            f"{package} v{version} is registered as {pointer} but the package has no tag v{version}",
            package=package, version=version, pointer=pointer,
        )


# Remote hosting errors

class NotAGitHubRemote(PkgMetaError):
    def __init__(self, url: str):
        super().__init__(f"not a GitHub repo URL, can't make a pull request: {url}", url=url)


class RemoteForkFailed(PkgMetaError):
    exit_code_default = API_ERROR

    def __init__(self, owner: str, repo: str, reason: str):
        super().__init__(f"failed to fork {owner}/{repo}: {reason}", owner=owner, repo=repo)


class PushFailed(PkgMetaError):
    exit_code_default = API_ERROR

    def __init__(self, path: str, remote: str, reason: str):
        super().__init__(f"push from {path} to {remote} failed: {reason}",
                         path=path, remote=remote)
