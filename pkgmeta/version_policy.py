"""
Version numbering rules for package tags.

A tag is rewritable (may be force-moved to another commit) when its
release has patch 0, or when it carries exactly one empty prerelease
identifier ("1.2.3-") or one empty build identifier ("1.2.3+"). Every
other version tag is immutable once created.
"""

from typing import Iterable, Union

from .domain.version import Version
from .errors import InvalidSelector, VersionConflict

SELECTORS = ('bump', 'patch', 'minor', 'major')

INITIAL_VERSIONS = (
    Version(0, 0, 0),
    Version(0, 0, 1),
    Version(0, 1, 0),
    Version(1, 0, 0),
)


def is_rewritable(v: Version) -> bool:
    return (
        v.this_patch().patch == 0
        or (len(v.prerelease) == 1 and v.prerelease[0] == "")
        or (len(v.build) == 1 and v.build[0] == "")
    )


def next_bump(v: Version) -> Version:
    """The version itself if rewritable, else the next patch release."""
    return v if is_rewritable(v) else v.next_patch()


def next_selector(selector: str, base: Version) -> Version:
    """
    Successor of `base` for a version selector.

    Raises:
        InvalidSelector: for anything but bump/patch/minor/major
    """
    if selector == 'bump':
        return next_bump(base)
    if selector == 'patch':
        return base.next_patch()
    if selector == 'minor':
        return base.next_minor()
    if selector == 'major':
        return base.next_major()
    raise InvalidSelector(selector)


def parse_version_or_selector(text: str) -> Union[str, Version]:
    """
    Interpret a command-line version argument.

    Returns:
        The selector name, or a Version
    """
    name = text.lstrip(':').lower()
    if name in SELECTORS:
        return name
    if Version.is_valid(text):
        return Version.parse(text)
    raise InvalidSelector(text)


def check_new_version(existing: Iterable[Version], candidate: Version) -> None:
    """
    Check that `candidate` may be added next to `existing` versions.

    Raises:
        VersionConflict: if the candidate is not a valid initial version,
            already exists, sorts below every existing version, skips
            over the next release, or is a prerelease of a release that
            already exists
    """
    existing = sorted(existing)

    if not existing:
        for v in INITIAL_VERSIONS:
            if v.lower_bound() <= candidate <= v:
                return
        raise VersionConflict(
            candidate,
            f"{candidate} is not a valid initial version (try 0.0.0, 0.0.1, 0.1 or 1.0)",
        )

    below = [v for v in existing if v <= candidate]
    if not below:
        raise VersionConflict(candidate, f"{candidate} is lower than every existing version ({existing[0]})")

    prev = below[-1]
    if candidate == prev:
        raise VersionConflict(candidate, f"version {candidate} already exists")

    if candidate.this_major() != prev.this_major():
        nxt = prev.next_major()
    elif candidate.this_minor() != prev.this_minor():
        nxt = prev.next_minor()
    else:
        nxt = prev.next_patch()
    if candidate > nxt:
        raise VersionConflict(candidate, f"{candidate} skips over {nxt}")

    if candidate.this_patch() <= candidate:
        return  # regular or build release

    idx = len(below)
    if idx < len(existing) and existing[idx].this_patch() <= nxt:
        raise VersionConflict(
            candidate,
            f"{candidate} is a pre-release of existing version {existing[idx]}",
        )
