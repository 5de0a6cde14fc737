"""
Version domain object for pkgmeta.

Versions are semantic version values with two placeholder conventions
used by package authors:
- "1.2.0-" carries exactly one empty prerelease identifier
- "1.2.0+" carries exactly one empty build identifier

Both are valid version strings and sort like any other prerelease/build.

Versions are immutable value objects with total ordering.
"""

import re
from dataclasses import dataclass
from functools import total_ordering
from typing import Optional, Tuple, Union

Identifier = Union[int, str]

VERSION_REGEX = re.compile(r"""
    ^
    v?                                      # prefix        (optional)
    (\d+)                                   # major         (required)
    (?:\.(\d+))?                            # minor         (optional)
    (?:\.(\d+))?                            # patch         (optional)
    (?:(-)|
    (?:-((?:[0-9a-z-]+\.)*[0-9a-z-]+))?     # pre-release   (optional)
    (?:(\+)|
    (?:\+((?:[0-9a-z-]+\.)*[0-9a-z-]+))?    # build         (optional)
    ))
    $
""", re.VERBOSE | re.IGNORECASE)


class InvalidVersion(ValueError):
    """Raised when a string is not a valid version."""


def _split_identifiers(text: Optional[str], placeholder: Optional[str]) -> Tuple[Identifier, ...]:
    if placeholder:
        return ("",)
    if not text:
        return ()
    return tuple(int(part) if part.isdigit() else part for part in text.split('.'))


def _identifier_key(ident: Identifier) -> Tuple[int, int, str]:
    # empty < numeric < alphanumeric
    if ident == "":
        return (0, 0, "")
    if isinstance(ident, int):
        return (1, ident, "")
    return (2, 0, ident)


def _identifiers_key(idents: Tuple[Identifier, ...]) -> tuple:
    return tuple(_identifier_key(i) for i in idents)


@total_ordering
@dataclass(frozen=True)
class Version:
    """
    Semantic version with optional prerelease and build identifiers.

    Examples:
        Version.parse("1.2.3")      -> Version(1, 2, 3)
        Version.parse("v0.4")       -> Version(0, 4, 0)
        Version.parse("1.0.0-")     -> Version(1, 0, 0, prerelease=("",))
        Version.parse("2.1.0-rc.1") -> Version(2, 1, 0, prerelease=("rc", 1))

    Ordering: release triple first; a version with a prerelease sorts
    before the same release without one; a version with build identifiers
    sorts after the same version without them.
    """

    major: int = 0
    minor: int = 0
    patch: int = 0
    prerelease: Tuple[Identifier, ...] = ()
    build: Tuple[Identifier, ...] = ()

    @classmethod
    def parse(cls, text: str) -> 'Version':
        """
        Parse a version string (with or without a leading "v").

        Raises:
            InvalidVersion: if the string does not match the version grammar
        """
        m = VERSION_REGEX.match(text.strip())
        if m is None:
            raise InvalidVersion(f"invalid version string: {text!r}")
        major, minor, patch, pre_dash, pre, build_plus, build = m.groups()
        return cls(
            major=int(major),
            minor=int(minor or 0),
            patch=int(patch or 0),
            prerelease=_split_identifiers(pre, pre_dash),
            build=_split_identifiers(build, build_plus),
        )

    @staticmethod
    def is_valid(text: str) -> bool:
        """Check whether a string matches the version grammar."""
        return VERSION_REGEX.match(text.strip()) is not None

    @classmethod
    def from_tag(cls, tag_name: str) -> Optional['Version']:
        """Parse a version tag name ("v1.2.3"); None for any other tag."""
        if not tag_name.startswith('v') or not cls.is_valid(tag_name):
            return None
        return cls.parse(tag_name)

    @property
    def tag_name(self) -> str:
        """Tag name for this version in a package repository."""
        return f"v{self}"

    def _sort_key(self) -> tuple:
        # no prerelease sorts last, no build sorts first
        pre = (1,) if not self.prerelease else (0, _identifiers_key(self.prerelease))
        build = (0,) if not self.build else (1, _identifiers_key(self.build))
        return (self.major, self.minor, self.patch, pre, build)

    def __lt__(self, other: 'Version') -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._sort_key() < other._sort_key()

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            text += "-" + ".".join(str(i) for i in self.prerelease)
        if self.build:
            text += "+" + ".".join(str(i) for i in self.build)
        return text

    def __repr__(self) -> str:
        return f"Version({str(self)!r})"

    # Release arithmetic

    def this_patch(self) -> 'Version':
        return Version(self.major, self.minor, self.patch)

    def this_minor(self) -> 'Version':
        return Version(self.major, self.minor, 0)

    def this_major(self) -> 'Version':
        return Version(self.major, 0, 0)

    def next_patch(self) -> 'Version':
        """Next patch release; a prerelease advances to its own release."""
        if self < self.this_patch():
            return self.this_patch()
        return Version(self.major, self.minor, self.patch + 1)

    def next_minor(self) -> 'Version':
        if self < self.this_minor():
            return self.this_minor()
        return Version(self.major, self.minor + 1, 0)

    def next_major(self) -> 'Version':
        if self < self.this_major():
            return self.this_major()
        return Version(self.major + 1, 0, 0)

    def lower_bound(self) -> 'Version':
        """Smallest version of this release ("x.y.z-")."""
        return Version(self.major, self.minor, self.patch, prerelease=("",))


ZERO = Version(0, 0, 0)
