"""
Requirements domain objects for pkgmeta.

A requirements file lists one dependency per line:

    # comment
    Foo
    Bar 0.3
    Baz 0.2 0.5
    @windows WinTools 1.0

Version bounds are paired into half-open intervals: "Baz 0.2 0.5" means
0.2 <= v < 0.5; an odd trailing bound is open-ended.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Tuple, Union

from .version import Version, InvalidVersion


@dataclass(frozen=True)
class VersionInterval:
    """Half-open version interval [lower, upper); upper None means unbounded."""
    lower: Version
    upper: Optional[Version] = None

    def contains(self, version: Version) -> bool:
        if version < self.lower:
            return False
        return self.upper is None or version < self.upper


@dataclass(frozen=True)
class VersionSet:
    """Union of version intervals; empty bounds mean any version."""
    bounds: Tuple[Version, ...] = ()

    @property
    def intervals(self) -> List[VersionInterval]:
        if not self.bounds:
            return [VersionInterval(Version(0, 0, 0, prerelease=("",)))]
        pairs = []
        for i in range(0, len(self.bounds), 2):
            upper = self.bounds[i + 1] if i + 1 < len(self.bounds) else None
            pairs.append(VersionInterval(self.bounds[i], upper))
        return pairs

    def contains(self, version: Version) -> bool:
        return any(interval.contains(version) for interval in self.intervals)

    def __str__(self) -> str:
        return " ".join(str(v) for v in self.bounds)


@dataclass(frozen=True)
class Requirement:
    """A dependency on another package, optionally platform-qualified."""
    package: str
    versions: VersionSet = field(default_factory=VersionSet)
    platforms: Tuple[str, ...] = ()

    @classmethod
    def parse(cls, line: str) -> Optional['Requirement']:
        """
        Parse one requirements line.

        Returns:
            Requirement, or None for blank and comment-only lines

        Raises:
            ValueError: if a version bound is not a valid version or the
                bounds are not in ascending order
        """
        content = line.split('#', 1)[0].strip()
        if not content:
            return None

        words = content.split()
        platforms = []
        while words and words[0].startswith('@'):
            platforms.append(words.pop(0))
        if not words:
            raise ValueError(f"requirement line names no package: {line!r}")

        package, raw_bounds = words[0], words[1:]
        try:
            bounds = tuple(Version.parse(b) for b in raw_bounds)
        except InvalidVersion as e:
            raise ValueError(f"invalid requirement for {package}: {e}") from e
        if list(bounds) != sorted(bounds):
            raise ValueError(f"invalid requirement for {package}: version bounds out of order")

        return cls(package=package, versions=VersionSet(bounds), platforms=tuple(platforms))

    def to_line(self) -> str:
        words = list(self.platforms) + [self.package] + [str(v) for v in self.versions.bounds]
        return " ".join(words)

    def __str__(self) -> str:
        return self.to_line()


def parse_requirements(lines: Union[str, Iterable[str]]) -> List[Requirement]:
    """Parse requirement lines (or a whole file's text) into Requirements."""
    if isinstance(lines, str):
        lines = lines.splitlines()
    requirements = []
    for line in lines:
        req = Requirement.parse(line)
        if req is not None:
            requirements.append(req)
    return requirements


def write_requirements(path: Union[str, Path], requirements: Iterable[Requirement]) -> None:
    """Write requirements to a file, one per line."""
    content = "".join(f"{req.to_line()}\n" for req in requirements)
    Path(path).write_text(content)
