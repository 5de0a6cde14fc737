"""
Tests for requirements parsing and version sets.
"""

import pytest

from pkgmeta.domain.requirements import (
    Requirement,
    VersionSet,
    parse_requirements,
    write_requirements,
)
from pkgmeta.domain.version import Version


def V(text):
    return Version.parse(text)


class TestVersionSet:
    """Tests for VersionSet interval semantics."""

    def test_no_bounds_accepts_anything(self):
        vs = VersionSet()
        assert vs.contains(V("0.0.0-"))
        assert vs.contains(V("99.0.0"))

    def test_lower_bound_only(self):
        vs = VersionSet((V("0.3"),))
        assert not vs.contains(V("0.2.9"))
        assert vs.contains(V("0.3.0"))
        assert vs.contains(V("5.0.0"))

    def test_half_open_interval(self):
        vs = VersionSet((V("0.2"), V("0.5")))
        assert vs.contains(V("0.2.0"))
        assert vs.contains(V("0.4.9"))
        assert not vs.contains(V("0.5.0"))

    def test_multiple_intervals(self):
        vs = VersionSet((V("0.1"), V("0.2"), V("0.4")))
        assert vs.contains(V("0.1.5"))
        assert not vs.contains(V("0.3.0"))
        assert vs.contains(V("0.4.0"))

    def test_str(self):
        assert str(VersionSet((V("0.2"), V("0.5")))) == "0.2.0 0.5.0"


class TestRequirementParse:
    """Tests for Requirement.parse."""

    def test_bare_package(self):
        req = Requirement.parse("Foo")
        assert req.package == "Foo"
        assert req.versions.bounds == ()

    def test_with_bounds(self):
        req = Requirement.parse("Baz 0.2 0.5")
        assert req.versions.bounds == (V("0.2"), V("0.5"))

    def test_comment_and_blank(self):
        assert Requirement.parse("# just a comment") is None
        assert Requirement.parse("   ") is None

    def test_trailing_comment(self):
        req = Requirement.parse("Bar 0.3  # needs the new API")
        assert req.package == "Bar"
        assert req.versions.bounds == (V("0.3"),)

    def test_platform_qualifier(self):
        req = Requirement.parse("@windows WinTools 1.0")
        assert req.platforms == ("@windows",)
        assert req.package == "WinTools"
        assert req.to_line() == "@windows WinTools 1.0.0"

    def test_invalid_bound(self):
        with pytest.raises(ValueError, match="invalid requirement for Foo"):
            Requirement.parse("Foo 1.x")

    def test_unordered_bounds(self):
        with pytest.raises(ValueError, match="out of order"):
            Requirement.parse("Foo 0.5 0.2")

    def test_platform_without_package(self):
        with pytest.raises(ValueError):
            Requirement.parse("@unix")


class TestRequirementsFile:
    """Tests for reading and writing whole files."""

    def test_parse_text(self):
        text = "# deps\nFoo\nBar 0.3\n\nBaz 0.2 0.5\n"
        reqs = parse_requirements(text)
        assert [r.package for r in reqs] == ["Foo", "Bar", "Baz"]

    def test_write(self, tmp_path):
        path = tmp_path / "requires"
        write_requirements(path, parse_requirements(["Foo", "Bar 0.3"]))
        assert path.read_text() == "Foo\nBar 0.3.0\n"

    def test_write_then_parse_keeps_semantics(self, tmp_path):
        path = tmp_path / "requires"
        original = parse_requirements(["Baz 0.2 0.5", "@osx Qux"])
        write_requirements(path, original)
        assert parse_requirements(path.read_text()) == original
