"""
Tests for the Version domain object.
"""

import pytest

from pkgmeta.domain.version import Version, InvalidVersion


class TestVersionParse:
    """Tests for Version.parse."""

    def test_full_version(self):
        v = Version.parse("1.2.3")
        assert (v.major, v.minor, v.patch) == (1, 2, 3)
        assert v.prerelease == ()
        assert v.build == ()

    def test_short_forms_fill_zeros(self):
        assert Version.parse("1") == Version(1, 0, 0)
        assert Version.parse("0.4") == Version(0, 4, 0)

    def test_leading_v(self):
        assert Version.parse("v2.0.1") == Version(2, 0, 1)

    def test_prerelease_and_build(self):
        v = Version.parse("2.1.0-rc.1+build.7")
        assert v.prerelease == ("rc", 1)
        assert v.build == ("build", 7)

    def test_empty_prerelease_placeholder(self):
        """A trailing dash is one empty prerelease identifier."""
        v = Version.parse("1.0.0-")
        assert v.prerelease == ("",)
        assert str(v) == "1.0.0-"

    def test_empty_build_placeholder(self):
        v = Version.parse("1.0.0+")
        assert v.build == ("",)
        assert str(v) == "1.0.0+"

    @pytest.mark.parametrize("text", ["", "abc", "1.2.3.4", "1..2", "1.2.3-+", "1.2.3-a..b"])
    def test_invalid(self, text):
        with pytest.raises(InvalidVersion):
            Version.parse(text)
        assert not Version.is_valid(text)

    def test_invalid_is_value_error(self):
        with pytest.raises(ValueError):
            Version.parse("not-a-version")


class TestVersionTags:
    """Tests for tag name conversion."""

    def test_tag_name(self):
        assert Version(1, 2, 3).tag_name == "v1.2.3"

    def test_from_tag(self):
        assert Version.from_tag("v0.3.0") == Version(0, 3, 0)

    def test_from_tag_requires_prefix(self):
        assert Version.from_tag("0.3.0") is None

    def test_from_tag_ignores_other_tags(self):
        assert Version.from_tag("release-candidate") is None
        assert Version.from_tag("vnext") is None


class TestVersionOrdering:
    """Tests for total ordering."""

    def test_release_triple(self):
        assert Version.parse("1.2.3") < Version.parse("1.10.0")
        assert Version.parse("0.9.9") < Version.parse("1.0.0")

    def test_prerelease_before_release(self):
        assert Version.parse("1.0.0-rc1") < Version.parse("1.0.0")

    def test_build_after_release(self):
        assert Version.parse("1.0.0") < Version.parse("1.0.0+b1")
        assert Version.parse("1.0.0+b1") < Version.parse("1.0.1-")

    def test_empty_prerelease_is_lowest(self):
        assert Version.parse("1.0.0-") < Version.parse("1.0.0-0")
        assert Version.parse("1.0.0-0") < Version.parse("1.0.0-alpha")

    def test_numeric_identifiers_compare_numerically(self):
        assert Version.parse("1.0.0-rc.2") < Version.parse("1.0.0-rc.10")

    def test_shorter_prerelease_first(self):
        assert Version.parse("1.0.0-rc") < Version.parse("1.0.0-rc.1")

    def test_sorting(self):
        texts = ["1.0.0", "1.0.0-", "0.1.0", "1.0.0+", "1.0.0-beta"]
        ordered = [str(v) for v in sorted(Version.parse(t) for t in texts)]
        assert ordered == ["0.1.0", "1.0.0-", "1.0.0-beta", "1.0.0", "1.0.0+"]


class TestVersionArithmetic:
    """Tests for release arithmetic."""

    def test_next_patch(self):
        assert Version(1, 2, 3).next_patch() == Version(1, 2, 4)

    def test_next_minor_resets_patch(self):
        assert Version(1, 2, 3).next_minor() == Version(1, 3, 0)

    def test_next_major_resets_minor(self):
        assert Version(1, 2, 3).next_major() == Version(2, 0, 0)

    def test_prerelease_advances_to_own_release(self):
        v = Version.parse("2.0.0-rc1")
        assert v.next_patch() == Version(2, 0, 0)
        assert v.next_minor() == Version(2, 0, 0)
        assert v.next_major() == Version(2, 0, 0)

    def test_prerelease_of_patch_release(self):
        v = Version.parse("1.2.3-")
        assert v.next_patch() == Version(1, 2, 3)
        assert v.next_minor() == Version(1, 3, 0)

    def test_lower_bound(self):
        assert Version(1, 2, 0).lower_bound() == Version.parse("1.2.0-")

    def test_this_release(self):
        v = Version.parse("1.2.3-rc+b")
        assert v.this_patch() == Version(1, 2, 3)
        assert v.this_minor() == Version(1, 2, 0)
        assert v.this_major() == Version(1, 0, 0)
