"""
Tests for version parsing and ordering (zig_toolchain/version.py).
"""

import itertools
import random

import pytest

from zig_toolchain.version import (
    Version,
    VersionParseError,
    compare_versions,
    parse_version,
)


class TestParseVersion:
    """Tests for parse_version."""

    def test_parse_release(self):
        """Test parsing a release tag."""
        v = parse_version("0.10.1")
        assert (v.major, v.minor, v.patch) == (0, 10, 1)
        assert v.dev is False
        assert v.build == 0
        assert v.commit == ""

    def test_parse_dev(self):
        """Test parsing a dev tag."""
        v = parse_version("0.11.0-dev.1234+abc123de")
        assert (v.major, v.minor, v.patch) == (0, 11, 0)
        assert v.dev is True
        assert v.build == 1234
        assert v.commit == "abc123de"

    def test_parse_strips_whitespace(self):
        """Test surrounding whitespace is ignored."""
        assert parse_version("  0.9.0\n") == Version(0, 9, 0)

    @pytest.mark.parametrize("text", [
        "",
        "0.10",
        "0.10.1.2",
        "a.b.c",
        "0.10.x",
        "-1.0.0",
        "0.11.0-dev.1234",
        "0.11.0-dev.1234+",
        "0.11.0-dev.abc+1234",
        "0.11.0-dev+abc",
        "0.11.0-rc.1+abc",
        "0.11.0-dev.1+abc-extra",
        "v0.10.1",
    ])
    def test_parse_invalid(self, text):
        """Test malformed tags raise VersionParseError."""
        with pytest.raises(VersionParseError):
            parse_version(text)

    def test_parse_error_is_value_error(self):
        """Test VersionParseError can be caught as ValueError."""
        with pytest.raises(ValueError):
            parse_version("nope")


class TestDisplay:
    """Tests for display and tag forms."""

    @pytest.mark.parametrize("text", ["0.10.1", "1.0.0", "12.345.6789"])
    def test_release_display_round_trip(self, text):
        """Test release tags display as themselves."""
        assert str(parse_version(text)) == text

    def test_dev_display_drops_commit(self):
        """Test dev builds display as M.m.p-dev-BUILD."""
        assert str(parse_version("0.12.0-dev.100+abcdef12")) == "0.12.0-dev-100"

    def test_tag_keeps_commit(self):
        """Test the tag form preserves the full dev suffix."""
        assert parse_version("0.12.0-dev.100+abcdef12").tag == "0.12.0-dev.100+abcdef12"
        assert parse_version("0.10.1").tag == "0.10.1"


class TestEquality:
    """Tests for version equality."""

    def test_equal_releases(self):
        assert Version(1, 2, 3) == Version(1, 2, 3)

    def test_equality_ignores_commit(self):
        """Test dev builds with the same build number are equal regardless of commit."""
        a = Version(1, 2, 3, dev=True, build=7, commit="aaa")
        b = Version(1, 2, 3, dev=True, build=7, commit="bbb")
        assert a == b
        assert hash(a) == hash(b)

    def test_dev_never_equals_release(self):
        """Test a dev build is not equal to the release with the same triple."""
        assert Version(1, 2, 3, dev=True, build=0, commit="x") != Version(1, 2, 3)

    def test_different_builds_not_equal(self):
        assert Version(1, 2, 3, dev=True, build=7) != Version(1, 2, 3, dev=True, build=8)

    def test_not_equal_to_other_types(self):
        assert Version(1, 2, 3) != "1.2.3"

    def test_usable_as_dict_key(self):
        """Test equal versions collide as dict keys."""
        d = {Version(0, 12, 0, dev=True, build=5, commit="aaa"): "first"}
        assert d[Version(0, 12, 0, dev=True, build=5, commit="bbb")] == "first"


class TestOrdering:
    """Tests for the total order over versions."""

    def test_triple_ordering(self):
        assert Version(0, 9, 1) < Version(0, 10, 0)
        assert Version(0, 10, 0) < Version(0, 10, 1)
        assert Version(0, 10, 1) < Version(1, 0, 0)

    def test_dev_below_release(self):
        """Test a dev build is strictly less than the release it precedes."""
        for triple in [(0, 0, 0), (0, 11, 0), (3, 2, 1)]:
            dev = Version(*triple, dev=True, build=99999, commit="f")
            release = Version(*triple)
            assert dev < release
            assert not release < dev

    def test_dev_above_previous_release(self):
        assert Version(0, 12, 0, dev=True, build=100, commit="abcdef12") > Version(0, 10, 1)

    def test_dev_builds_by_build_number(self):
        assert Version(0, 12, 0, dev=True, build=99) < Version(0, 12, 0, dev=True, build=100)

    def test_equal_releases_not_less(self):
        assert not Version(1, 2, 3) < Version(1, 2, 3)

    def test_compare_versions(self):
        """Test compare_versions returns -1, 0, 1."""
        assert compare_versions(Version(0, 9, 0), Version(0, 10, 0)) == -1
        assert compare_versions(Version(0, 10, 0), Version(0, 10, 0)) == 0
        assert compare_versions(Version(0, 10, 0), Version(0, 9, 0)) == 1

    def test_total_order_properties(self):
        """Test trichotomy and transitivity over a mixed sample."""
        sample = [
            Version(0, 10, 0),
            Version(0, 10, 1),
            Version(0, 11, 0),
            Version(0, 11, 0, dev=True, build=1, commit="a"),
            Version(0, 11, 0, dev=True, build=2, commit="b"),
            Version(0, 11, 0, dev=True, build=2, commit="c"),
            Version(0, 12, 0, dev=True, build=100, commit="d"),
            Version(1, 0, 0),
        ]
        for a, b in itertools.product(sample, repeat=2):
            outcomes = [a < b, a == b, b < a]
            assert outcomes.count(True) == 1, (a, b)
        for a, b, c in itertools.product(sample, repeat=3):
            if a < b and b < c:
                assert a < c

    def test_sort_round_trip(self):
        """Test sorting descending then ascending gives the reverse sequence."""
        versions = [
            Version(0, 10, 1),
            Version(0, 9, 0),
            Version(0, 12, 0, dev=True, build=100, commit="abc"),
            Version(0, 12, 0),
            Version(0, 11, 0, dev=True, build=3, commit="x"),
            Version(0, 11, 0, dev=True, build=1, commit="y"),
        ]
        random.Random(42).shuffle(versions)
        descending = sorted(versions, reverse=True)
        ascending = sorted(descending)
        assert ascending == list(reversed(descending))
        assert descending[0] == Version(0, 12, 0)
        assert descending[-1] == Version(0, 9, 0)
