"""Unit tests for version parsing, normalization and comparison."""

from __future__ import annotations

import itertools

import pytest

from bootcheck.exceptions import MalformedVersionError
from bootcheck.versions import (
    Comparator,
    Version,
    VersionConstraint,
    compare,
    normalize_installed_version,
    parse_constraint,
    parse_version,
    satisfies,
)

RUBY_BANNER = "ruby 2.3.1p112 (2016-04-26 revision 54768) [x86_64-darwin16]"

SAMPLE_VERSIONS = [
    Version(0, 0, 0),
    Version(1, 2, 3),
    Version(1, 2, 4),
    Version(1, 3, 0),
    Version(2, 0, 0),
    Version(6, 11, 3),
    Version(10, 0, 0),
]


class TestParseVersion:
    """Tests for parse_version."""

    def test_parses_three_components(self) -> None:
        assert parse_version("6.11.3") == Version(6, 11, 3)

    def test_ignores_surrounding_whitespace(self) -> None:
        assert parse_version(" 1.2.3\n") == Version(1, 2, 3)

    @pytest.mark.parametrize(
        "text",
        ["", "1", "1.2", "1.2.3.4", "1.2.x", "a.b.c", "1.2.3-beta", "-1.2.3"],
    )
    def test_rejects_malformed_text(self, text: str) -> None:
        """Missing components are never filled in with zeros."""
        with pytest.raises(MalformedVersionError) as exc_info:
            parse_version(text)
        assert exc_info.value.text == text
        assert exc_info.value.fatal is True

    def test_str_round_trips(self) -> None:
        assert str(Version(6, 11, 3)) == "6.11.3"


class TestParseConstraint:
    """Tests for parse_constraint."""

    @pytest.mark.parametrize(
        ("expr", "comparator"),
        [
            ("^6.11.3", Comparator.CARET),
            ("=6.11.3", Comparator.EQ),
            (">=6.11.3", Comparator.GE),
            ("<=6.11.3", Comparator.LE),
            (">6.11.3", Comparator.GT),
            ("<6.11.3", Comparator.LT),
            ("6.11.3", Comparator.EQ),
        ],
    )
    def test_comparator_prefixes(self, expr: str, comparator: Comparator) -> None:
        constraint = parse_constraint(expr)
        assert constraint.comparator is comparator
        assert constraint.target == Version(6, 11, 3)

    def test_two_character_prefix_is_not_read_as_one(self) -> None:
        """'>=' must not parse as '>' followed by '=1.0.0'."""
        assert parse_constraint(">=1.0.0").comparator is Comparator.GE
        assert parse_constraint("<=1.0.0").comparator is Comparator.LE

    def test_surrounding_whitespace_is_ignored(self) -> None:
        assert parse_constraint("  ^1.2.3 ") == VersionConstraint(
            Comparator.CARET, Version(1, 2, 3)
        )

    @pytest.mark.parametrize("expr", ["", "^", ">=", "~1.2.3", "^1.2", ">= 1.2"])
    def test_rejects_malformed_targets(self, expr: str) -> None:
        with pytest.raises(MalformedVersionError):
            parse_constraint(expr)

    def test_str_drops_the_implicit_equals(self) -> None:
        assert str(parse_constraint("=1.2.3")) == "1.2.3"
        assert str(parse_constraint("^1.2.3")) == "^1.2.3"


class TestNormalizeInstalledVersion:
    """Tests for normalize_installed_version."""

    def test_strips_leading_v(self) -> None:
        assert normalize_installed_version("v6.11.3") == "6.11.3"

    def test_strips_whitespace_before_v(self) -> None:
        assert normalize_installed_version("v6.11.3\n") == "6.11.3"

    def test_extracts_ruby_version(self) -> None:
        assert normalize_installed_version(RUBY_BANNER) == "2.3.1"

    def test_ruby_slice_is_fixed_width(self) -> None:
        """Two-digit components do not fit the five character slice."""
        assert normalize_installed_version("ruby 10.0.0p0") == "10.0."

    def test_other_text_is_unchanged(self) -> None:
        assert normalize_installed_version("2.39.2") == "2.39.2"
        assert normalize_installed_version("git version 2.39.2") == (
            "git version 2.39.2"
        )


class TestCompare:
    """Tests for compare."""

    def test_equality(self) -> None:
        assert compare(Version(1, 2, 3), Comparator.EQ, Version(1, 2, 3))
        assert not compare(Version(1, 2, 4), Comparator.EQ, Version(1, 2, 3))

    def test_ordering_is_major_then_minor_then_patch(self) -> None:
        assert compare(Version(2, 0, 0), Comparator.GT, Version(1, 99, 99))
        assert compare(Version(1, 3, 0), Comparator.GT, Version(1, 2, 99))
        assert compare(Version(1, 2, 4), Comparator.GT, Version(1, 2, 3))
        assert compare(Version(1, 10, 0), Comparator.GT, Version(1, 9, 0))

    def test_caret_range(self) -> None:
        target = Version(6, 11, 3)
        assert compare(Version(6, 11, 3), Comparator.CARET, target)
        assert compare(Version(6, 99, 0), Comparator.CARET, target)
        assert not compare(Version(6, 11, 2), Comparator.CARET, target)
        assert not compare(Version(7, 0, 0), Comparator.CARET, target)
        assert not compare(Version(5, 99, 99), Comparator.CARET, target)

    @pytest.mark.parametrize(
        ("a", "b"), list(itertools.product(SAMPLE_VERSIONS, repeat=2))
    )
    def test_relational_operators_are_consistent(
        self, a: Version, b: Version
    ) -> None:
        assert compare(a, Comparator.GT, b) == compare(b, Comparator.LT, a)
        assert compare(a, Comparator.GE, b) == (
            compare(a, Comparator.GT, b) or a == b
        )
        assert compare(a, Comparator.LE, b) == (
            compare(a, Comparator.LT, b) or a == b
        )
        assert compare(a, Comparator.EQ, b) == (a == b)

    @pytest.mark.parametrize(
        ("a", "b"),
        [
            (Version(2, 0, 0), Version(1, 0, 0)),
            (Version(1, 2, 3), Version(1, 2, 3)),
            (Version(0, 9, 9), Version(1, 0, 0)),
        ],
    )
    def test_symbols_are_accepted(self, a: Version, b: Version) -> None:
        assert compare(a, ">", b) == compare(b, "<", a)
        assert compare(a, ">=", b) == (compare(a, ">", b) or a == b)
        assert compare(a, "<=", b) == compare(a, Comparator.LE, b)
        assert compare(a, "=", b) == (a == b)
        assert compare(a, "^", b) == compare(a, Comparator.CARET, b)

    def test_unknown_symbol(self) -> None:
        with pytest.raises(ValueError):
            compare(Version(1, 0, 0), "~>", Version(1, 0, 0))


class TestSatisfies:
    """Tests for satisfies."""

    @pytest.mark.parametrize(
        ("installed", "expected"),
        [("6.11.2", False), ("7.0.0", False), ("6.11.3", True), ("6.99.0", True)],
    )
    def test_caret_constraint(self, installed: str, expected: bool) -> None:
        assert satisfies("^6.11.3", installed) is expected

    @pytest.mark.parametrize(
        ("installed", "expected"),
        [("6.11.3", True), ("6.11.4", False), ("6.11.2", False)],
    )
    def test_bare_version_means_exact(self, installed: str, expected: bool) -> None:
        assert satisfies("6.11.3", installed) is expected

    @pytest.mark.parametrize(
        "constraint", ["^6.11.3", "6.11.3", ">=6.0.0", "<7.0.0", ">6.11.2", "<=6.11.3"]
    )
    def test_v_prefix_compares_like_bare_version(self, constraint: str) -> None:
        assert satisfies(constraint, "v6.11.3") == satisfies(constraint, "6.11.3")

    def test_ruby_banner(self) -> None:
        assert satisfies("2.3.1", RUBY_BANNER) is True
        assert satisfies("2.4.1", RUBY_BANNER) is False

    def test_descriptive_output_is_malformed(self) -> None:
        with pytest.raises(MalformedVersionError):
            satisfies(">=2.0.0", "git version 2.39.2")
