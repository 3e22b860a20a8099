"""Version constraint parsing and comparison.

Pure functions, no I/O. A constraint expression is an optional comparator
prefix followed by a ``MAJOR.MINOR.PATCH`` target:

===========  ================================================
``^1.2.3``   same major version, at least 1.2.3 (``<2.0.0``)
``=1.2.3``   exactly 1.2.3 (a bare ``1.2.3`` means the same)
``>1.2.3``   strictly newer
``>=1.2.3``  newer or equal
``<1.2.3``   strictly older
``<=1.2.3``  older or equal
===========  ================================================

Example:
    >>> satisfies("^6.11.3", "v6.12.0")
    True
    >>> satisfies("2.3.1", "ruby 2.3.1p112 (2016-04-26 revision 54768)")
    True
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple

from bootcheck.exceptions import MalformedVersionError

__all__ = [
    "Comparator",
    "Version",
    "VersionConstraint",
    "parse_version",
    "parse_constraint",
    "normalize_installed_version",
    "compare",
    "satisfies",
]

#: Exactly three dot-separated non-negative integers, nothing else.
VERSION_PATTERN = re.compile(r"^(\d+)\.(\d+)\.(\d+)$")

#: Length of the ``X.Y.Z`` slice taken from ``ruby --version`` output.
RUBY_VERSION_LENGTH = 5

RUBY_PREFIX = "ruby "


class Comparator(str, Enum):
    """Relational operator governing version satisfaction."""

    CARET = "^"
    EQ = "="
    GT = ">"
    GE = ">="
    LT = "<"
    LE = "<="


# Two-character comparators come first so ">=" is never read as ">".
_PREFIX_ORDER: tuple[Comparator, ...] = (
    Comparator.CARET,
    Comparator.EQ,
    Comparator.GE,
    Comparator.LE,
    Comparator.GT,
    Comparator.LT,
)


class Version(NamedTuple):
    """A semantic version; tuple order is version order."""

    major: int
    minor: int
    patch: int

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


@dataclass(frozen=True, slots=True)
class VersionConstraint:
    """A comparator plus the target version it applies to.

    Attributes:
        comparator: The relational operator.
        target: The version the installed version is compared against.
    """

    comparator: Comparator
    target: Version

    def __str__(self) -> str:
        prefix = "" if self.comparator is Comparator.EQ else self.comparator.value
        return f"{prefix}{self.target}"

    def is_satisfied_by(self, installed: Version) -> bool:
        """Return True if ``installed`` satisfies this constraint."""
        return compare(installed, self.comparator, self.target)


def parse_version(text: str) -> Version:
    """Parse ``MAJOR.MINOR.PATCH`` into a Version.

    Missing components are never filled in with zeros.

    Args:
        text: The version text.

    Returns:
        The parsed Version.

    Raises:
        MalformedVersionError: If the text is not three integer components.
    """
    match = VERSION_PATTERN.match(text.strip())
    if match is None:
        raise MalformedVersionError(text)
    major, minor, patch = (int(part) for part in match.groups())
    return Version(major, minor, patch)


def parse_constraint(expr: str) -> VersionConstraint:
    """Parse a constraint expression such as ``"^6.11.3"`` or ``">=2.0.0"``.

    Args:
        expr: The constraint expression. A bare version means exact match.

    Returns:
        The parsed VersionConstraint.

    Raises:
        MalformedVersionError: If the target version cannot be parsed.
    """
    text = expr.strip()
    for comparator in _PREFIX_ORDER:
        if text.startswith(comparator.value):
            return VersionConstraint(
                comparator, parse_version(text[len(comparator.value) :])
            )
    return VersionConstraint(Comparator.EQ, parse_version(text))


def normalize_installed_version(raw: str) -> str:
    """Reduce raw ``--version`` output to a bare version string.

    Handles two vendor formats: a leading ``v`` (``v6.11.3``) and the ruby
    banner (``ruby 2.3.1p112 (...)``), from which exactly five characters
    after ``"ruby "`` are taken. Anything else is returned trimmed but
    otherwise untouched.

    Args:
        raw: Text reported by the probed command.

    Returns:
        The normalized version text (not yet validated).
    """
    text = raw.strip()
    if text.startswith("v"):
        return text[1:]
    if "ruby" in text:
        # "ruby 10.0.0" yields "10.0." and fails to parse.
        after = text.split(RUBY_PREFIX, 1)[-1]
        return after[:RUBY_VERSION_LENGTH]
    return text


def compare(
    installed: Version, comparator: Comparator | str, target: Version
) -> bool:
    """Compare two versions under a comparator.

    Args:
        installed: The installed version.
        comparator: The relational operator, as a Comparator or its symbol
            such as ``">="``.
        target: The version required by the constraint.

    Returns:
        True if ``installed <comparator> target`` holds.

    Raises:
        ValueError: If the comparator symbol is unknown.
    """
    comparator = Comparator(comparator)
    if comparator is Comparator.EQ:
        return installed == target
    if comparator is Comparator.GT:
        return installed > target
    if comparator is Comparator.GE:
        return installed >= target
    if comparator is Comparator.LT:
        return installed < target
    if comparator is Comparator.LE:
        return installed <= target
    if comparator is Comparator.CARET:
        upper = Version(target.major + 1, 0, 0)
        return target <= installed < upper
    raise ValueError(f"Unknown comparator: {comparator!r}")


def satisfies(constraint: str, installed: str) -> bool:
    """Decide whether raw installed-version text satisfies a constraint.

    Args:
        constraint: Constraint expression, e.g. ``"^6.11.3"``.
        installed: Raw version text, e.g. ``"v6.11.3"``.

    Returns:
        True if satisfied.

    Raises:
        MalformedVersionError: If either side cannot be parsed.
    """
    parsed = parse_constraint(constraint)
    return parsed.is_satisfied_by(
        parse_version(normalize_installed_version(installed))
    )
