"""Data models for checks, probes, and results.

This module defines immutable, frozen dataclasses for:
- Command execution results (CommandResult)
- Check specifications, one variant per kind of check (CheckSpec)
- Platform-scoped remediation blocks and their dispatch outcome
- Per-check and per-run results (CheckResult, RunResult)

A check specification is one of four variants:

- ExistenceCheck: the command must exist
- VersionCheck: the command must exist and report a satisfying version
- PredicateCheck: a caller-supplied action decides
- PlatformCheck: the action for the host platform decides
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, TypeAlias

if TYPE_CHECKING:
    from bootcheck.exceptions import CheckError
    from bootcheck.platform import Platform
    from bootcheck.probe import ShellRunner

__all__ = [
    "Action",
    "CommandResult",
    "ExistenceCheck",
    "VersionCheck",
    "PredicateCheck",
    "PlatformBlock",
    "PlatformCheck",
    "CheckSpec",
    "DispatchOutcome",
    "CheckResult",
    "RunResult",
    "format_label",
]

#: A remediation or verification block. Receives the shell helper and
#: returns whether the check it belongs to passed.
Action: TypeAlias = "Callable[[ShellRunner], bool]"


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Result of executing a single command.

    Attributes:
        returncode: Exit code from the command (0 = success).
        output: Combined stdout and stderr.
        duration_ms: Execution time in milliseconds.
        timed_out: True if the command exceeded its timeout limit.
    """

    returncode: int
    output: str
    duration_ms: int = 0
    timed_out: bool = False

    @property
    def success(self) -> bool:
        """True if command completed successfully (returncode 0, no timeout)."""
        return self.returncode == 0 and not self.timed_out


@dataclass(frozen=True, slots=True)
class ExistenceCheck:
    """The command must be resolvable on this host.

    Attributes:
        name: Command name, also the check's label.
        help: Text printed when the check fails.
    """

    name: str
    help: str | None = None

    @property
    def label(self) -> str:
        return format_label(self.name)


@dataclass(frozen=True, slots=True)
class VersionCheck:
    """The command must exist and its ``--version`` must satisfy a constraint.

    Attributes:
        name: Command name, also the check's label.
        version: Constraint expression, e.g. ``"^6.11.3"``.
        help: Text printed when the check fails.
        version_pattern: Optional regular expression applied to the raw
            version output before normalization; its first group (or the
            whole match when it has none) is used.
    """

    name: str
    version: str
    help: str | None = None
    version_pattern: str | None = None

    @property
    def label(self) -> str:
        return format_label(self.name, self.version)


@dataclass(frozen=True, slots=True)
class PredicateCheck:
    """A caller-supplied action decides the outcome.

    Attributes:
        name: Check name.
        action: Callable returning True when the check passes.
        help: Text printed when the check fails.
    """

    name: str
    action: Action
    help: str | None = None

    @property
    def label(self) -> str:
        return format_label(self.name)


@dataclass(frozen=True, slots=True)
class PlatformBlock:
    """An action that only runs when the host is a given platform.

    Attributes:
        platform: Platform the block is scoped to.
        action: Callable run on that platform only.
    """

    platform: Platform
    action: Action


@dataclass(frozen=True, slots=True)
class PlatformCheck:
    """The block scoped to the host platform decides the outcome.

    A host with no matching block fails the check as an unsupported platform.

    Attributes:
        name: Check name.
        blocks: Platform blocks in declaration order.
        help: Text printed when the check fails.
        prelude: Optional action run before dispatch on every platform;
            returning False fails the check without dispatching.
    """

    name: str
    blocks: tuple[PlatformBlock, ...]
    help: str | None = None
    prelude: Action | None = None

    @property
    def label(self) -> str:
        return format_label(self.name)


CheckSpec: TypeAlias = ExistenceCheck | VersionCheck | PredicateCheck | PlatformCheck


@dataclass(frozen=True, slots=True)
class DispatchOutcome:
    """What happened when platform blocks were dispatched.

    Attributes:
        matched: True if any block for the host platform ran.
        result: The last executed block's return value (False if none ran).
    """

    matched: bool
    result: bool = False

    @property
    def passed(self) -> bool:
        return self.matched and self.result


@dataclass(frozen=True, slots=True)
class CheckResult:
    """Outcome of evaluating one check.

    Attributes:
        name: Check name.
        label: The label printed for the check, without padding.
        passed: Whether the check passed.
        message: Human-readable status or error description.
        error: The error that failed the check, if any.
        duration_ms: How long evaluation took.
    """

    name: str
    label: str
    passed: bool
    message: str = ""
    error: CheckError | None = None
    duration_ms: int = 0

    @property
    def fatal(self) -> bool:
        """True if the check failed because of a configuration problem."""
        return self.error is not None and self.error.fatal


@dataclass(frozen=True, slots=True)
class RunResult:
    """Outcome of a bootstrap run.

    Evaluation stops at the first failure, so ``results`` holds every check
    up to and including the failed one.

    Attributes:
        results: Results in evaluation order.
    """

    results: tuple[CheckResult, ...] = field(default_factory=tuple)

    @property
    def success(self) -> bool:
        return all(result.passed for result in self.results)

    @property
    def failed(self) -> CheckResult | None:
        """The check that halted the run, if any."""
        for result in self.results:
            if not result.passed:
                return result
        return None


def format_label(name: str, version: str | None = None) -> str:
    """Build a check label such as ``"node ^6.11.3:"``.

    Args:
        name: Check name.
        version: Optional constraint expression.

    Returns:
        The unpadded label text.
    """
    return " ".join(part for part in (name, version) if part) + ":"
