"""Test doubles for the bootcheck collaborators.

Provides:
- RecordingPrinter / printer: captures the report line by line
- FakeProbe / fake_probe: answers existence and version questions from a dict
- FakeShell / fake_shell: records remediation commands instead of running them
"""

from __future__ import annotations

from dataclasses import dataclass, field

import pytest

from bootcheck.exceptions import CommandFailedError
from bootcheck.models import CommandResult


class RecordingPrinter:
    """Printer that keeps the report in memory.

    ``write`` appends to the current line and ``write_line`` finishes it,
    so ``lines`` reads exactly like the terminal would.
    """

    def __init__(self) -> None:
        self.lines: list[str] = [""]
        self.styles: list[str | None] = []

    def write(self, text: str) -> None:
        self.lines[-1] += text

    def write_line(self, text: str = "", *, style: str | None = None) -> None:
        self.lines[-1] += text
        self.styles.append(style)
        self.lines.append("")

    @property
    def output(self) -> str:
        return "\n".join(self.lines)


@dataclass
class FakeProbe:
    """CommandProbe backed by a mapping of command name to version output.

    Attributes:
        installed: Command name -> text its ``--version`` prints.
        failing: Commands whose ``--version`` exits non-zero.
        calls: Every probe call, in order, as (operation, name).
    """

    installed: dict[str, str] = field(default_factory=dict)
    failing: set[str] = field(default_factory=set)
    calls: list[tuple[str, str]] = field(default_factory=list)

    def exists(self, name: str) -> bool:
        self.calls.append(("exists", name))
        return name in self.installed

    def raw_version(self, name: str) -> CommandResult:
        self.calls.append(("raw_version", name))
        if name in self.failing:
            return CommandResult(returncode=1, output="unknown option --version")
        return CommandResult(returncode=0, output=self.installed.get(name, ""))


class FakeShell:
    """ShellRunner double that records commands.

    Commands listed in ``failing`` raise CommandFailedError with status 1,
    as the real runner does for a non-zero exit.
    """

    def __init__(self, failing: set[str] | None = None) -> None:
        self.commands: list[str] = []
        self.failing = failing or set()
        self.printer = None

    def sh(self, command: str, *, verbose: bool | None = None) -> bool:
        self.commands.append(command)
        if command in self.failing:
            raise CommandFailedError(command, 1)
        return True


@pytest.fixture
def printer() -> RecordingPrinter:
    """A fresh recording printer."""
    return RecordingPrinter()


@pytest.fixture
def fake_probe() -> FakeProbe:
    """A probe where node, ruby and git are installed.

    Example:
        >>> def test_missing(fake_probe):
        ...     assert not fake_probe.exists("nonexistent")
    """
    return FakeProbe(
        installed={
            "node": "v6.11.3\n",
            "ruby": "ruby 2.3.1p112 (2016-04-26 revision 54768) [x86_64-darwin16]\n",
            "git": "git version 2.39.2\n",
            "bundle": "Bundler version 1.15.4\n",
        }
    )


@pytest.fixture
def fake_shell() -> FakeShell:
    """A shell double where every command succeeds."""
    return FakeShell()
