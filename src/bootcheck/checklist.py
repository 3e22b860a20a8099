"""Fluent API for declaring checks.

A ``Checklist`` collects checks in declaration order. ``check()`` returns a
``CheckBuilder`` that can be refined with a custom action or with
platform-scoped remediation blocks before the list is built into immutable
check specifications.

Example:
    ```python
    checklist = Checklist()
    checklist.check("node", version="^6.11.3", help="brew install node")
    checklist.check("postgres").osx(
        shell_action("brew install postgresql")
    ).ubuntu(
        shell_action("sudo apt-get install -y postgresql")
    )
    checklist.check_bundler()
    checklist.bundle()

    bootstrap(checklist)
    ```
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING, Self

from bootcheck.models import (
    CheckSpec,
    ExistenceCheck,
    PlatformBlock,
    PlatformCheck,
    PredicateCheck,
    VersionCheck,
)
from bootcheck.platform import Platform

if TYPE_CHECKING:
    from bootcheck.models import Action
    from bootcheck.probe import ShellRunner

__all__ = ["Checklist", "CheckBuilder", "ShellAction", "shell_action"]

BUNDLER_INSTALL = "gem install bundler --conservative &>/dev/null"

BUNDLE_INSTALL = "bundle check &>/dev/null || bundle install &>/dev/null"


@dataclass(frozen=True, slots=True)
class ShellAction:
    """An action that runs shell command lines in order.

    Each command must exit 0; the first failure raises ``CommandFailedError``
    through the shell helper and fails the check.

    Attributes:
        commands: Command lines to run.
        verbose: Echo each command before running it. None follows the
            shell runner's setting.
    """

    commands: tuple[str, ...]
    verbose: bool | None = None

    def __call__(self, shell: ShellRunner) -> bool:
        for command in self.commands:
            shell.sh(command, verbose=self.verbose)
        return True


def shell_action(*commands: str, verbose: bool | None = None) -> ShellAction:
    """Build an action that runs the given command lines.

    Args:
        *commands: Command lines, run in order.
        verbose: Echo each command before running it. None follows the
            shell runner's setting.

    Returns:
        A ShellAction.
    """
    if not commands:
        raise ValueError("shell_action needs at least one command")
    return ShellAction(commands=tuple(commands), verbose=verbose)


class CheckBuilder:
    """Accumulates one check's options and builds its specification.

    The kind of check follows from what was declared:

    - platform blocks -> PlatformCheck (a custom action becomes its prelude)
    - a custom action -> PredicateCheck
    - a version -> VersionCheck
    - nothing else -> ExistenceCheck
    """

    def __init__(
        self,
        name: str,
        help: str | None = None,
        *,
        version: str | None = None,
        version_pattern: str | None = None,
        action: Action | None = None,
    ) -> None:
        if not name:
            raise ValueError("Check name cannot be empty")
        if version_pattern is not None and version is None:
            raise ValueError(f"Check '{name}': version_pattern requires a version")
        if version_pattern is not None:
            try:
                re.compile(version_pattern)
            except re.error as e:
                raise ValueError(
                    f"Check '{name}': invalid version_pattern: {e}"
                ) from e
        self.name = name
        self.help = help
        self.version = version
        self.version_pattern = version_pattern
        self._action = action
        self._blocks: list[PlatformBlock] = []

    def run(self, action: Action) -> Self:
        """Decide the check with a custom action instead of probing."""
        self._action = action
        return self

    def on(self, platform: Platform, action: Action) -> Self:
        """Add a block that only runs when the host is ``platform``."""
        self._blocks.append(PlatformBlock(platform=platform, action=action))
        return self

    def osx(self, action: Action) -> Self:
        return self.on(Platform.MACOS, action)

    def ubuntu(self, action: Action) -> Self:
        return self.on(Platform.UBUNTU, action)

    def docker(self, action: Action) -> Self:
        return self.on(Platform.DOCKER, action)

    def linux(self, action: Action) -> Self:
        return self.on(Platform.LINUX, action)

    def windows(self, action: Action) -> Self:
        return self.on(Platform.WINDOWS, action)

    def build(self) -> CheckSpec:
        """Build the immutable check specification.

        Raises:
            ValueError: If a version is combined with custom or platform steps.
        """
        if self.version is not None and (self._action or self._blocks):
            raise ValueError(
                f"Check '{self.name}': a version requirement cannot be combined "
                "with custom or platform steps"
            )
        if self._blocks:
            return PlatformCheck(
                name=self.name,
                blocks=tuple(self._blocks),
                help=self.help,
                prelude=self._action,
            )
        if self._action is not None:
            return PredicateCheck(name=self.name, action=self._action, help=self.help)
        if self.version is not None:
            return VersionCheck(
                name=self.name,
                version=self.version,
                help=self.help,
                version_pattern=self.version_pattern,
            )
        return ExistenceCheck(name=self.name, help=self.help)


class Checklist:
    """Ordered collection of checks for one bootstrap run."""

    def __init__(self) -> None:
        self._builders: list[CheckBuilder] = []

    def check(
        self,
        name: str,
        help: str | None = None,
        *,
        version: str | None = None,
        version_pattern: str | None = None,
        run: Action | None = None,
    ) -> CheckBuilder:
        """Declare a check and return its builder for further refinement.

        Args:
            name: Command to probe, and the label shown in the report.
            help: Printed when the check fails.
            version: Constraint the command's version must satisfy.
            version_pattern: Regular expression that extracts the version
                from descriptive ``--version`` output.
            run: Custom action deciding the check.

        Returns:
            The CheckBuilder for this check.
        """
        builder = CheckBuilder(
            name,
            help,
            version=version,
            version_pattern=version_pattern,
            action=run,
        )
        self._builders.append(builder)
        return builder

    def check_bundler(self) -> CheckBuilder:
        """Ensure bundler is installed, installing it with gem if needed."""
        return self.check("bundler", run=shell_action(BUNDLER_INSTALL))

    def bundle(self) -> CheckBuilder:
        """Ensure the project's gems are installed."""
        return self.check("gems", run=shell_action(BUNDLE_INSTALL))

    def build(self) -> tuple[CheckSpec, ...]:
        """Build every declared check, in declaration order."""
        return tuple(builder.build() for builder in self._builders)

    def __iter__(self) -> Iterator[CheckSpec]:
        return iter(self.build())

    def __len__(self) -> int:
        return len(self._builders)
