"""Command probes and the remediation shell helper.

``CommandProbe`` is the seam the evaluator depends on to ask whether a
command exists and what version it reports. ``ShellCommandProbe`` answers
through bash and short-lived subprocesses; tests substitute their own.

``ShellRunner`` runs remediation commands for check actions. A non-zero exit
raises ``CommandFailedError`` so an action can simply chain commands.
"""

from __future__ import annotations

import shlex
import subprocess
import time
from collections.abc import Sequence
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from bootcheck.exceptions import CommandFailedError
from bootcheck.logging import get_logger
from bootcheck.models import CommandResult

if TYPE_CHECKING:
    from bootcheck.printer import Printer

__all__ = [
    "CommandProbe",
    "ShellCommandProbe",
    "ShellRunner",
    "run_command",
]

logger = get_logger(__name__)

#: Shell used to resolve commands and run remediation command lines.
SHELL = "bash"


@runtime_checkable
class CommandProbe(Protocol):
    """Answers questions about commands installed on the host."""

    def exists(self, name: str) -> bool:
        """Return True if ``name`` resolves to a command."""
        ...

    def raw_version(self, name: str) -> CommandResult:
        """Run ``name --version`` and return its combined output and status."""
        ...


def run_command(
    command: Sequence[str],
    *,
    timeout: float | None = None,
) -> CommandResult:
    """Run a command, capturing stdout and stderr together.

    Args:
        command: Command and arguments (no shell expansion).
        timeout: Seconds before the command is killed. None waits forever.

    Returns:
        CommandResult. A missing executable yields returncode 127 and a
        permission problem 126, mirroring the shell.
    """
    start = time.monotonic()
    try:
        completed = subprocess.run(
            list(command),
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            errors="replace",
            timeout=timeout,
        )
        returncode = completed.returncode
        output = completed.stdout or ""
        timed_out = False
    except subprocess.TimeoutExpired as e:
        returncode = -1
        raw = e.stdout or b""
        output = raw.decode("utf-8", errors="replace") if isinstance(raw, bytes) else raw
        timed_out = True
    except FileNotFoundError:
        returncode = 127
        output = f"Command not found: {command[0]}"
        timed_out = False
    except PermissionError:
        returncode = 126
        output = f"Permission denied: {command[0]}"
        timed_out = False

    return CommandResult(
        returncode=returncode,
        output=output,
        duration_ms=int((time.monotonic() - start) * 1000),
        timed_out=timed_out,
    )


class ShellCommandProbe:
    """Probe commands by shelling out.

    Existence uses bash's ``type`` so aliases, functions, and builtins
    count as installed, the same way an interactive shell would see them.

    Example:
        ```python
        probe = ShellCommandProbe()
        if probe.exists("node"):
            print(probe.raw_version("node").output)
        ```
    """

    def __init__(self, timeout: float | None = None) -> None:
        """Initialize the probe.

        Args:
            timeout: Seconds allowed per probe. None waits forever.
        """
        self._timeout = timeout

    def exists(self, name: str) -> bool:
        result = run_command(
            [SHELL, "-c", f"type {shlex.quote(name)}"], timeout=self._timeout
        )
        logger.debug("probe_exists", command=name, found=result.success)
        return result.success

    def raw_version(self, name: str) -> CommandResult:
        result = run_command([name, "--version"], timeout=self._timeout)
        logger.debug(
            "probe_version",
            command=name,
            returncode=result.returncode,
            duration_ms=result.duration_ms,
        )
        return result


class ShellRunner:
    """Run remediation command lines through bash.

    Output is not captured: the command talks to the terminal directly, as
    an installer would.

    Attributes:
        printer: Used to echo commands when ``verbose`` is requested.
    """

    def __init__(
        self,
        printer: Printer | None = None,
        *,
        verbose: bool = False,
        timeout: float | None = None,
    ) -> None:
        """Initialize the ShellRunner.

        Args:
            printer: Where verbose commands are echoed. None disables echo.
            verbose: Echo every command before running it.
            timeout: Seconds allowed per command. None waits forever.
        """
        self.printer = printer
        self._verbose = verbose
        self._timeout = timeout

    def sh(self, command: str, *, verbose: bool | None = None) -> bool:
        """Run a shell command line.

        Args:
            command: The command line, with shell syntax allowed.
            verbose: Echo the command first. Defaults to the runner's setting.

        Returns:
            True when the command exits with status 0.

        Raises:
            CommandFailedError: If the command exits non-zero or times out.
        """
        echo = self._verbose if verbose is None else verbose
        if echo and self.printer is not None:
            self.printer.write_line(command)

        logger.debug("shell_command_started", command=command)
        try:
            completed = subprocess.run(
                [SHELL, "-c", command], timeout=self._timeout, check=False
            )
        except subprocess.TimeoutExpired as e:
            raise CommandFailedError(command, -1) from e
        except FileNotFoundError as e:
            raise CommandFailedError(command, 127) from e

        if completed.returncode != 0:
            logger.info(
                "shell_command_failed", command=command, status=completed.returncode
            )
            raise CommandFailedError(command, completed.returncode)
        return True
