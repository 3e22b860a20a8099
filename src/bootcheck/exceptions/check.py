"""Check exception hierarchy.

Every exception in this module is caught at the check boundary by
``CheckEvaluator`` and turned into a failed ``CheckResult``. None of them
escapes a single check.

``fatal`` marks the kinds that indicate a configuration problem rather than
a missing or outdated tool. They still fail the check, but the report labels
them differently.
"""

from __future__ import annotations

from bootcheck.exceptions.base import BootcheckError

__all__ = [
    "CheckError",
    "CommandError",
    "CommandNotFoundError",
    "VersionMismatchError",
    "CommandFailedError",
    "CheckFailedError",
    "MalformedVersionError",
    "UnsupportedPlatformError",
]


class CheckError(BootcheckError):
    """Base exception for errors raised while evaluating a check.

    Attributes:
        message: Human-readable error message.
        fatal: True when the error is a configuration problem.
    """

    fatal: bool = False


class CommandError(CheckError):
    """A probed or executed command did not behave as required.

    Attributes:
        command: The command (or command line) involved.
    """

    def __init__(self, command: str, message: str | None = None) -> None:
        """Initialize the CommandError.

        Args:
            command: The command involved.
            message: Optional message. Defaults to a generic description.
        """
        self.command = command
        super().__init__(message or f"command `{command}` failed")


class CommandNotFoundError(CommandError):
    """The command does not exist on this host."""

    def __init__(self, command: str) -> None:
        super().__init__(command, f"command `{command}` not found")


class VersionMismatchError(CommandError):
    """The installed version does not satisfy the required constraint.

    Attributes:
        command: The probed command.
        expected_version: The constraint expression, e.g. "^6.11.3".
        actual_version: The raw version text reported by the command.
    """

    def __init__(
        self,
        command: str,
        expected_version: str,
        actual_version: str,
    ) -> None:
        self.expected_version = expected_version
        self.actual_version = actual_version
        super().__init__(
            command,
            f"command `{command}` has incorrect version. "
            f"I expected {expected_version}, but you have {actual_version}",
        )


class CommandFailedError(CommandError):
    """A shell command exited with a non-zero status.

    Attributes:
        command: The command line that was run.
        status: Its exit status.
    """

    def __init__(self, command: str, status: int) -> None:
        self.status = status
        super().__init__(command, f"Command `{command}` failed with status {status}")


class CheckFailedError(CheckError):
    """A custom check action returned False.

    Attributes:
        command: Name of the check whose action failed.
    """

    def __init__(self, command: str) -> None:
        self.command = command
        super().__init__(f"check `{command}` did not pass")


class MalformedVersionError(CheckError):
    """Version text could not be decomposed into major.minor.patch integers.

    Attributes:
        text: The offending version text.
    """

    fatal = True

    def __init__(self, text: str) -> None:
        self.text = text
        super().__init__(
            f"cannot parse version {text!r}: expected MAJOR.MINOR.PATCH integers"
        )


class UnsupportedPlatformError(CheckError):
    """No platform block matched the host, or the host OS is unrecognized.

    Attributes:
        platform: The host platform tag or the raw OS identifier.
    """

    fatal = True

    def __init__(self, platform: str, message: str | None = None) -> None:
        self.platform = platform
        super().__init__(message or f"unsupported platform: {platform}")
