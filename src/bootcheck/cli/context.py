"""CLI context and exit codes for bootcheck."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from bootcheck.config import BootcheckConfig

__all__ = [
    "ExitCode",
    "CLIContext",
]


class ExitCode(IntEnum):
    """Standard exit codes for bootcheck.

    - 0 when every check passed
    - 1 on the first failed check
    - 2 for invalid configuration or arguments
    - 130 for keyboard interrupt (128 + SIGINT=2)
    """

    SUCCESS = 0
    FAILURE = 1
    CONFIG_ERROR = 2
    INTERRUPTED = 130


@dataclass(frozen=True, slots=True)
class CLIContext:
    """Type-safe CLI context containing global options and configuration.

    Attributes:
        config: Loaded bootcheck configuration. None when loading failed for
            a command that does not read it.
        config_path: Path to config file (if specified via --config).
        verbosity: Verbosity level (0=default, 1=INFO, 2+=DEBUG).
        quiet: Suppress non-essential output.
    """

    config: BootcheckConfig | None
    config_path: Path | None = None
    verbosity: int = 0
    quiet: bool = False
