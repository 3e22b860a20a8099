"""bootcheck exception hierarchy.

All exceptions can be imported from this package:
    from bootcheck.exceptions import CommandNotFoundError, ConfigError
"""

from __future__ import annotations

# Base exception
from bootcheck.exceptions.base import BootcheckError

# Check exceptions
from bootcheck.exceptions.check import (
    CheckError,
    CheckFailedError,
    CommandError,
    CommandFailedError,
    CommandNotFoundError,
    MalformedVersionError,
    UnsupportedPlatformError,
    VersionMismatchError,
)

# Configuration exceptions
from bootcheck.exceptions.config import ConfigError

__all__ = [
    "BootcheckError",
    "CheckError",
    "CheckFailedError",
    "CommandError",
    "CommandFailedError",
    "CommandNotFoundError",
    "ConfigError",
    "MalformedVersionError",
    "UnsupportedPlatformError",
    "VersionMismatchError",
]
