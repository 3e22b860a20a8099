"""Host platform detection.

The platform is resolved from an OS identifier such as ``sys.platform``.
Linux hosts are refined into docker (marker file present), ubuntu
(``apt-get`` available) or generic linux. The tags are mutually exclusive:
an Ubuntu-based container is ``docker``, not ``ubuntu``.

``current_platform()`` memoizes the host's platform for the process; the
resolved value is passed explicitly to everything that needs it.
"""

from __future__ import annotations

import re
import sys
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import TYPE_CHECKING

from bootcheck.exceptions import UnsupportedPlatformError
from bootcheck.logging import get_logger

if TYPE_CHECKING:
    from bootcheck.probe import CommandProbe

__all__ = [
    "Platform",
    "DOCKERENV_PATH",
    "resolve_platform",
    "current_platform",
]

logger = get_logger(__name__)

#: Marker file docker creates at the root of every container.
DOCKERENV_PATH = Path("/.dockerenv")

WINDOWS_PATTERN = re.compile(r"mswin|msys|mingw|cygwin|bccwin|wince|emc|win32")
MACOS_PATTERN = re.compile(r"darwin|mac os")
LINUX_PATTERN = re.compile(r"linux")


class Platform(str, Enum):
    """Platform tags a check can scope a block to."""

    MACOS = "macos"
    UBUNTU = "ubuntu"
    DOCKER = "docker"
    LINUX = "linux"
    WINDOWS = "windows"


def resolve_platform(
    os_identifier: str,
    probe: CommandProbe,
    *,
    dockerenv: Path = DOCKERENV_PATH,
) -> Platform:
    """Map an OS identifier to a platform tag.

    Args:
        os_identifier: e.g. ``sys.platform`` or a ruby-style ``x86_64-darwin15``.
        probe: Used to look for ``apt-get`` on Linux hosts.
        dockerenv: Path of the docker marker file.

    Returns:
        The host's Platform.

    Raises:
        UnsupportedPlatformError: If the identifier is not recognized.
    """
    identifier = os_identifier.lower()
    if WINDOWS_PATTERN.search(identifier):
        return Platform.WINDOWS
    if MACOS_PATTERN.search(identifier):
        return Platform.MACOS
    if LINUX_PATTERN.search(identifier):
        if dockerenv.exists():
            return Platform.DOCKER
        if probe.exists("apt-get"):
            return Platform.UBUNTU
        return Platform.LINUX
    raise UnsupportedPlatformError(
        os_identifier, f"unknown os: {os_identifier!r}"
    )


@lru_cache(maxsize=1)
def current_platform() -> Platform:
    """Resolve and cache the platform of the running host.

    Raises:
        UnsupportedPlatformError: If ``sys.platform`` is not recognized.
    """
    from bootcheck.probe import ShellCommandProbe

    platform = resolve_platform(sys.platform, ShellCommandProbe())
    logger.debug("platform_resolved", platform=platform.value, os=sys.platform)
    return platform
