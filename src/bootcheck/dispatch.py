"""Platform-scoped block dispatch."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

from bootcheck.logging import get_logger
from bootcheck.models import DispatchOutcome, PlatformBlock

if TYPE_CHECKING:
    from bootcheck.platform import Platform
    from bootcheck.probe import ShellRunner

__all__ = ["PlatformDispatcher"]

logger = get_logger(__name__)


class PlatformDispatcher:
    """Run the blocks scoped to the host platform, skip the rest.

    Blocks for other platforms are never called. When several blocks match,
    each runs in order and the last one's result is kept.

    Example:
        ```python
        dispatcher = PlatformDispatcher(Platform.UBUNTU)
        outcome = dispatcher.dispatch(
            [
                PlatformBlock(Platform.MACOS, brew_install),
                PlatformBlock(Platform.UBUNTU, apt_install),
            ],
            shell,
        )
        outcome.matched  # True, only apt_install ran
        ```
    """

    def __init__(self, platform: Platform) -> None:
        """Initialize the dispatcher.

        Args:
            platform: The host platform, resolved by the caller.
        """
        self._platform = platform

    @property
    def platform(self) -> Platform:
        return self._platform

    def dispatch(
        self,
        blocks: Iterable[PlatformBlock],
        shell: ShellRunner,
    ) -> DispatchOutcome:
        """Execute the blocks that match the host platform.

        Args:
            blocks: Platform blocks in declaration order.
            shell: Shell helper handed to each executed block.

        Returns:
            DispatchOutcome recording whether any block ran and its result.
        """
        outcome = DispatchOutcome(matched=False)
        for block in blocks:
            if block.platform != self._platform:
                continue
            result = bool(block.action(shell))
            logger.debug(
                "platform_block_ran", platform=self._platform.value, result=result
            )
            outcome = DispatchOutcome(matched=True, result=result)
        return outcome
