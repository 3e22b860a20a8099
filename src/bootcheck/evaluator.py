"""Check evaluation.

``CheckEvaluator`` interprets a single check specification and returns a
``CheckResult``. It never prints and never exits: check errors are caught
here and reported through the result, so one failing check cannot raise
past its own evaluation.
"""

from __future__ import annotations

import re
import time
from typing import TYPE_CHECKING

from bootcheck.dispatch import PlatformDispatcher
from bootcheck.exceptions import (
    CheckError,
    CheckFailedError,
    CommandFailedError,
    CommandNotFoundError,
    UnsupportedPlatformError,
    VersionMismatchError,
)
from bootcheck.logging import get_logger
from bootcheck.models import (
    CheckResult,
    CheckSpec,
    ExistenceCheck,
    PlatformCheck,
    PredicateCheck,
    VersionCheck,
)
from bootcheck.versions import (
    normalize_installed_version,
    parse_constraint,
    parse_version,
)

if TYPE_CHECKING:
    from bootcheck.platform import Platform
    from bootcheck.probe import CommandProbe, ShellRunner

__all__ = ["CheckEvaluator"]

logger = get_logger(__name__)


class CheckEvaluator:
    """Evaluate check specifications against the host.

    Attributes:
        probe: Answers existence and version questions.
        shell: Handed to custom and platform actions.
        platform: The host platform.

    Example:
        ```python
        evaluator = CheckEvaluator(ShellCommandProbe(), ShellRunner(), Platform.MACOS)
        result = evaluator.evaluate(VersionCheck("node", "^6.11.3"))
        if not result.passed:
            print(result.message)
        ```
    """

    def __init__(
        self,
        probe: CommandProbe,
        shell: ShellRunner,
        platform: Platform,
    ) -> None:
        self.probe = probe
        self.shell = shell
        self.platform = platform
        self._dispatcher = PlatformDispatcher(platform)

    def evaluate(self, spec: CheckSpec) -> CheckResult:
        """Run one check.

        Args:
            spec: The check to run.

        Returns:
            CheckResult. Check errors are captured in ``error``; any other
            exception propagates.
        """
        log = logger.bind(check=spec.name)
        log.debug("check_started", kind=type(spec).__name__)
        start = time.monotonic()

        try:
            message = self._run(spec)
        except CheckError as e:
            duration_ms = int((time.monotonic() - start) * 1000)
            log.info(
                "check_failed",
                error=type(e).__name__,
                reason=e.message,
                fatal=e.fatal,
            )
            return CheckResult(
                name=spec.name,
                label=spec.label,
                passed=False,
                message=e.message,
                error=e,
                duration_ms=duration_ms,
            )

        duration_ms = int((time.monotonic() - start) * 1000)
        log.debug("check_passed", duration_ms=duration_ms)
        return CheckResult(
            name=spec.name,
            label=spec.label,
            passed=True,
            message=message,
            duration_ms=duration_ms,
        )

    def _run(self, spec: CheckSpec) -> str:
        if isinstance(spec, VersionCheck):
            return self._check_version(spec)
        if isinstance(spec, ExistenceCheck):
            self._require_installed(spec.name)
            return f"{spec.name} found"
        if isinstance(spec, PredicateCheck):
            if not spec.action(self.shell):
                raise CheckFailedError(spec.name)
            return f"{spec.name} passed"
        if isinstance(spec, PlatformCheck):
            return self._check_platform(spec)
        raise TypeError(f"Unknown check specification: {spec!r}")

    def _require_installed(self, name: str) -> None:
        if not self.probe.exists(name):
            raise CommandNotFoundError(name)

    def _check_version(self, spec: VersionCheck) -> str:
        self._require_installed(spec.name)
        constraint = parse_constraint(spec.version)

        probed = self.probe.raw_version(spec.name)
        if not probed.success:
            raise CommandFailedError(f"{spec.name} --version", probed.returncode)

        raw = probed.output.strip()
        text = _extract(raw, spec.version_pattern) if spec.version_pattern else raw
        installed = parse_version(normalize_installed_version(text))

        if not constraint.is_satisfied_by(installed):
            raise VersionMismatchError(spec.name, spec.version, raw)
        return f"{spec.name} {installed} satisfies {constraint}"

    def _check_platform(self, spec: PlatformCheck) -> str:
        if spec.prelude is not None and not spec.prelude(self.shell):
            raise CheckFailedError(spec.name)

        outcome = self._dispatcher.dispatch(spec.blocks, self.shell)
        if not outcome.matched:
            raise UnsupportedPlatformError(
                self.platform.value,
                f"check `{spec.name}` has no steps for platform "
                f"{self.platform.value}",
            )
        if not outcome.result:
            raise CheckFailedError(spec.name)
        return f"{spec.name} passed on {self.platform.value}"


def _extract(text: str, pattern: str) -> str:
    """Cut the version out of descriptive output with a caller's pattern.

    Returns the text unchanged when nothing matches, leaving the parse step
    to reject it. An unmatched optional first group falls back to the whole
    match.
    """
    match = re.search(pattern, text)
    if match is None:
        return text
    if match.groups() and match.group(1) is not None:
        return match.group(1)
    return match.group(0)
