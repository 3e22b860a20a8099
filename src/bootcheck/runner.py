"""Bootstrap runner.

``Bootstrapper`` runs checks strictly in declaration order and writes the
report: each check's label, then a success or failure glyph on the same
line. The first failure is followed by its error and help text and ends the
run; later checks are not evaluated.

``bootstrap()`` is the top-level entry point for a bootstrap script. It is
the only place, apart from the CLI, that ends the process.
"""

from __future__ import annotations

import sys
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Any

from bootcheck.cli.context import ExitCode
from bootcheck.evaluator import CheckEvaluator
from bootcheck.exceptions import UnsupportedPlatformError
from bootcheck.logging import bind_context, clear_context, get_logger
from bootcheck.models import CheckResult, CheckSpec, RunResult
from bootcheck.platform import current_platform
from bootcheck.printer import ConsolePrinter
from bootcheck.probe import ShellCommandProbe, ShellRunner

if TYPE_CHECKING:
    from bootcheck.checklist import Checklist
    from bootcheck.config import OutputConfig
    from bootcheck.platform import Platform
    from bootcheck.printer import Printer
    from bootcheck.probe import CommandProbe

__all__ = [
    "Bootstrapper",
    "bootstrap",
    "run_checklist",
    "DEFAULT_LABEL_WIDTH",
    "SUCCESS_GLYPH",
    "FAILURE_GLYPH",
]

logger = get_logger(__name__)

DEFAULT_LABEL_WIDTH = 15

SUCCESS_GLYPH = "✓"

FAILURE_GLYPH = "╳"

CONFIG_ERROR_PREFIX = "Configuration error: "


class Bootstrapper:
    """Run checks in order and report them, stopping at the first failure.

    Example:
        ```python
        runner = Bootstrapper(evaluator, ConsolePrinter())
        result = runner.run(checklist)
        if not result.success:
            sys.exit(1)
        ```
    """

    def __init__(
        self,
        evaluator: CheckEvaluator,
        printer: Printer,
        *,
        label_width: int = DEFAULT_LABEL_WIDTH,
        success_glyph: str = SUCCESS_GLYPH,
        failure_glyph: str = FAILURE_GLYPH,
    ) -> None:
        """Initialize the Bootstrapper.

        Args:
            evaluator: Evaluates each check.
            printer: Receives the report.
            label_width: Column the glyph is aligned to.
            success_glyph: Printed after a passing check's label.
            failure_glyph: Printed after a failing check's label.
        """
        self._evaluator = evaluator
        self._printer = printer
        self._label_width = label_width
        self._success_glyph = success_glyph
        self._failure_glyph = failure_glyph

    def run(self, checks: Iterable[CheckSpec]) -> RunResult:
        """Evaluate checks until one fails.

        Args:
            checks: Check specifications in declaration order.

        Returns:
            RunResult with every evaluated check.
        """
        results: list[CheckResult] = []
        for spec in checks:
            result = self.run_check(spec)
            results.append(result)
            if not result.passed:
                break
        return RunResult(results=tuple(results))

    def run_check(self, spec: CheckSpec) -> CheckResult:
        """Evaluate and report a single check.

        The label is written before the check runs so that remediation output
        appears after it; the glyph completes the line once the result is
        known.
        """
        self._printer.write(spec.label.ljust(self._label_width))
        result = self._evaluator.evaluate(spec)

        if result.passed:
            self._printer.write_line(self._success_glyph, style="green")
            return result

        self._printer.write_line(self._failure_glyph, style="bold red")
        prefix = CONFIG_ERROR_PREFIX if result.fatal else ""
        self._printer.write_line(f"{prefix}{result.message}", style="red")
        if spec.help:
            self._printer.write_line(spec.help)
        return result


def run_checklist(
    checks: Checklist | Iterable[CheckSpec],
    *,
    platform: Platform | None = None,
    probe: CommandProbe | None = None,
    printer: Printer | None = None,
    output: OutputConfig | None = None,
    verbose_shell: bool = False,
) -> ExitCode:
    """Run a checklist and map the outcome to an exit code.

    Args:
        checks: A Checklist or any iterable of check specifications.
        platform: Host platform. Detected when None.
        probe: Command probe. Defaults to ShellCommandProbe.
        printer: Report destination. Defaults to stdout.
        output: Label width, glyph and color settings.
        verbose_shell: Echo remediation commands before running them.

    Returns:
        ExitCode.SUCCESS if every check passed, ExitCode.FAILURE otherwise.
    """
    from bootcheck.checklist import Checklist

    specs = checks.build() if isinstance(checks, Checklist) else tuple(checks)
    if printer is None:
        printer = ConsolePrinter(color=output.color if output is not None else True)
    if probe is None:
        probe = ShellCommandProbe()

    if platform is None:
        try:
            platform = current_platform()
        except UnsupportedPlatformError as e:
            printer.write_line(f"{CONFIG_ERROR_PREFIX}{e.message}", style="red")
            return ExitCode.FAILURE

    runner_options: dict[str, Any] = {}
    if output is not None:
        runner_options = {
            "label_width": output.label_width,
            "success_glyph": output.success_glyph,
            "failure_glyph": output.failure_glyph,
        }

    shell = ShellRunner(printer, verbose=verbose_shell)
    evaluator = CheckEvaluator(probe, shell, platform)
    bind_context(platform=platform.value)
    try:
        result = Bootstrapper(evaluator, printer, **runner_options).run(specs)
    finally:
        clear_context()

    logger.debug(
        "bootstrap_finished",
        success=result.success,
        evaluated=len(result.results),
        total=len(specs),
    )
    return ExitCode.SUCCESS if result.success else ExitCode.FAILURE


def bootstrap(
    checks: Checklist | Iterable[CheckSpec],
    *,
    exit_fn: Callable[[int], Any] = sys.exit,
    **options: Any,
) -> None:
    """Run a checklist, then end the process with its exit code.

    Accepts the same keyword options as ``run_checklist``.

    Example:
        ```python
        checklist = Checklist()
        checklist.check("node", version="^6.11.3", help="brew install node")
        checklist.check_bundler()
        bootstrap(checklist)
        ```
    """
    exit_fn(int(run_checklist(checks, **options)))
