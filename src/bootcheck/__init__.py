"""bootcheck - developer-environment bootstrap checks.

Declare the tools a project needs, with optional version constraints and
per-platform remediation, and verify them in order, stopping at the first
failure.

Example:
    ```python
    from bootcheck import Checklist, bootstrap, shell_action

    checklist = Checklist()
    checklist.check("node", version="^6.11.3", help="Install node 6")
    checklist.check("redis-server").osx(shell_action("brew install redis"))
    bootstrap(checklist)
    ```
"""

from __future__ import annotations

from bootcheck.checklist import CheckBuilder, Checklist, ShellAction, shell_action
from bootcheck.evaluator import CheckEvaluator
from bootcheck.models import (
    CheckResult,
    ExistenceCheck,
    PlatformBlock,
    PlatformCheck,
    PredicateCheck,
    RunResult,
    VersionCheck,
)
from bootcheck.platform import Platform, current_platform, resolve_platform
from bootcheck.runner import Bootstrapper, bootstrap, run_checklist
from bootcheck.versions import (
    Comparator,
    Version,
    VersionConstraint,
    compare,
    parse_constraint,
    satisfies,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Declaring checks
    "Checklist",
    "CheckBuilder",
    "ShellAction",
    "shell_action",
    # Check specifications and results
    "ExistenceCheck",
    "VersionCheck",
    "PredicateCheck",
    "PlatformBlock",
    "PlatformCheck",
    "CheckResult",
    "RunResult",
    # Running
    "CheckEvaluator",
    "Bootstrapper",
    "bootstrap",
    "run_checklist",
    # Platforms
    "Platform",
    "current_platform",
    "resolve_platform",
    # Versions
    "Comparator",
    "Version",
    "VersionConstraint",
    "compare",
    "parse_constraint",
    "satisfies",
]
