from __future__ import annotations

import logging
import os
import tempfile
from collections.abc import Generator, Iterator
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from click.testing import CliRunner

# Register fixture plugins from tests/fixtures/
pytest_plugins = [
    "tests.fixtures.checks",
]


@pytest.fixture(autouse=True)
def configure_test_logging() -> Generator[None, None, None]:
    """Configure structlog for the test environment.

    Logs go to stderr at WARNING so they never mix with the report that
    tests read back from the recording printer or CliRunner output.
    """
    from bootcheck.logging import configure_logging

    configure_logging(level=logging.WARNING)
    yield


@pytest.fixture
def temp_dir() -> Iterator[Path]:
    """Create a temporary directory for test files.

    Also saves and restores the current working directory to prevent
    tests that use os.chdir() from affecting other tests.
    """
    original_cwd = os.getcwd()
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)
    os.chdir(original_cwd)


@pytest.fixture
def clean_env(
    temp_dir: Path, monkeypatch: pytest.MonkeyPatch
) -> Generator[None, None, None]:
    """Isolate tests from BOOTCHECK_ variables and real config files.

    Removes BOOTCHECK_ environment variables, points the home directory at
    a temporary directory and changes into it.
    """
    for key in list(os.environ.keys()):
        if key.startswith("BOOTCHECK_"):
            monkeypatch.delenv(key)
    monkeypatch.setattr(Path, "home", lambda: temp_dir)
    monkeypatch.chdir(temp_dir)
    yield


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner.

    Example:
        >>> def test_version(cli_runner):
        ...     from bootcheck.main import cli
        ...     result = cli_runner.invoke(cli, ["--version"])
        ...     assert result.exit_code == 0
    """
    from click.testing import CliRunner

    return CliRunner()
