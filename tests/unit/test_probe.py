"""Unit tests for command probes and the shell runner."""

from __future__ import annotations

import shutil
import subprocess
from unittest.mock import MagicMock, patch

import pytest

from bootcheck.exceptions import CommandFailedError
from bootcheck.models import CommandResult
from bootcheck.probe import (
    CommandProbe,
    ShellCommandProbe,
    ShellRunner,
    run_command,
)
from tests.fixtures.checks import FakeProbe, RecordingPrinter

requires_bash = pytest.mark.skipif(shutil.which("bash") is None, reason="bash required")


class TestCommandResult:
    """Tests for CommandResult."""

    def test_success(self) -> None:
        assert CommandResult(returncode=0, output="v1.0.0").success is True

    def test_nonzero_exit(self) -> None:
        assert CommandResult(returncode=2, output="").success is False

    def test_timed_out(self) -> None:
        assert CommandResult(returncode=0, output="", timed_out=True).success is False


class TestRunCommand:
    """Tests for run_command."""

    def test_captures_combined_output(self) -> None:
        completed = subprocess.CompletedProcess(
            args=["node", "--version"], returncode=0, stdout="v6.11.3\n"
        )
        with patch("bootcheck.probe.subprocess.run", return_value=completed) as run:
            result = run_command(["node", "--version"])

        assert result.success is True
        assert result.output == "v6.11.3\n"
        assert run.call_args.kwargs["stderr"] is subprocess.STDOUT

    def test_missing_executable(self) -> None:
        with patch("bootcheck.probe.subprocess.run", side_effect=FileNotFoundError):
            result = run_command(["nonexistent-tool", "--version"])

        assert result.returncode == 127
        assert result.output == "Command not found: nonexistent-tool"

    def test_permission_denied(self) -> None:
        with patch("bootcheck.probe.subprocess.run", side_effect=PermissionError):
            result = run_command(["./script", "--version"])

        assert result.returncode == 126

    def test_timeout(self) -> None:
        expired = subprocess.TimeoutExpired(cmd=["slow"], timeout=1.0, output=b"part")
        with patch("bootcheck.probe.subprocess.run", side_effect=expired):
            result = run_command(["slow"], timeout=1.0)

        assert result.timed_out is True
        assert result.success is False
        assert result.output == "part"


class TestShellCommandProbe:
    """Tests for ShellCommandProbe."""

    def test_satisfies_protocol(self) -> None:
        assert isinstance(ShellCommandProbe(), CommandProbe)
        assert isinstance(FakeProbe(), CommandProbe)

    def test_exists_uses_bash_type(self) -> None:
        with patch(
            "bootcheck.probe.run_command",
            return_value=CommandResult(returncode=0, output="node is /usr/bin/node"),
        ) as run:
            assert ShellCommandProbe(timeout=3.0).exists("node") is True

        run.assert_called_once_with(["bash", "-c", "type node"], timeout=3.0)

    def test_exists_quotes_the_name(self) -> None:
        with patch(
            "bootcheck.probe.run_command",
            return_value=CommandResult(returncode=1, output=""),
        ) as run:
            assert ShellCommandProbe().exists("a b") is False

        assert run.call_args.args[0] == ["bash", "-c", "type 'a b'"]

    def test_raw_version_runs_dash_dash_version(self) -> None:
        expected = CommandResult(returncode=0, output="v6.11.3\n")
        with patch("bootcheck.probe.run_command", return_value=expected) as run:
            assert ShellCommandProbe().raw_version("node") is expected

        run.assert_called_once_with(["node", "--version"], timeout=None)

    @requires_bash
    def test_real_probe_finds_bash(self) -> None:
        probe = ShellCommandProbe()
        assert probe.exists("bash") is True
        assert probe.exists("definitely-not-a-real-command-xyz") is False


class TestShellRunner:
    """Tests for ShellRunner."""

    def test_success_returns_true(self) -> None:
        completed = subprocess.CompletedProcess(args=[], returncode=0)
        with patch("bootcheck.probe.subprocess.run", return_value=completed) as run:
            assert ShellRunner().sh("gem install bundler") is True

        assert run.call_args.args[0] == ["bash", "-c", "gem install bundler"]

    def test_failure_raises_with_status(self) -> None:
        completed = subprocess.CompletedProcess(args=[], returncode=3)
        with (
            patch("bootcheck.probe.subprocess.run", return_value=completed),
            pytest.raises(CommandFailedError) as exc_info,
        ):
            ShellRunner().sh("bundle install")

        assert exc_info.value.command == "bundle install"
        assert exc_info.value.status == 3

    def test_verbose_echoes_command(self) -> None:
        printer = RecordingPrinter()
        completed = subprocess.CompletedProcess(args=[], returncode=0)
        with patch("bootcheck.probe.subprocess.run", return_value=completed):
            ShellRunner(printer).sh("brew install redis", verbose=True)
            ShellRunner(printer).sh("brew update")
            ShellRunner(printer, verbose=True).sh("brew upgrade")

        assert printer.lines == ["brew install redis", "brew upgrade", ""]

    def test_timeout_raises(self) -> None:
        expired = subprocess.TimeoutExpired(cmd=["bash"], timeout=1.0)
        with (
            patch("bootcheck.probe.subprocess.run", side_effect=expired),
            pytest.raises(CommandFailedError) as exc_info,
        ):
            ShellRunner(timeout=1.0).sh("sleep 5")

        assert exc_info.value.status == -1

    @requires_bash
    def test_real_shell_syntax(self) -> None:
        runner = ShellRunner(MagicMock())
        assert runner.sh("true && exit 0") is True
        with pytest.raises(CommandFailedError):
            runner.sh("false || exit 4")
