"""CLI entry point for bootcheck.

This module defines the Click-based command-line interface:

    bootcheck run                      run the checks in bootcheck.yaml
    bootcheck platform                 print the detected platform tag
    bootcheck satisfies ^6.11.3 v6.12.0
"""

from __future__ import annotations

import logging
from pathlib import Path

import click
from dotenv import load_dotenv

from bootcheck import __version__
from bootcheck.cli.context import CLIContext, ExitCode
from bootcheck.cli.output import format_error
from bootcheck.config import BootcheckConfig, build_checklist, load_config
from bootcheck.exceptions import (
    ConfigError,
    MalformedVersionError,
    UnsupportedPlatformError,
)
from bootcheck.logging import configure_logging, get_logger
from bootcheck.platform import current_platform
from bootcheck.printer import ConsolePrinter
from bootcheck.probe import ShellCommandProbe
from bootcheck.runner import run_checklist
from bootcheck.versions import satisfies as version_satisfies

logger = get_logger(__name__)

#: Subcommands that read the loaded configuration.
CONFIG_COMMANDS = frozenset({"run"})

VERBOSITY_LEVELS = {
    "error": logging.ERROR,
    "warning": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="bootcheck")
@click.option(
    "-c",
    "--config",
    "config_file",
    type=click.Path(exists=False, path_type=str),
    default=None,
    help="Path to config file (overrides ./bootcheck.yaml).",
)
@click.option(
    "-v",
    "--verbose",
    count=True,
    help="Increase log verbosity (-v for INFO, -vv for DEBUG).",
)
@click.option(
    "-q",
    "--quiet",
    is_flag=True,
    default=False,
    help="Only log errors.",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config_file: str | None,
    verbose: int,
    quiet: bool,
) -> None:
    """bootcheck - verify a developer environment, one tool at a time."""
    ctx.ensure_object(dict)

    # Environment variables from ./.env must be visible to load_config().
    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)

    config_path = Path(config_file) if config_file else None
    config: BootcheckConfig | None = None
    config_error: ConfigError | None = None
    try:
        config = load_config(config_path)
    except ConfigError as e:
        if ctx.invoked_subcommand in CONFIG_COMMANDS:
            details = []
            if e.field:
                details.append(f"Field: {e.field}")
            if e.value is not None:
                details.append(f"Value: {e.value}")
            click.echo(format_error(e.message, details=details), err=True)
            ctx.exit(ExitCode.CONFIG_ERROR)
        config_error = e

    # Priority: quiet > verbose > config
    if quiet:
        level = logging.ERROR
    elif verbose > 0:
        level = logging.INFO if verbose == 1 else logging.DEBUG
    elif config is not None:
        level = VERBOSITY_LEVELS.get(config.verbosity, logging.WARNING)
    else:
        level = logging.WARNING
    configure_logging(level=level)
    if config is not None:
        logger.debug(
            "config_loaded",
            config_path=str(config_path) if config_path else None,
            checks=len(config.checks),
        )
    else:
        logger.debug(
            "config_skipped",
            command=ctx.invoked_subcommand,
            reason=config_error.message if config_error else None,
        )

    ctx.obj["cli_ctx"] = CLIContext(
        config=config,
        config_path=config_path,
        verbosity=verbose,
        quiet=quiet,
    )

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cli.command()
@click.pass_context
def run(ctx: click.Context) -> None:
    """Run the configured checks, stopping at the first failure."""
    cli_ctx: CLIContext = ctx.obj["cli_ctx"]
    config = cli_ctx.config
    assert config is not None

    checklist = build_checklist(config)
    if not len(checklist):
        if not cli_ctx.quiet:
            click.echo("No checks configured.")
        ctx.exit(ExitCode.SUCCESS)

    try:
        code = run_checklist(
            checklist,
            probe=ShellCommandProbe(timeout=config.probe.timeout),
            printer=ConsolePrinter(color=config.output.color),
            output=config.output,
            verbose_shell=config.probe.verbose_shell,
        )
    except KeyboardInterrupt:
        click.echo("\nInterrupted.", err=True)
        ctx.exit(ExitCode.INTERRUPTED)
    ctx.exit(code)


@cli.command()
@click.pass_context
def platform(ctx: click.Context) -> None:
    """Print the platform tag detected for this host."""
    try:
        detected = current_platform()
    except UnsupportedPlatformError as e:
        click.echo(format_error(e.message), err=True)
        ctx.exit(ExitCode.FAILURE)
    click.echo(detected.value)


@cli.command()
@click.argument("constraint")
@click.argument("installed")
@click.pass_context
def satisfies(ctx: click.Context, constraint: str, installed: str) -> None:
    """Check whether INSTALLED version text satisfies CONSTRAINT.

    Prints "yes" and exits 0, or "no" and exits 1.
    """
    try:
        ok = version_satisfies(constraint, installed)
    except MalformedVersionError as e:
        click.echo(format_error(e.message), err=True)
        ctx.exit(ExitCode.CONFIG_ERROR)
    click.echo("yes" if ok else "no")
    ctx.exit(ExitCode.SUCCESS if ok else ExitCode.FAILURE)


if __name__ == "__main__":
    cli()
