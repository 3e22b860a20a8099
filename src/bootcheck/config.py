from __future__ import annotations

import re
from contextvars import ContextVar
from pathlib import Path
from typing import Any, Literal, Self

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator
from pydantic.fields import FieldInfo
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from bootcheck.checklist import Checklist, shell_action
from bootcheck.exceptions import ConfigError, MalformedVersionError
from bootcheck.logging import get_logger
from bootcheck.platform import Platform
from bootcheck.runner import DEFAULT_LABEL_WIDTH, FAILURE_GLYPH, SUCCESS_GLYPH
from bootcheck.versions import parse_constraint

__all__ = [
    "BootcheckConfig",
    "OutputConfig",
    "ProbeConfig",
    "CheckEntryConfig",
    "load_config",
    "build_checklist",
    "get_user_config_path",
    "PROJECT_CONFIG_NAME",
]

logger = get_logger(__name__)

PROJECT_CONFIG_NAME = "bootcheck.yaml"

# Set by load_config() so settings_customise_sources can see an explicit path.
_explicit_config_path: ContextVar[Path | None] = ContextVar(
    "bootcheck_config_path", default=None
)


class OutputConfig(BaseModel):
    """Settings for the check report.

    Attributes:
        label_width: Column the success/failure glyph is aligned to.
        success_glyph: Printed after a passing check.
        failure_glyph: Printed after a failing check.
        color: Style glyphs and errors in terminals.
    """

    label_width: int = Field(default=DEFAULT_LABEL_WIDTH, ge=1, le=120)
    success_glyph: str = Field(default=SUCCESS_GLYPH, min_length=1)
    failure_glyph: str = Field(default=FAILURE_GLYPH, min_length=1)
    color: bool = True


class ProbeConfig(BaseModel):
    """Settings for command probes and remediation commands.

    Attributes:
        timeout: Seconds allowed per probe. None (default) waits forever.
        verbose_shell: Echo remediation commands before running them.
    """

    timeout: float | None = Field(default=None, gt=0.0)
    verbose_shell: bool = False


class CheckEntryConfig(BaseModel):
    """One check declared in bootcheck.yaml.

    Example bootcheck.yaml:
        checks:
          - name: node
            version: "^6.11.3"
            help: "Install node 6 with nvm"
          - name: git
            version: ">=2.0.0"
            version_pattern: 'git version (\\d+\\.\\d+\\.\\d+)'
          - name: postgres
            platforms:
              macos: ["brew install postgresql"]
              ubuntu: ["sudo apt-get install -y postgresql"]
    """

    name: str = Field(min_length=1)
    help: str | None = None
    version: str | None = None
    version_pattern: str | None = None
    run: list[str] = Field(default_factory=list)
    platforms: dict[Platform, list[str]] = Field(default_factory=dict)

    @field_validator("version")
    @classmethod
    def check_version_constraint(cls, v: str | None) -> str | None:
        """Reject constraints that cannot be parsed."""
        if v is not None:
            try:
                parse_constraint(v)
            except MalformedVersionError as e:
                raise ValueError(e.message) from e
        return v

    @field_validator("version_pattern")
    @classmethod
    def check_version_pattern(cls, v: str | None) -> str | None:
        """Reject patterns that are not valid regular expressions."""
        if v is not None:
            try:
                re.compile(v)
            except re.error as e:
                raise ValueError(f"invalid version_pattern: {e}") from e
        return v

    @field_validator("platforms")
    @classmethod
    def check_platform_steps(
        cls, v: dict[Platform, list[str]]
    ) -> dict[Platform, list[str]]:
        """Each platform needs at least one command."""
        for platform, commands in v.items():
            if not commands:
                raise ValueError(f"platform '{platform.value}' has no commands")
        return v

    @model_validator(mode="after")
    def check_kind(self) -> Self:
        if self.version is not None and (self.run or self.platforms):
            raise ValueError(
                "'version' cannot be combined with 'run' or 'platforms'"
            )
        if self.version_pattern is not None and self.version is None:
            raise ValueError("'version_pattern' requires 'version'")
        return self


class YamlConfigSource(PydanticBaseSettingsSource):
    """Custom settings source that loads from YAML files."""

    def __init__(
        self,
        settings_cls: type[BaseSettings],
        yaml_file: Path | None = None,
    ):
        super().__init__(settings_cls)
        self.yaml_file = yaml_file
        self._config_data: dict[str, Any] = {}
        if yaml_file and yaml_file.exists():
            try:
                with open(yaml_file, encoding="utf-8") as f:
                    loaded = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigError(
                    message=f"Invalid YAML in {yaml_file}: {e}",
                    field=None,
                    value=None,
                ) from e
            if loaded is None:
                logger.warning("config_file_empty", path=str(yaml_file))
            elif not isinstance(loaded, dict):
                raise ConfigError(
                    message=f"Top level of {yaml_file} must be a mapping",
                    value=type(loaded).__name__,
                )
            else:
                self._config_data = loaded

    def get_field_value(
        self, field: FieldInfo, field_name: str
    ) -> tuple[Any, str, bool]:
        """Get value for a specific field from the YAML config."""
        if field_name in self._config_data:
            return self._config_data[field_name], field_name, False
        return None, field_name, False

    def __call__(self) -> dict[str, Any]:
        return self._config_data


class BootcheckConfig(BaseSettings):
    """Root configuration object containing all bootcheck settings."""

    model_config = SettingsConfigDict(
        env_prefix="BOOTCHECK_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    output: OutputConfig = Field(default_factory=OutputConfig)
    probe: ProbeConfig = Field(default_factory=ProbeConfig)
    checks: list[CheckEntryConfig] = Field(default_factory=list)
    verbosity: Literal["error", "warning", "info", "debug"] = "warning"

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Customize the order of settings sources.

        Priority (highest to lowest):
        1. Init settings (keyword arguments)
        2. Environment variables (BOOTCHECK_*)
        3. Project YAML config (./bootcheck.yaml, or the path given to load_config)
        4. User YAML config (~/.config/bootcheck/config.yaml)
        """
        project_config_path = (
            _explicit_config_path.get() or Path.cwd() / PROJECT_CONFIG_NAME
        )
        return (
            init_settings,
            env_settings,
            YamlConfigSource(settings_cls, project_config_path),
            YamlConfigSource(settings_cls, get_user_config_path()),
        )


def get_user_config_path() -> Path:
    """Get the path to the user configuration file.

    Returns:
        Path to ~/.config/bootcheck/config.yaml
    """
    return Path.home() / ".config" / "bootcheck" / "config.yaml"


def load_config(config_path: Path | None = None) -> BootcheckConfig:
    """Load configuration with hierarchy: defaults -> user -> project -> env.

    Args:
        config_path: Optional project config file. Defaults to ./bootcheck.yaml.
            An explicit path that does not exist is an error.

    Returns:
        BootcheckConfig instance with merged configuration.

    Raises:
        ConfigError: If configuration is missing or invalid.
    """
    if config_path is not None and not config_path.exists():
        raise ConfigError(
            f"Configuration file not found: {config_path}",
            field="config",
            value=str(config_path),
        )
    if config_path is None and not (Path.cwd() / PROJECT_CONFIG_NAME).exists():
        logger.info("No project configuration found, using defaults.")

    token = _explicit_config_path.set(config_path)
    try:
        return BootcheckConfig()
    except ValidationError as e:
        first_error = e.errors()[0]
        field = ".".join(str(loc) for loc in first_error["loc"])
        raise ConfigError(
            message=f"Invalid configuration: {first_error['msg']}",
            field=field,
            value=first_error.get("input"),
        ) from e
    finally:
        _explicit_config_path.reset(token)


def build_checklist(config: BootcheckConfig) -> Checklist:
    """Turn the checks declared in configuration into a Checklist.

    Command echo is left to the shell runner, which the CLI configures from
    ``probe.verbose_shell``.

    Args:
        config: Loaded configuration.

    Returns:
        Checklist with one check per entry, in file order.
    """
    checklist = Checklist()
    for entry in config.checks:
        builder = checklist.check(
            entry.name,
            entry.help,
            version=entry.version,
            version_pattern=entry.version_pattern,
            run=shell_action(*entry.run) if entry.run else None,
        )
        for platform, commands in entry.platforms.items():
            builder.on(platform, shell_action(*commands))
    return checklist
