"""
Configuration Management Module

This module handles all application configuration using Pydantic Settings.
Configuration is read from a TOML file and can be overridden with environment
variables (RELAY_ prefix, "__" between section and key, e.g.
RELAY_GITHUB__SECRET).

Design Decisions:
- One frozen Settings value, built once at startup and passed around
- Every setting has a default so the service starts without a config file
- An explicitly named config file that is missing is a startup error
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import Optional, Tuple, Type, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    TomlConfigSettingsSource,
)

DEFAULT_CONFIG_FILE = "config.toml"
DEV_CONFIG_FILE = "config.dev.toml"


class ConfigurationError(Exception):
    """Raised when configuration cannot be loaded."""
    pass


class _Section(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")


# =============================================================================
# Sections
# =============================================================================

class AppSection(_Section):
    """Server, logging and debug options."""

    debug: bool = Field(
        default=False,
        description="Persist raw payloads to debug_dir and log at debug level"
    )

    host: str = Field(
        default="0.0.0.0",
        description="Host to bind the server"
    )

    port: int = Field(
        default=3000,
        ge=1,
        le=65535,
        description="Port to bind the server"
    )

    log_level: str = Field(
        default="INFO",
        description="Logging level"
    )

    log_json_format: bool = Field(
        default=True,
        description="Enable JSON logging format"
    )

    debug_dir: str = Field(
        default="./debug",
        description="Directory for debug payload dumps"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure log level is valid."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v_upper


class GitHubSection(_Section):
    secret: str = Field(
        default="",
        description="Webhook secret; empty disables signature verification"
    )


class DiscordSection(_Section):
    webhook_url: str = Field(
        default="",
        description="Discord webhook URL notifications are posted to"
    )

    username: str = Field(
        default="GitHub",
        description="Display name used for posted messages"
    )

    avatar_url: Optional[str] = Field(
        default=None,
        description="Avatar used for posted messages"
    )

    timeout: float = Field(
        default=10.0,
        gt=0,
        description="HTTP timeout in seconds"
    )

    rate_limit_per_minute: int = Field(
        default=30,
        ge=1,
        description="Maximum messages posted per minute"
    )


class EventToggles(_Section):
    """Per-event-type enable flags."""

    push: bool = True
    issues: bool = True
    workflow_run: bool = True
    workflow_job: bool = True

    def is_enabled(self, event_type: str) -> bool:
        """Return the flag for an event type; unknown types are disabled."""
        value = getattr(self, event_type, False)
        return value if isinstance(value, bool) else False


class PushOptions(_Section):
    show_file_changes: bool = True
    max_commits_shown: int = Field(default=5, ge=0)
    show_commit_details: bool = True
    embed_color: int = 0x00FF00


class IssuesOptions(_Section):
    show_labels: bool = True
    show_assignees: bool = True
    embed_color: int = 0xFF9900


class WorkflowRunOptions(_Section):
    show_duration: bool = True
    show_conclusion: bool = True
    embed_color: int = 0x0099FF


class WorkflowJobOptions(_Section):
    show_steps: bool = False
    show_runner: bool = True
    embed_color: int = 0x6600CC


class EventsConfig(_Section):
    """Formatting options per event type."""

    push: PushOptions = PushOptions()
    issues: IssuesOptions = IssuesOptions()
    workflow_run: WorkflowRunOptions = WorkflowRunOptions()
    workflow_job: WorkflowJobOptions = WorkflowJobOptions()


# =============================================================================
# Settings
# =============================================================================

class Settings(BaseSettings):
    """
    Application settings.

    Sources, highest priority first: constructor arguments, environment
    variables, .env file, the TOML file named by ``toml_file``.
    """

    model_config = SettingsConfigDict(
        env_prefix="RELAY_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    app: AppSection = AppSection()
    github: GitHubSection = GitHubSection()
    discord: DiscordSection = DiscordSection()
    events: EventToggles = EventToggles()
    events_config: EventsConfig = EventsConfig()

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: Type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> Tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            TomlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )

    @property
    def verification_enabled(self) -> bool:
        """Signature verification is on whenever a secret is configured."""
        return bool(self.github.secret)


def resolve_config_path() -> Path:
    """
    Work out which TOML file to read.

    CONFIG wins; otherwise RELAY_ENV=development selects config.dev.toml and
    anything else selects config.toml.
    """
    explicit = os.environ.get("CONFIG")
    if explicit:
        return Path(explicit)
    if os.environ.get("RELAY_ENV", "").lower() == "development":
        return Path(DEV_CONFIG_FILE)
    return Path(DEFAULT_CONFIG_FILE)


def load_settings(config_path: Optional[Union[str, Path]] = None) -> Settings:
    """
    Build Settings from a TOML file plus environment overrides.

    Args:
        config_path: File to read. When omitted the path comes from
            resolve_config_path() and may be absent (defaults apply).

    Returns:
        Settings instance

    Raises:
        ConfigurationError: If an explicitly named file does not exist or
            the resulting values fail validation
    """
    required = config_path is not None or bool(os.environ.get("CONFIG"))
    path = Path(config_path) if config_path is not None else resolve_config_path()

    if required and not path.is_file():
        raise ConfigurationError(f"Configuration file not found: {path}")

    class FileSettings(Settings):
        model_config = SettingsConfigDict(toml_file=path)

    try:
        return FileSettings()
    except ValueError as e:
        raise ConfigurationError(f"Invalid configuration in {path}: {e}") from e


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Settings are loaded once per process; call get_settings.cache_clear()
    to force a reload.
    """
    return load_settings()
