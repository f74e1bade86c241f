from __future__ import annotations

from pathlib import Path

from platformdirs import PlatformDirs
from pydantic import BaseModel, Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


APP_NAME = "alert_migrator"
DEFAULT_API_URL = "https://api.github.com"


def _default_home() -> Path:
    """Get default home directory using platformdirs."""
    return Path(PlatformDirs(appname=APP_NAME, appauthor=False).user_cache_dir)


class DirectoryConfig(BaseModel):
    """Directory configuration with computed paths."""

    home: Path = Field(
        default_factory=_default_home,
        description="Base directory for all alert_migrator data",
    )

    @computed_field
    @property
    def logs_dir(self) -> Path:
        """Directory for per-run JSONL logs."""
        path = self.home / "logs"
        path.mkdir(parents=True, exist_ok=True)
        return path


class GitHubConfig(BaseModel):
    """Source and target GitHub instances."""

    source_token: str | None = Field(
        default=None,
        description="Token for the source instance (falls back to target_token)",
    )

    target_token: str | None = Field(
        default=None,
        description="Token for the target instance",
    )

    source_api_url: str = Field(
        default=DEFAULT_API_URL,
        description="REST API URL of the source (e.g. https://ghes.example.com/api/v3)",
    )

    target_api_url: str = Field(
        default=DEFAULT_API_URL,
        description="REST API URL of the target",
    )

    no_ssl_verify: bool = Field(
        default=False,
        description="Disable TLS verification towards the source instance only",
    )

    timeout: float = Field(
        default=30.0,
        description="Per-request timeout in seconds",
    )

    per_page: int = Field(
        default=100,
        ge=1,
        le=100,
        description="Page size for paginated API calls",
    )

    @property
    def effective_source_token(self) -> str | None:
        return self.source_token or self.target_token


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", description="Log level")
    console_output: bool = Field(default=False, description="Mirror log records to stderr")
    logger_name: str = Field(default=APP_NAME, description="Logger name")


class RuntimeConfig(BaseModel):
    """Per-invocation values set by the CLI."""

    run_name: str | None = Field(
        default=None,
        description="Stem of the JSONL log file for this run (no file when unset)",
    )


class MigrationConfig(BaseModel):
    """Migration behaviour."""

    max_workers: int = Field(
        default=4,
        ge=1,
        description="Concurrent alert state updates against the target",
    )


class AppConfig(BaseSettings):
    """Root application configuration.

    All configuration is loaded from environment variables with ALERT_MIGRATOR_ prefix.
    Use double underscore for nested config: ALERT_MIGRATOR_GITHUB__TARGET_TOKEN

    Example env vars:
        # Required
        export ALERT_MIGRATOR_GITHUB__TARGET_TOKEN=ghp_xxxxxxxxxxxxx

        # Optional (with defaults)
        export ALERT_MIGRATOR_GITHUB__SOURCE_TOKEN=ghp_yyyyyyyyyyyyy
        export ALERT_MIGRATOR_GITHUB__SOURCE_API_URL=https://ghes.example.com/api/v3
        export ALERT_MIGRATOR_MIGRATION__MAX_WORKERS=4
        export ALERT_MIGRATOR_DIRECTORIES__HOME=/custom/path
    """

    model_config = SettingsConfigDict(
        env_prefix="ALERT_MIGRATOR_",
        env_nested_delimiter="__",
        frozen=True,
        extra="forbid",
    )

    directories: DirectoryConfig = Field(default_factory=DirectoryConfig)
    github: GitHubConfig = Field(default_factory=GitHubConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    runtime: RuntimeConfig = Field(default_factory=RuntimeConfig)
    migration: MigrationConfig = Field(default_factory=MigrationConfig)
