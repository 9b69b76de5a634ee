"""
Configuration Management.

Loads secrets from the environment (or config/.env) and settings from
config/settings/*.yaml.
No hardcoded values in code; all configuration comes from these sources.

Secrets (environment / .env):
    SUPABASE_URL, SUPABASE_ANON_KEY

Settings (YAML):
    application.yaml   - App identity, remote table, UI settings
    logging.yaml       - Logging configuration
"""

from functools import lru_cache
from pathlib import Path
from typing import Any, NamedTuple

import yaml
from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from micronotes.core.config_schema import ApplicationSchema, LoggingSchema
from micronotes.core.exceptions import ConfigurationError


def find_project_root() -> Path:
    """Find project root by looking for .project_root marker file."""
    current = Path.cwd()
    while current != current.parent:
        if (current / ".project_root").exists():
            return current
        current = current.parent
    raise RuntimeError("Project root not found. Ensure .project_root file exists.")


def load_yaml_config(filename: str) -> dict[str, Any]:
    """Load a YAML configuration file from config/settings/."""
    project_root = find_project_root()
    config_path = project_root / "config" / "settings" / filename

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path) as f:
        return yaml.safe_load(f) or {}


class Settings(BaseSettings):
    """Secrets for the hosted data service. Checked for presence only."""

    supabase_url: str = Field(min_length=1)
    supabase_anon_key: str = Field(min_length=1)

    model_config = SettingsConfigDict(
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


def _load_validated(schema_cls: type, filename: str) -> Any:
    """Load YAML and validate against schema. Returns typed model instance."""
    raw = load_yaml_config(filename)
    try:
        return schema_cls(**raw)
    except ValidationError as e:
        raise ValueError(
            f"Invalid configuration in {filename}:\n{e}"
        ) from e


class AppConfig:
    """
    Application configuration loaded from YAML files.

    Each YAML file is validated against its Pydantic schema at load time.
    Properties return typed Pydantic model instances with attribute access.
    """

    def __init__(self) -> None:
        self._application = _load_validated(ApplicationSchema, "application.yaml")
        self._logging = get_logging_config()

    @property
    def application(self) -> ApplicationSchema:
        """Application settings."""
        return self._application

    @property
    def logging(self) -> LoggingSchema:
        """Logging settings."""
        return self._logging


class RemoteConfig(NamedTuple):
    """Everything needed to reach the remote notes table."""

    rest_url: str
    api_key: str
    table: str
    timeout: float


@lru_cache
def get_settings() -> Settings:
    """
    Get cached secrets instance. Resolves .env path from project root.

    Raises:
        ConfigurationError: If a required secret is missing or empty.
    """
    env_path = find_project_root() / "config" / ".env"
    try:
        return Settings(_env_file=str(env_path))
    except ValidationError as e:
        missing = sorted({str(err["loc"][0]).upper() for err in e.errors()})
        raise ConfigurationError(
            f"Missing required settings: {', '.join(missing)}"
        ) from e


@lru_cache
def get_logging_config() -> LoggingSchema:
    """
    Get cached logging settings.

    Validated apart from application.yaml so that logging can be set up
    even when the rest of the configuration is broken.
    """
    return _load_validated(LoggingSchema, "logging.yaml")


@lru_cache
def get_app_config() -> AppConfig:
    """Get cached application configuration."""
    return AppConfig()


def get_remote_config() -> RemoteConfig:
    """
    Build the remote table configuration from application.yaml and secrets.

    Returns:
        RemoteConfig with the REST base URL, access key, table name and timeout.
    """
    remote = get_app_config().application.remote
    settings = get_settings()
    rest_url = settings.supabase_url.rstrip("/") + "/" + remote.rest_path.strip("/")
    return RemoteConfig(
        rest_url=rest_url,
        api_key=settings.supabase_anon_key,
        table=remote.table,
        timeout=float(remote.timeout_seconds),
    )
