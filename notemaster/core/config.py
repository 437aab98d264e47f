"""
Configuration Management.

Loads settings from config/settings/*.yaml and optional overrides from
the environment (NOTEMASTER_* variables or config/.env).

Settings (YAML):
    application.yaml   - App identity and environment
    store.yaml         - Document store and legacy store locations
    logging.yaml       - Logging configuration
    security.yaml      - Password rules

Overrides (environment):
    NOTEMASTER_STORE_PATH, NOTEMASTER_LEGACY_PATH, NOTEMASTER_LOG_LEVEL
"""

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from notemaster.core.config_schema import (
    ApplicationSchema,
    LoggingSchema,
    SecuritySchema,
    StoreSchema,
)


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
    """Environment overrides. Every field is optional; YAML values apply otherwise."""

    store_path: str | None = None
    legacy_path: str | None = None
    log_level: str | None = None

    model_config = SettingsConfigDict(
        env_prefix="NOTEMASTER_",
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
        self._store = _load_validated(StoreSchema, "store.yaml")
        self._logging = _load_validated(LoggingSchema, "logging.yaml")
        self._security = _load_validated(SecuritySchema, "security.yaml")

    @property
    def application(self) -> ApplicationSchema:
        """Application settings."""
        return self._application

    @property
    def store(self) -> StoreSchema:
        """Document store settings."""
        return self._store

    @property
    def logging(self) -> LoggingSchema:
        """Logging settings."""
        return self._logging

    @property
    def security(self) -> SecuritySchema:
        """Security settings."""
        return self._security


@lru_cache
def get_settings() -> Settings:
    """Get cached overrides instance. Resolves .env path from project root."""
    env_path = find_project_root() / "config" / ".env"
    return Settings(_env_file=str(env_path))


@lru_cache
def get_app_config() -> AppConfig:
    """Get cached application configuration."""
    return AppConfig()


def _resolve_path(configured: str) -> Path:
    path = Path(configured)
    if path.is_absolute():
        return path
    return find_project_root() / path


def get_store_url() -> str:
    """
    Construct the async SQLite URL for the document store.

    The environment override wins over store.yaml. Relative paths are
    resolved against the project root.

    Returns:
        SQLAlchemy URL using the aiosqlite driver.
    """
    configured = get_settings().store_path or get_app_config().store.path
    return f"sqlite+aiosqlite:///{_resolve_path(configured)}"


def get_legacy_path() -> Path:
    """Return the location of the legacy key-value file."""
    configured = get_settings().legacy_path or get_app_config().store.legacy_path
    return _resolve_path(configured)
