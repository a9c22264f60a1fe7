"""
Application settings.

Values come from an optional JSON settings file and are overridden by
environment variables:

- file: `appsettings.json` in the working directory, or `SPEAKER_API_SETTINGS`
- DATABASE_URL               -> ConnectionStrings.DefaultConnection
- LOG_LEVEL                  -> Logging.LogLevel.Default
- DATABASE_RESET_ON_STARTUP  -> Database.ResetOnStartup
- CORS_ALLOW_ORIGINS         -> Cors.AllowedOrigins
"""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_settings import (
    BaseSettings,
    JsonConfigSettingsSource,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

DEFAULT_SETTINGS_FILE = "appsettings.json"
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_CORS_ORIGINS = (
    "http://localhost:5173",
    "http://127.0.0.1:5173",
)

# .NET style names map onto their logging equivalents.
_LOG_LEVEL_ALIASES = {"INFORMATION": "INFO", "TRACE": "DEBUG", "NONE": "CRITICAL"}


class ConfigError(RuntimeError):
    pass


def _normalize_log_level(value: str | None) -> str | None:
    if value is None or not value.strip():
        return None
    level = value.strip().upper()
    level = _LOG_LEVEL_ALIASES.get(level, level)
    if not isinstance(logging.getLevelName(level), int):
        raise ValueError(f"Unknown log level: {value!r}.")
    return level


def settings_path() -> Path:
    raw = os.environ.get("SPEAKER_API_SETTINGS", "").strip()
    return Path(raw) if raw else Path(DEFAULT_SETTINGS_FILE)


# --- Settings file models ---
# Field names mirror the sections of `appsettings.json`.


class ConnectionStringsConfig(BaseModel):
    DefaultConnection: str | None = None


class LogLevelConfig(BaseModel):
    Default: str = DEFAULT_LOG_LEVEL

    @field_validator("Default")
    @classmethod
    def known_level(cls, value: str) -> str:
        return _normalize_log_level(value) or DEFAULT_LOG_LEVEL


class LoggingConfig(BaseModel):
    LogLevel: LogLevelConfig = Field(default_factory=LogLevelConfig)


class DatabaseConfig(BaseModel):
    ResetOnStartup: bool = False


class CorsConfig(BaseModel):
    AllowedOrigins: list[str] = Field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))


class AppSettingsFile(BaseSettings):
    """
    Contents of the JSON settings file. A missing file yields the defaults.
    """

    model_config = SettingsConfigDict(extra="ignore")

    ConnectionStrings: ConnectionStringsConfig = Field(default_factory=ConnectionStringsConfig)
    Logging: LoggingConfig = Field(default_factory=LoggingConfig)
    Database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    Cors: CorsConfig = Field(default_factory=CorsConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            JsonConfigSettingsSource(settings_cls, json_file=settings_path(), json_file_encoding="utf-8"),
        )


class EnvSettings(BaseSettings):
    """
    Environment overrides. Unset variables stay None and fall back to the file.
    """

    model_config = SettingsConfigDict(extra="ignore", env_ignore_empty=True)

    DATABASE_URL: str | None = None
    LOG_LEVEL: str | None = None
    DATABASE_RESET_ON_STARTUP: bool | None = None
    CORS_ALLOW_ORIGINS: str | None = None

    @field_validator("LOG_LEVEL")
    @classmethod
    def known_level(cls, value: str | None) -> str | None:
        return _normalize_log_level(value)


@lru_cache(maxsize=4)
def _load_file(path: str) -> AppSettingsFile:
    try:
        return AppSettingsFile()
    except (OSError, ValueError) as e:
        # ValidationError and malformed JSON are both ValueErrors.
        raise ConfigError(f"Could not read settings file {path}: {e}") from e


def file_settings() -> AppSettingsFile:
    return _load_file(str(settings_path()))


def env_settings() -> EnvSettings:
    try:
        return EnvSettings()
    except ValidationError as e:
        raise ConfigError(f"Invalid environment settings: {e}") from e


def clear_cache() -> None:
    _load_file.cache_clear()


def connection_string() -> str | None:
    """
    Configured connection string, or None when the backend should be
    picked from the host platform.
    """
    for value in (env_settings().DATABASE_URL, file_settings().ConnectionStrings.DefaultConnection):
        if value and value.strip():
            return value.strip()
    return None


def log_level() -> str:
    return env_settings().LOG_LEVEL or file_settings().Logging.LogLevel.Default


def reset_database_on_startup() -> bool:
    override = env_settings().DATABASE_RESET_ON_STARTUP
    if override is not None:
        return override
    return file_settings().Database.ResetOnStartup


def cors_allow_origins() -> list[str]:
    raw = env_settings().CORS_ALLOW_ORIGINS
    if raw is not None:
        return [origin.strip() for origin in raw.split(",") if origin.strip()]
    return [origin.strip() for origin in file_settings().Cors.AllowedOrigins if origin.strip()]


def configure_logging() -> None:
    level = log_level()
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger().setLevel(level)
