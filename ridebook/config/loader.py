# ridebook/config/loader.py
"""
Project configuration loader.
Base values come from config/config.json; secrets and connection
parameters are overridden from environment variables.
"""

from __future__ import annotations

import json
import os
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# =============================================================================
# PATHS
# =============================================================================

def get_project_root() -> Path:
    """Returns the project root directory."""
    return Path(__file__).parent.parent.parent


def get_config_path() -> Path:
    """Returns the path to config.json (overridable with RIDEBOOK_CONFIG)."""
    override = os.getenv("RIDEBOOK_CONFIG")
    if override:
        return Path(override)
    return get_project_root() / "config" / "config.json"


def load_config_json() -> dict[str, Any]:
    """Loads config.json, returning an empty dict when the file is absent."""
    config_path = get_config_path()
    if not config_path.exists():
        return {}

    with open(config_path, "r", encoding="utf-8") as f:
        data = json.load(f)

    # Keys starting with _comment_ are documentation only
    return {k: v for k, v in data.items() if not k.startswith("_comment_")}


# =============================================================================
# SECTIONS
# =============================================================================

class SystemSettings(BaseModel):
    """System settings."""
    PROJECT_NAME: str = "ridebook"
    VERSION: str = "1.0.0"
    DEBUG: bool = True
    ENVIRONMENT: str = "development"

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"


class ServerSettings(BaseModel):
    """HTTP listener settings."""
    APP_HOST: str = "0.0.0.0"
    APP_PORT: int = 3000
    API_PREFIX: str = "/api/v1"
    CORS_ORIGINS: list[str] = Field(default_factory=lambda: ["*"])


class LoggingSettings(BaseModel):
    """Logging settings."""
    LOG_LEVEL: str = "DEBUG"
    LOG_TO_FILE: bool = False
    LOG_FILE_PATH: str = "logs/app.log"
    LOG_FORMAT: str = "colored"
    LOG_MAX_BYTES: int = 10485760

    @field_validator("LOG_FORMAT")
    @classmethod
    def check_format(cls, v: str) -> str:
        if v not in ("colored", "json"):
            raise ValueError(f"Unsupported LOG_FORMAT: {v}")
        return v


class DatabaseSettings(BaseModel):
    """PostgreSQL settings."""
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_NAME: str = "ridebook"
    DB_USER: str = "postgres"
    DB_PASSWORD: str = ""
    DB_MIN_POOL_SIZE: int = 1
    DB_MAX_POOL_SIZE: int = 10
    DB_COMMAND_TIMEOUT: int = 60

    @field_validator("DB_PASSWORD", mode="before")
    @classmethod
    def get_from_env(cls, v: str) -> str:
        """Reads the password from the environment when not set."""
        if not v:
            return os.getenv("DB_PASSWORD", "")
        return v

    @property
    def dsn(self) -> str:
        """PostgreSQL DSN."""
        return (
            f"postgresql://{self.DB_USER}:{self.DB_PASSWORD}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
        )


class AuthSettings(BaseModel):
    """Bearer token settings."""
    JWT_SECRET: str = ""
    JWT_ALGORITHM: str = "HS256"
    TOKEN_TTL_HOURS: int = 24

    @field_validator("JWT_SECRET", mode="before")
    @classmethod
    def get_from_env(cls, v: str) -> str:
        if not v:
            return os.getenv("JWT_SECRET", "")
        return v


class FareSettings(BaseModel):
    """Fare estimation settings."""
    BASE_FARE: float = 5.0
    FARE_PER_KM: float = 2.0
    MIN_DISTANCE_KM: float = 1.0
    MAX_DISTANCE_KM: float = 11.0
    CURRENCY: str = "USD"
    REQUIRE_ONLINE_DRIVER: bool = False

    @model_validator(mode="after")
    def check_distance_range(self) -> "FareSettings":
        if self.MAX_DISTANCE_KM < self.MIN_DISTANCE_KM:
            raise ValueError("MAX_DISTANCE_KM must not be below MIN_DISTANCE_KM")
        return self


# =============================================================================
# ROOT SETTINGS
# =============================================================================

class Settings(BaseSettings):
    """
    Application settings.
    Aggregates every configuration section.
    """
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    system: SystemSettings = Field(default_factory=SystemSettings)
    server: ServerSettings = Field(default_factory=ServerSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    auth: AuthSettings = Field(default_factory=AuthSettings)
    fares: FareSettings = Field(default_factory=FareSettings)

    @classmethod
    def from_config_json(cls) -> "Settings":
        """
        Builds Settings from config.json.
        Secrets and connection values are overridden from the environment.
        """
        data = load_config_json()

        return cls(
            system=SystemSettings(
                PROJECT_NAME=data.get("PROJECT_NAME", "ridebook"),
                VERSION=data.get("VERSION", "1.0.0"),
                DEBUG=data.get("DEBUG", True),
                ENVIRONMENT=os.getenv("ENVIRONMENT", data.get("ENVIRONMENT", "development")),
            ),
            server=ServerSettings(
                APP_HOST=os.getenv("APP_HOST", data.get("APP_HOST", "0.0.0.0")),
                APP_PORT=int(os.getenv("APP_PORT", data.get("APP_PORT", 3000))),
                API_PREFIX=data.get("API_PREFIX", "/api/v1"),
                CORS_ORIGINS=data.get("CORS_ORIGINS", ["*"]),
            ),
            logging=LoggingSettings(
                LOG_LEVEL=os.getenv("LOG_LEVEL", data.get("LOG_LEVEL", "DEBUG")),
                LOG_TO_FILE=data.get("LOG_TO_FILE", False),
                LOG_FILE_PATH=data.get("LOG_FILE_PATH", "logs/app.log"),
                LOG_FORMAT=data.get("LOG_FORMAT", "colored"),
                LOG_MAX_BYTES=data.get("LOG_MAX_BYTES", 10485760),
            ),
            database=DatabaseSettings(
                DB_HOST=os.getenv("DB_HOST", data.get("DB_HOST", "localhost")),
                DB_PORT=int(os.getenv("DB_PORT", data.get("DB_PORT", 5432))),
                DB_NAME=os.getenv("DB_NAME", data.get("DB_NAME", "ridebook")),
                DB_USER=os.getenv("DB_USER", data.get("DB_USER", "postgres")),
                DB_PASSWORD=os.getenv("DB_PASSWORD", data.get("DB_PASSWORD", "")),
                DB_MIN_POOL_SIZE=data.get("DB_MIN_POOL_SIZE", 1),
                DB_MAX_POOL_SIZE=data.get("DB_MAX_POOL_SIZE", 10),
                DB_COMMAND_TIMEOUT=data.get("DB_COMMAND_TIMEOUT", 60),
            ),
            auth=AuthSettings(
                JWT_SECRET=os.getenv("JWT_SECRET", data.get("JWT_SECRET", "")),
                JWT_ALGORITHM=data.get("JWT_ALGORITHM", "HS256"),
                TOKEN_TTL_HOURS=data.get("TOKEN_TTL_HOURS", 24),
            ),
            fares=FareSettings(
                BASE_FARE=data.get("BASE_FARE", 5.0),
                FARE_PER_KM=data.get("FARE_PER_KM", 2.0),
                MIN_DISTANCE_KM=data.get("MIN_DISTANCE_KM", 1.0),
                MAX_DISTANCE_KM=data.get("MAX_DISTANCE_KM", 11.0),
                CURRENCY=data.get("CURRENCY", "USD"),
                REQUIRE_ONLINE_DRIVER=data.get("REQUIRE_ONLINE_DRIVER", False),
            ),
        )


@lru_cache()
def get_settings() -> Settings:
    """
    Returns the cached application settings.
    Loads .env from the project root first.
    """
    from dotenv import load_dotenv

    env_path = get_project_root() / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    return Settings.from_config_json()


settings = get_settings()
