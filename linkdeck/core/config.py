"""Application configuration module.

This module contains settings for the shortcut manager,
loaded from environment variables with appropriate defaults.
"""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import Any, List, Optional, Union

from pydantic import Field, ValidationInfo, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Set up basic logger for config module
logger = logging.getLogger(__name__)

# Base directory of the project
BASE_DIR = Path(__file__).resolve().parent.parent.parent


class EnvironmentType(str, Enum):
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


class Settings(BaseSettings):
    """Application settings loaded from environment variables with defaults.

    Settings are loaded from environment variables, with fallback to
    values in .env file if present, and finally to the default values
    specified here.
    """
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Environment setting
    ENVIRONMENT: EnvironmentType = EnvironmentType.DEVELOPMENT

    # App Information
    APP_NAME: str = "Linkdeck"
    APP_VERSION: str = "0.1.0"
    APP_DESCRIPTION: str = "Named shortcuts and collections with visibility scopes"

    # API Configuration
    API_PREFIX: str = "/api"
    API_VERSION_PREFIX: str = "/v1"
    DEBUG: bool = False

    # CORS settings
    CORS_ORIGINS: Union[List[str], str] = ["*"]

    # Header set by the upstream auth gateway with the authenticated user id.
    # Ignored unless TRUST_ACTOR_HEADER is enabled for a deployment behind such a gateway.
    ACTOR_HEADER: str = "X-Actor-Id"
    TRUST_ACTOR_HEADER: bool = False

    # Frontend routes
    SHORTCUT_PATH_PREFIX: str = "s"
    COLLECTION_PATH_PREFIX: str = "c"
    FRONTEND_INDEX_PATH: Optional[str] = None  # Built index.html; a minimal shell is used when unset
    METADATA_PLACEHOLDER: str = "<!-- linkdeck.metadata -->"
    DEFAULT_METADATA_TITLE: str = "Linkdeck"

    # PostgreSQL settings
    POSTGRES_SERVER: str = Field(default="localhost")
    POSTGRES_PORT: int = Field(default=5432)
    POSTGRES_USER: str = Field(default="postgres")
    POSTGRES_PASSWORD: str = Field(default="postgres")
    POSTGRES_DB: str = Field(default="linkdeck")
    DATABASE_URL: Optional[str] = None  # Full override, e.g. sqlite+aiosqlite:///./linkdeck.db

    # PostgreSQL pool settings
    POSTGRES_POOL_SIZE: int = 20
    POSTGRES_POOL_MAX_OVERFLOW: int = 10
    POSTGRES_POOL_TIMEOUT: int = 30
    POSTGRES_POOL_RECYCLE: int = 300
    DB_ECHO: bool = False
    DB_CREATE_TABLES: bool = False  # Create missing tables on startup (dev convenience)

    # Logging configuration
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"
    LOG_FILENAME: str = "app.log"
    LOG_ROTATION: str = "10 MB"
    LOG_RETENTION: str = "7 days"
    LOG_FORMAT: str = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level} | {message}"
    LOG_JSON: bool = True
    REQUEST_LOGGING_ENABLED: bool = True
    ACCESS_LOGGING_ENABLED: bool = True

    # OpenTelemetry configuration
    OTEL_ENABLED: bool = False
    OTEL_SERVICE_NAME: str = "linkdeck"
    OTEL_RESOURCE_ATTRIBUTES: str = "service.namespace=linkdeck"
    OTEL_EXPORTER_OTLP_ENDPOINT: str = "http://localhost:4317"
    OTEL_EXPORTER_OTLP_METRICS_ENDPOINT: str = "http://localhost:4317"
    OTEL_TRACES_SAMPLER: str = "parentbased_traceidratio"
    OTEL_TRACES_SAMPLER_ARG: float = 1.0
    OTEL_METRICS_EXPORT_INTERVAL_MILLIS: int = 60000
    OTEL_EXPORTER_OTLP_PROTOCOL: str = "grpc"  # grpc or http/protobuf

    # Validators
    @field_validator("CORS_ORIGINS", mode="before")
    def validate_list_or_string(cls, v: Union[List[str], str]) -> List[str]:
        """Convert comma-separated string to list if needed."""
        if isinstance(v, str):
            if not v.strip():
                return []
            if v == "*":
                return ["*"]
            return [item.strip() for item in v.split(",")]
        return v

    @field_validator("SHORTCUT_PATH_PREFIX", "COLLECTION_PATH_PREFIX")
    def validate_path_prefix(cls, v: str, info: ValidationInfo) -> str:
        """Reject prefixes that would shadow API or crawler routes."""
        prefix = v.strip("/")
        reserved = ("api", "robots.txt", "sitemap.xml", "favicon.ico", "assets")
        if not prefix or prefix.startswith(reserved):
            raise ValueError(f"Invalid {info.field_name}: {v!r}")
        return prefix

    @field_validator("DATABASE_URL", mode="before")
    def validate_database_url(cls, v: Any) -> Optional[str]:
        """Treat an empty override as unset."""
        if v is None or (isinstance(v, str) and not v.strip()):
            return None
        return v

    # Computed fields
    @computed_field
    def SQLALCHEMY_DATABASE_URI(self) -> str:
        """Construct the SQLAlchemy database URI from settings or use override."""
        if self.DATABASE_URL:
            return self.DATABASE_URL

        return f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"


# Create a singleton instance of the settings
settings = Settings()
