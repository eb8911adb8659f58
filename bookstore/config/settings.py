"""
Application settings using pydantic-settings.

Loads configuration from environment variables with validation.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, SecretStr, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class MongoSettings(BaseSettings):
    """MongoDB connection settings."""

    model_config = SettingsConfigDict(
        env_prefix="MONGO_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    host: str = Field(default="localhost", description="MongoDB host")
    port: int = Field(default=27017, ge=1, le=65535, description="MongoDB port")
    username: str | None = Field(default=None, description="MongoDB username")
    password: SecretStr | None = Field(default=None, description="MongoDB password")
    auth_source: str = Field(default="admin", description="Authentication database")
    db_name: str = Field(default="plp_bookstore", description="Database name")
    collection_name: str = Field(default="books", description="Books collection name")

    # Timeouts
    connect_timeout_ms: int = Field(default=5000, ge=1000, description="Connection timeout in ms")
    server_selection_timeout_ms: int = Field(
        default=5000, ge=1000, description="Server selection timeout in ms"
    )

    @computed_field  # type: ignore[misc]
    @property
    def uri(self) -> str:
        """Build MongoDB connection URI."""
        if not self.username:
            return f"mongodb://{self.host}:{self.port}"

        password = self.password.get_secret_value() if self.password else ""
        return (
            f"mongodb://{self.username}:{password}@{self.host}:{self.port}"
            f"/?authSource={self.auth_source}"
        )


class AppSettings(BaseSettings):
    """Application-level settings."""

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    name: str = Field(default="Bookstore Query Runner", description="Application name")
    version: str = Field(default="0.1.0", description="Application version")
    environment: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Environment name",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )

    page_size: int = Field(default=5, ge=1, le=100, description="Books per page")


class Settings(BaseSettings):
    """Main settings container."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    mongo: MongoSettings = Field(default_factory=MongoSettings)
    app: AppSettings = Field(default_factory=AppSettings)


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are loaded only once.
    """
    return Settings()
