"""Application configuration using Pydantic Settings.

Reads configuration from environment variables with sensible defaults.
Secrets (database password) should be provided via environment variables.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # =========================================================================
    # Application
    # =========================================================================
    environment: Literal["prod", "staging", "dev"] = Field(
        default="dev",
        description="Environment name",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode (logs SQL statements)",
    )
    api_prefix: str = Field(
        default="/api",
        description="Prefix for the categories and tags routers",
    )

    # =========================================================================
    # Database
    # =========================================================================
    database_url_override: str = Field(
        default="",
        validation_alias="DATABASE_URL",
        description="Full database URL, takes precedence over the individual parts",
    )
    db_user: str = Field(
        default="postgres",
        description="Database user",
    )
    db_password: str = Field(
        default="",
        description="Database password",
    )
    db_name: str = Field(
        default="category_service",
        description="Database name",
    )
    db_host: str = Field(
        default="localhost",
        description="Database host",
    )
    db_port: int = Field(
        default=5432,
        description="Database port",
    )
    db_pool_size: int = Field(
        default=5,
        description="Database connection pool size",
    )
    db_pool_max_overflow: int = Field(
        default=10,
        description="Max overflow connections beyond pool size",
    )
    db_pool_timeout: float = Field(
        default=10.0,
        description="Seconds to wait for a pooled connection",
    )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def database_url(self) -> str:
        """Build the async database URL.

        A full URL from DATABASE_URL wins; plain ``postgresql://`` URLs are
        switched to the asyncpg driver.
        """
        if self.database_url_override:
            url = self.database_url_override
            if url.startswith("postgresql://"):
                url = "postgresql+asyncpg://" + url[len("postgresql://"):]
            return url
        credentials = self.db_user
        if self.db_password:
            credentials = f"{self.db_user}:{self.db_password}"
        return (
            f"postgresql+asyncpg://{credentials}"
            f"@{self.db_host}:{self.db_port}/{self.db_name}"
        )

    # =========================================================================
    # User service (token verification)
    # =========================================================================
    user_service_url: str = Field(
        default="http://localhost:3001",
        description="Base URL of the user service that validates bearer tokens",
    )
    user_service_timeout: float = Field(
        default=5.0,
        description="User service request timeout in seconds",
    )

    # =========================================================================
    # HTTP
    # =========================================================================
    cors_origins: list[str] = Field(
        default=["http://localhost:3000"],
        description="Origins allowed by CORS",
    )
    cors_allow_credentials: bool = Field(
        default=True,
        description="Allow credentials in CORS requests",
    )
    allow_anonymous_create: bool = Field(
        default=False,
        description="Allow POST /categories and POST /tags without a bearer token",
    )

    # =========================================================================
    # Taxonomy defaults
    # =========================================================================
    default_page_limit: int = Field(
        default=50,
        ge=1,
        description="Page size used by list endpoints when none is given",
    )
    max_page_limit: int = Field(
        default=100,
        ge=1,
        description="Largest page size accepted by list endpoints",
    )
    popular_tags_limit: int = Field(
        default=20,
        ge=1,
        description="Default number of tags returned by /tags/popular",
    )
    slug_max_retries: int = Field(
        default=3,
        ge=0,
        description="Extra attempts when a slug insert loses a uniqueness race",
    )
    seed_default_categories: bool = Field(
        default=True,
        description="Create the default root categories on an empty database",
    )

    # =========================================================================
    # Logging
    # =========================================================================
    log_level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR)",
    )
    log_json: bool = Field(
        default=True,
        description="Output logs as JSON outside of dev",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Singleton instance for convenience
settings = get_settings()
