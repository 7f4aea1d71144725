from functools import lru_cache
import os

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .config_models import CacheConfig, DatabaseConfig, LoggingConfig, ServerConfig


class Settings(BaseSettings):
    """Application settings assembled from environment variables and defaults."""

    # Environment
    environment: str = Field(default="development", pattern="^(development|staging|production)$")
    debug: bool = Field(default=False)

    # API
    api_title: str = Field(default="PostCMS API")
    api_version: str = Field(default="1.0.0")
    api_description: str = Field(default="Content management API for posts, types and taxonomies")

    # Server
    server: ServerConfig = ServerConfig()

    # Logging
    logging: LoggingConfig = LoggingConfig()

    # Model cache
    cache: CacheConfig = CacheConfig()

    # Database (populated in validator)
    database: DatabaseConfig | None = None

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    def __init__(self, **values):
        # Ensure plain ValueError is raised (not Pydantic ValidationError)
        if not os.getenv("DATABASE_URL"):
            raise ValueError("DATABASE_URL environment variable is required")
        super().__init__(**values)

    @model_validator(mode="after")
    def _assemble_subconfigs(self):
        """Assemble nested configurations from environment variables."""
        database_url = os.getenv("DATABASE_URL")

        pool_size = int(os.getenv("DB_POOL_SIZE", "10"))
        max_overflow = int(os.getenv("DB_MAX_OVERFLOW", "20"))
        pool_timeout = int(os.getenv("DB_POOL_TIMEOUT", "30"))
        echo = self.environment == "development" and self.debug

        self.database = DatabaseConfig(
            url=database_url,
            echo=echo,
            pool_size=pool_size,
            max_overflow=max_overflow,
            pool_timeout=pool_timeout,
        )

        self.cache = CacheConfig(
            enabled=os.getenv("MODEL_CACHE_ENABLED", "true").strip().lower() in ("1", "true", "yes", "on"),
            ttl_seconds=int(os.getenv("MODEL_CACHE_TTL_SECONDS", str(self.cache.ttl_seconds))),
            max_entries=int(os.getenv("MODEL_CACHE_MAX_ENTRIES", str(self.cache.max_entries))),
        )

        # Adjust logging for environment
        if self.environment == "production":
            self.logging.level = "WARNING"
        elif self.environment == "development":
            self.logging.level = "DEBUG"

        # LOG_LEVELS="core.cache=DEBUG,core.hooks=INFO"
        for item in os.getenv("LOG_LEVELS", "").split(","):
            name, _, level = item.partition("=")
            if name.strip() and level.strip():
                self.logging.loggers[name.strip()] = level.strip().upper()

        check_flag = os.getenv("DB_CHECK_ON_START")
        if isinstance(check_flag, str):
            self.server.check_db_on_start = check_flag.strip().lower() in (
                "1",
                "true",
                "yes",
                "on",
            )

        schema_flag = os.getenv("DB_CREATE_SCHEMA_ON_START")
        if isinstance(schema_flag, str):
            self.server.create_schema_on_start = schema_flag.strip().lower() in ("1", "true", "yes", "on")

        return self


@lru_cache
def get_settings() -> "Settings":
    """Return cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
