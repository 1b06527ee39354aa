"""Application configuration using pydantic-settings."""
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from services.resolver import DEFAULT_SEARCH_URL


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Database
    database_url: str
    db_pool_size: int = Field(default=5, validation_alias="DB_POOL_SIZE")
    db_max_overflow: int = Field(default=10, validation_alias="DB_MAX_OVERFLOW")

    # CORS - comma-separated list of allowed origins (stored as string, parsed via property)
    cors_origins_str: str = Field(
        default="http://localhost:5173",
        validation_alias="CORS_ORIGINS",
    )

    # Redis - caches each account's command mapping
    redis_url: str = Field(default="redis://localhost:6379", validation_alias="REDIS_URL")
    redis_enabled: bool = Field(default=True, validation_alias="REDIS_ENABLED")
    redis_pool_size: int = Field(default=20, validation_alias="REDIS_POOL_SIZE")

    # Command resolution
    command_cache_ttl: int = Field(default=60, validation_alias="COMMAND_CACHE_TTL")
    request_timeout_seconds: float = Field(
        default=5.0, validation_alias="REQUEST_TIMEOUT_SECONDS",
    )
    default_search_url: str = Field(
        default=DEFAULT_SEARCH_URL,
        validation_alias="DEFAULT_SEARCH_URL",
    )

    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    @field_validator("default_search_url")
    @classmethod
    def validate_search_url_template(cls, value: str) -> str:
        """
        The fallback search URL must format with only a {query} placeholder.

        Any other replacement field would make every fallback fail at request time.
        Literal braces must be doubled ("{{" and "}}").
        """
        if "{query}" not in value:
            raise ValueError(
                f"DEFAULT_SEARCH_URL must contain a '{{query}}' placeholder (got '{value}').",
            )
        try:
            with_query = value.format(query="q")
        except (AttributeError, KeyError, IndexError, ValueError) as e:
            raise ValueError(
                f"DEFAULT_SEARCH_URL may only use the '{{query}}' placeholder (got '{value}'): {e!r}",
            ) from e
        if with_query == value.format(query=""):
            raise ValueError(
                f"DEFAULT_SEARCH_URL placeholder must not be escaped (got '{value}').",
            )
        return value

    @field_validator("command_cache_ttl")
    @classmethod
    def validate_cache_ttl(cls, value: int) -> int:
        """Redis SETEX rejects non-positive expiry times."""
        if value <= 0:
            raise ValueError("COMMAND_CACHE_TTL must be a positive number of seconds")
        return value

    @property
    def cors_origins(self) -> list[str]:
        """Parse comma-separated CORS origins string into a list."""
        if not self.cors_origins_str:
            return []
        return [origin.strip() for origin in self.cors_origins_str.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
