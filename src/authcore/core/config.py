"""Configuration management for authcore.

This module uses Pydantic Settings to load and validate configuration from
environment variables and .env files. Configuration is loaded once at
application startup and is immutable during runtime.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_ACCESS_SECRET = "change-me-access-secret-use-openssl-rand-hex-32"
DEFAULT_REFRESH_SECRET = "change-me-refresh-secret-use-openssl-rand-hex-32"

HMAC_ALGORITHMS = ("HS256", "HS384", "HS512")


class Settings(BaseSettings):
    """Application configuration settings.

    Settings are loaded from environment variables (prefix ``AUTHCORE_``)
    and .env files. All values are validated at startup and frozen.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="AUTHCORE_",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    # Application Settings
    app_name: str = "authcore"
    app_version: str = "0.1.0"
    environment: Literal["development", "production", "testing"] = "development"
    debug: bool = False
    api_prefix: str = "/api/v1"

    # Server Settings
    host: str = "0.0.0.0"
    port: int = 8000
    workers: int = 1

    # Database Settings
    database_url: str = "sqlite+aiosqlite:///./data/authcore.db"
    db_pool_size: int = 5
    db_max_overflow: int = 10
    db_pool_timeout: int = 30
    db_pool_recycle: int = 3600
    db_echo: bool = False

    # Token Settings
    jwt_access_secret: str = Field(
        default=DEFAULT_ACCESS_SECRET,
        description="Secret key for signing access tokens",
    )
    jwt_refresh_secret: str = Field(
        default=DEFAULT_REFRESH_SECRET,
        description="Secret key for signing refresh tokens",
    )
    jwt_algorithm: str = "HS256"
    jwt_issuer: str = "authcore"
    access_token_expire_minutes: int = Field(default=15, gt=0)
    refresh_token_expire_days: int = Field(default=7, gt=0)

    # Password Hashing Settings (Argon2id)
    password_hash_time_cost: int = Field(default=3, ge=1)
    password_hash_memory_cost: int = Field(default=65536, ge=8)  # KiB
    password_hash_parallelism: int = Field(default=4, ge=1)

    # Password Reset Settings
    password_reset_expire_minutes: int = Field(default=60, gt=0)
    password_reset_url: str = "http://localhost:3000/reset-password"

    # CORS Settings
    cors_origins: list[str] = Field(default=["http://localhost:3000"])
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = Field(default=["*"])
    cors_allow_headers: list[str] = Field(default=["*"])

    # Logging Settings
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: Literal["json", "console"] = "json"

    # Bootstrap admin (used by `authcore create-admin`)
    admin_email: str = "admin@example.com"
    admin_password: str | None = None
    admin_name: str = "Admin User"

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: str | list[str]) -> list[str]:
        """Parse CORS origins from comma-separated string or list."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",")]
        return v

    @field_validator("jwt_algorithm")
    @classmethod
    def validate_jwt_algorithm(cls, v: str) -> str:
        """Only symmetric HMAC signing is supported."""
        if v not in HMAC_ALGORITHMS:
            raise ValueError(f"jwt_algorithm must be one of {', '.join(HMAC_ALGORITHMS)}")
        return v

    @model_validator(mode="after")
    def validate_secrets(self) -> "Settings":
        """Access and refresh tokens must be signed with distinct secrets."""
        if self.jwt_access_secret == self.jwt_refresh_secret:
            raise ValueError("jwt_access_secret and jwt_refresh_secret must differ")
        if self.is_production and (
            self.jwt_access_secret == DEFAULT_ACCESS_SECRET
            or self.jwt_refresh_secret == DEFAULT_REFRESH_SECRET
        ):
            raise ValueError("Default signing secrets cannot be used in production")
        return self

    @model_validator(mode="after")
    def validate_sqlite_workers(self) -> "Settings":
        """Validate that SQLite is not used with multiple workers."""
        if self.workers > 1 and self.database_url.startswith("sqlite"):
            raise ValueError(
                "SQLite does not support multiple worker processes. "
                f"Requested {self.workers} workers, but SQLite requires workers=1. "
                "Either use --workers 1 or switch to PostgreSQL."
            )
        return self

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"

    @property
    def is_testing(self) -> bool:
        """Check if running in testing environment."""
        return self.environment == "testing"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Settings are loaded once at startup and reused for the process lifetime.

    Returns:
        Settings: Cached application settings instance.
    """
    return Settings()
