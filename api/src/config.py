"""
FastAPI application configuration using Pydantic Settings.

Provides centralized configuration for:
- API settings (name, version, bind address)
- Database connections (PostgreSQL pool)
- Pagination limits
- Logging and monitoring

All settings support environment variable overrides and .env file loading.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator
from functools import lru_cache
from urllib.parse import quote


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables with the
    prefix "CLASS_BOOKING_" (e.g., CLASS_BOOKING_POSTGRES_HOST).

    Environment variables are loaded from:
    1. System environment
    2. .env file in the current directory
    3. Default values defined below
    """

    # =========================================================================
    # API Settings
    # =========================================================================

    app_name: str = Field(
        default="class-booking-api",
        description="Application name"
    )
    app_version: str = Field(
        default="0.1.0",
        description="API version"
    )

    debug: bool = Field(
        default=False,
        description="Debug mode - enables verbose logging and error traces"
    )
    environment: str = Field(
        default="production",
        description="Environment: development|staging|production"
    )

    host: str = Field(
        default="0.0.0.0",
        description="API bind host"
    )
    port: int = Field(
        default=8080,
        description="API bind port",
        gt=0,
        lt=65536
    )

    # =========================================================================
    # Database Settings (PostgreSQL)
    # =========================================================================

    postgres_host: str = Field(
        default="localhost",
        description="PostgreSQL hostname"
    )
    postgres_port: int = Field(
        default=5432,
        description="PostgreSQL port",
        gt=0,
        lt=65536
    )
    postgres_user: str = Field(
        default="class_booking",
        description="PostgreSQL user to connect as"
    )
    postgres_password: str = Field(
        default="class_booking",
        description="PostgreSQL password"
    )
    postgres_database: str = Field(
        default="class_booking",
        description="PostgreSQL database name"
    )
    postgres_ssl_mode: str = Field(
        default="disable",
        description="PostgreSQL sslmode: disable|prefer|require|verify-ca|verify-full"
    )

    postgres_min_connections: int = Field(
        default=1,
        description="Minimum connections kept open in the pool",
        ge=0,
        le=100
    )
    postgres_max_connections: int = Field(
        default=3,
        description="Maximum connections in the pool",
        gt=0,
        le=100
    )
    postgres_command_timeout: float = Field(
        default=30.0,
        description="Per-statement timeout (seconds)",
        gt=0
    )

    run_migrations: bool = Field(
        default=True,
        description="Apply pending schema migrations on startup"
    )

    # =========================================================================
    # Pagination Settings
    # =========================================================================

    pagination_max_limit: int = Field(
        default=100,
        description="Maximum page size; also used when no limit is given",
        gt=0,
        le=1000
    )

    # =========================================================================
    # Monitoring and Logging
    # =========================================================================

    metrics_enabled: bool = Field(
        default=True,
        description="Expose Prometheus metrics on /metrics"
    )

    log_level: str = Field(
        default="INFO",
        description="Log level: DEBUG|INFO|WARNING|ERROR|CRITICAL"
    )
    log_format: str = Field(
        default="json",
        description="Log format: json|text"
    )

    # =========================================================================
    # Validators
    # =========================================================================

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is one of the allowed values."""
        allowed = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in allowed:
            raise ValueError(f"log_level must be one of {allowed}, got: {v}")
        return v_upper

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment is one of the allowed values."""
        allowed = ["development", "staging", "production"]
        v_lower = v.lower()
        if v_lower not in allowed:
            raise ValueError(f"environment must be one of {allowed}, got: {v}")
        return v_lower

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Validate log format."""
        allowed = ["json", "text"]
        v_lower = v.lower()
        if v_lower not in allowed:
            raise ValueError(f"log_format must be one of {allowed}, got: {v}")
        return v_lower

    @field_validator("postgres_ssl_mode")
    @classmethod
    def validate_ssl_mode(cls, v: str) -> str:
        """Validate PostgreSQL sslmode."""
        allowed = ["disable", "allow", "prefer", "require", "verify-ca", "verify-full"]
        v_lower = v.lower()
        if v_lower not in allowed:
            raise ValueError(f"postgres_ssl_mode must be one of {allowed}, got: {v}")
        return v_lower

    # =========================================================================
    # Computed Properties
    # =========================================================================

    @property
    def database_dsn(self) -> str:
        """Build the asyncpg connection DSN from the individual fields."""
        return (
            f"postgresql://{quote(self.postgres_user, safe='')}:"
            f"{quote(self.postgres_password, safe='')}"
            f"@{self.postgres_host}:{self.postgres_port}/"
            f"{quote(self.postgres_database, safe='')}"
            f"?sslmode={self.postgres_ssl_mode}"
        )

    @property
    def pool_min_size(self) -> int:
        """Minimum pool size, never above the maximum."""
        return min(self.postgres_min_connections, self.postgres_max_connections)

    # =========================================================================
    # Model Config
    # =========================================================================

    model_config = SettingsConfigDict(
        env_prefix="CLASS_BOOKING_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        validate_default=True,
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are loaded only once and shared
    across the application.

    Returns:
        Settings: Cached settings instance

    Example:
        >>> from api.src.config import get_settings
        >>> settings = get_settings()
        >>> print(settings.postgres_host)
        localhost
    """
    return Settings()


def clear_settings_cache():
    """
    Clear the settings cache.

    Useful for testing when you need to reload settings with different
    environment variables.
    """
    get_settings.cache_clear()
