"""Application configuration via environment variables.

Provides type-safe settings loading using pydantic-settings.
Environment variables can be loaded from a .env file.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    All settings have sensible defaults for development.
    Production deployments MUST set security-critical values.

    Environment Variables:
        DATABASE_URL: SQLAlchemy connection string (local SQLite file by default)
        JWT_SECRET: JWT signing key (MUST be set in production)
        JWT_EXPIRY_MINUTES: Access token lifetime in minutes
        PASSWORD_PEPPER: Password hashing pepper (MUST be set in production)
        LOG_LEVEL: Logging level (default INFO)
        LOG_JSON: Emit JSON log lines (default True)
        BOOTSTRAP_ADMIN_*: Seed administrator account created by init_db()
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Database
    DATABASE_URL: str = "sqlite:///./transcribeflow.db"

    # Security
    JWT_SECRET: str = "dev-jwt-secret-CHANGE-IN-PRODUCTION"
    JWT_EXPIRY_MINUTES: int = 60
    PASSWORD_PEPPER: str = "dev-pepper-key-CHANGE-IN-PRODUCTION"

    # Bootstrap administrator (seeded once)
    BOOTSTRAP_ADMIN_NAME: str = "Admin"
    BOOTSTRAP_ADMIN_EMAIL: str = "admin@admin.com"
    BOOTSTRAP_ADMIN_PHONE: str = "11999999999"
    BOOTSTRAP_ADMIN_PASSWORD: str = "admin"

    # Application
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True
    ENVIRONMENT: str = "development"
    CORS_ORIGINS: str = "http://localhost:8081,http://localhost:19006"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance.

    Uses lru_cache for singleton behavior.
    Call get_settings.cache_clear() to reload settings.
    """
    return Settings()
