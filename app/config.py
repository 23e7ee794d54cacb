"""
Client configuration with Pydantic Settings for validation and type safety.
Values come from environment variables (prefixed with NIDUS_) or a .env file.
"""

from enum import Enum
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator


class Environment(str, Enum):
    """Application environment types"""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


class Settings(BaseSettings):
    """
    Client and sandbox settings with validation.
    Settings are loaded from environment variables or .env file.
    """

    # Application settings
    app_name: str = Field(default="Nidus", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    environment: Environment = Field(
        default=Environment.DEVELOPMENT, description="Application environment"
    )
    debug: bool = Field(default=False, description="Debug mode")

    # Remote API
    api_base_url: str = Field(
        default="https://nidus-845c224671ea.herokuapp.com/api",
        description="Base URL of the ordering API",
    )
    request_timeout_sec: float = Field(
        default=30.0, gt=0, description="HTTP request timeout in seconds"
    )

    # Local storage for tokens and the cart
    local_db_url: str = Field(
        default="sqlite:///./nidus_local.db",
        description="SQLAlchemy URL of the local client store",
    )
    db_echo: bool = Field(default=False, description="SQLAlchemy echo SQL statements")

    # Money and uploads
    currency_symbol: str = Field(default="₴", description="Currency symbol")
    max_upload_bytes: int = Field(
        default=5 * 1024 * 1024, gt=0, description="Maximum image upload size"
    )

    # Order history
    order_history_page_size: int = Field(
        default=20, ge=1, description="Orders requested per history page"
    )

    # Sandbox server settings
    sandbox_host: str = Field(default="127.0.0.1", description="Sandbox server host")
    sandbox_port: int = Field(
        default=8000, ge=1, le=65535, description="Sandbox server port"
    )
    api_prefix: str = Field(default="/api", description="Sandbox API route prefix")
    api_title: str = Field(default="Nidus Sandbox API", description="API title")

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(
        default="%(asctime)s %(levelname)s %(name)s: %(message)s",
        description="Log format string",
    )

    model_config = SettingsConfigDict(
        env_prefix="NIDUS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("environment", mode="before")
    @classmethod
    def validate_environment(cls, v):
        """Validate and normalize environment value"""
        if isinstance(v, str):
            return Environment(v.lower())
        return v

    @field_validator("api_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    def is_production(self) -> bool:
        """Check if running in production environment"""
        return self.environment == Environment.PRODUCTION

    def is_development(self) -> bool:
        """Check if running in development environment"""
        return self.environment == Environment.DEVELOPMENT


# Global settings instance
settings = Settings()
