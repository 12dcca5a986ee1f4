"""
Application settings and configuration management using Pydantic Settings.
"""
from decimal import Decimal
from functools import lru_cache
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Application Settings
    app_name: str = Field(default="Booking Payment Validation", description="Application name")
    app_env: str = Field(default="development", description="Environment (development, staging, production)")
    debug: bool = Field(default=False, description="Debug mode")
    log_level: str = Field(default="INFO", description="Logging level")

    # Payment Validation
    amount_tolerance: Decimal = Field(
        default=Decimal("0.50"),
        gt=0,
        description="Absolute tolerance between detected and expected amount (strictly less than)"
    )
    confirm_max_hours: int = Field(
        default=2,
        ge=1,
        description="Maximum age in hours of a confirmation accepted by the confirm-payment RPC"
    )

    # Scheduling
    default_slot_interval_minutes: int = Field(default=30, gt=0, description="Default slot interval")
    business_timezone: str = Field(default="Africa/Maputo", description="Business timezone")

    # API Configuration
    api_v1_prefix: str = Field(default="/api/v1", description="API version prefix")
    cors_origins: str = Field(
        default="http://localhost:5173,http://localhost:8080",
        description="Allowed CORS origins (comma-separated)"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is one of the allowed values."""
        allowed_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in allowed_levels:
            raise ValueError(f"log_level must be one of {allowed_levels}")
        return v_upper

    @field_validator("app_env")
    @classmethod
    def validate_app_env(cls, v: str) -> str:
        """Validate environment is one of the allowed values."""
        allowed_envs = ["development", "staging", "production"]
        v_lower = v.lower()
        if v_lower not in allowed_envs:
            raise ValueError(f"app_env must be one of {allowed_envs}")
        return v_lower

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins from comma-separated string to list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.app_env == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.app_env == "development"


@lru_cache
def get_settings() -> Settings:
    """Get the cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
