# salon_backend/core/config.py

"""
Application configuration backed by environment variables.

Business settings that administrators change at runtime (deductions,
default commission rate) live in the ``payroll_settings`` table; this
module only carries deployment-level knobs.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Deployment settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Database Configuration
    database_url: str = Field(
        default="sqlite:///./salon_payroll.db", description="SQLAlchemy database URL"
    )
    db_pool_size: int = 10
    db_max_overflow: int = 20
    log_sql_queries: bool = False
    create_tables_on_startup: bool = Field(
        default=True, description="Create missing tables when the API starts"
    )

    # Environment Settings
    environment: str = "development"
    log_level: str = "INFO"

    # Payroll Engine
    payroll_query_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Timeout for appointment and bonus lookups",
    )
    payroll_batch_concurrency: int = Field(
        default=5,
        ge=1,
        description="Maximum staff members calculated at the same time",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Invalid log level: {v}")
        return level

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()

