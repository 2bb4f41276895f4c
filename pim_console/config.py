"""Application configuration using Pydantic Settings.

Reads configuration from environment variables (``PIM_`` prefix) with
sensible defaults. The API token should be provided via the environment.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Console settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="PIM_",
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

    # =========================================================================
    # Backend API
    # =========================================================================
    api_base_url: str = Field(
        default="http://localhost:8080/api",
        description="PIM REST API base URL",
    )
    api_timeout: float = Field(
        default=30.0,
        gt=0,
        description="API request timeout in seconds",
    )
    api_token: str = Field(
        default="",
        description="Bearer token sent with every request (empty = anonymous)",
    )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def api_timeout_ms(self) -> int:
        """Request timeout in milliseconds."""
        return int(self.api_timeout * 1000)

    # =========================================================================
    # Item creation wizard
    # =========================================================================
    lookup_limit: int = Field(
        default=200,
        ge=1,
        description="Page size used when fetching reference data for the wizard",
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
        description="Output logs as JSON",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Singleton instance for convenience
settings = get_settings()
