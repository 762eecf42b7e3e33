"""
Configuration management for Fragdash.

Uses Pydantic Settings to load configuration from environment variables
with sensible defaults for development. Region patterns and
series filters can be overridden via environment variables or .env file.

Usage:
    from fragdash.config import settings
    print(settings.series_min_year)
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Environment variables can be set directly or via a .env file
    in the project root directory.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # ==========================================================================
    # Region Detection
    # ==========================================================================

    # Matched case-insensitively against tournament, series and league names
    na_region_pattern: str = Field(
        default=r"north.?america|\bamerican\b|\bamericas\b|\bna\b|united.?states",
        description="Regex marking a tournament as North American",
    )
    sa_region_pattern: str = Field(
        default=r"south.?america|latin.?america|\bsam\b|\blatam\b",
        description="Regex that overrides an NA match (South American events)",
    )

    # ==========================================================================
    # Series Listing
    # ==========================================================================

    series_min_year: int = Field(
        default=2024,
        description="Series from earlier years are dropped from summaries",
    )
    multi_region_leagues: dict[int, list[str]] = Field(
        # ESL Challenger League
        default_factory=lambda: {4734: ["North America"]},
        description=(
            "League id -> keywords. Series of these leagues are only kept "
            "when their name contains one of the keywords."
        ),
    )

    # ==========================================================================
    # API Configuration
    # ==========================================================================

    api_host: str = Field(
        default="0.0.0.0",
        description="Host to bind the API server to",
    )
    api_port: int = Field(
        default=8000,
        description="Port for the API server",
    )
    api_reload: bool = Field(
        default=False,
        description="Enable auto-reload for development",
    )

    # ==========================================================================
    # Logging Configuration
    # ==========================================================================

    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )

    # ==========================================================================
    # Validators
    # ==========================================================================

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure log level is valid."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_v = v.upper()
        if upper_v not in valid_levels:
            raise ValueError(f"log_level must be one of {valid_levels}")
        return upper_v


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Using lru_cache ensures we only load settings once,
    which is important because loading from .env can be slow.
    """
    return Settings()


# Convenience alias for importing
settings = get_settings()
