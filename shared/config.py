"""Base configuration with pydantic-settings.

This module provides a base Settings class that applications inherit from.
Each application defines its own Settings with the fields specific to it.

Usage:
    from shared.config import BaseSettings, supabase_url_field

    class Settings(BaseSettings):
        supabase_url: str | None = supabase_url_field(required=False)

    settings = Settings()
"""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings as PydanticBaseSettings, SettingsConfigDict


class BaseSettings(PydanticBaseSettings):
    """Base application settings.

    All fields here are optional with sensible defaults.
    Applications inherit this and add their own fields.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Logging configuration
    service_name: str = Field(
        default="unknown",
        description="Service name for structured logging",
    )
    log_format: Literal["json", "console"] = Field(
        default="console",
        description="Log output format",
    )
    log_level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR)",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure log level is valid."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_v = v.upper()
        if upper_v not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return upper_v


# === Field definitions for reuse in application configs ===


def supabase_url_field(required: bool = True):
    """Supabase project URL field definition."""
    if required:
        return Field(
            ...,
            description="Supabase project URL (without /rest/v1)",
            examples=["https://abcd1234.supabase.co"],
        )
    return Field(
        default=None,
        description="Supabase project URL (optional, without /rest/v1)",
    )


def supabase_key_field(required: bool = True):
    """Supabase publishable (anon) key field definition."""
    if required:
        return Field(
            ...,
            description="Supabase publishable API key",
        )
    return Field(
        default=None,
        description="Supabase publishable API key (optional)",
    )
