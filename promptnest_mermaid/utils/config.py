"""Application configuration.

Only the command line reads these; the compiler itself has fixed geometry and
takes no settings.
"""
from __future__ import annotations

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime settings loaded from .env and environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    output_dir: str = Field(
        default="outputs",
        validation_alias=AliasChoices("PROMPTNEST_OUTPUT_DIR", "OUTPUT_DIR"),
    )
    log_level: str = Field(
        default="WARNING",
        validation_alias=AliasChoices("PROMPTNEST_LOG_LEVEL", "LOG_LEVEL"),
    )
    validate_svg: bool = True  # Re-parse emitted SVG before writing it


settings = Settings()
