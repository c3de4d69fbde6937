"""
Configuration — typed, validated settings loaded from environment/.env.

Uses pydantic-settings to:
  - Load from environment variables (12-factor app)
  - Fall back to .env file
  - Validate types and constraints at startup

Only AppSettings is a BaseSettings instance. SourceSettings is a plain
BaseModel populated via env_nested_delimiter="__", so the env var
SOURCES__DIRECTORY maps to sources.directory.
"""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ccadb_capabilities.store import CAPABILITY_CSV, SKI_SPKI_CSV

# Resolve the .env file relative to the project root (two levels above this file),
# so settings load correctly regardless of the working directory at runtime.
_ENV_FILE = Path(__file__).parent.parent.parent / ".env"


class SourceSettings(BaseModel):
    """
    Where the CCADB tables are read from.

    With no directory the tables bundled in the package (ccadb_capabilities/data/)
    are used; otherwise both file names are resolved inside `directory`.
    """

    directory: Path | None = Field(
        default=None,
        description="Directory holding the CSV exports (default: bundled package data)",
    )
    capability_csv: str = Field(
        default=CAPABILITY_CSV,
        min_length=1,
        description="File name of the CCADB All Certificate Records CSV",
    )
    ski_spki_csv: str = Field(
        default=SKI_SPKI_CSV,
        min_length=1,
        description="File name of the key identifier → SPKI SHA-256 CSV",
    )


class AppSettings(BaseSettings):
    """
    Root application settings.

    Load order (highest priority first):
      1. Environment variables
      2. .env file
      3. Default values
    """

    model_config = SettingsConfigDict(
        env_file=_ENV_FILE,
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    sources: SourceSettings = Field(default_factory=SourceSettings)
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Accept only the standard logging level names, case-insensitively."""
        level = value.strip().upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level: {value!r}")
        return level
