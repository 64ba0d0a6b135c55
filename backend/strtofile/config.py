"""
StrToFile Backend — Application Configuration
===============================================

What:  Centralized configuration management using Pydantic Settings.
How:   Pydantic Settings reads from environment variables (or a .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Imported by every module that needs configuration values.
When:  Loaded once at module import time; validated before the app starts.
"""

from pydantic_settings import BaseSettings
from pydantic import Field, field_validator
from typing import List


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have working defaults for development; attributes are grouped
    by concern.
    """

    # ── Service Identity ──────────────────────────────────────────────────
    app_name: str = Field(default="StrToFile API")
    app_description: str = Field(
        default="String-to-file ZIP service: pack text records into a ZIP download "
                "and parse uploaded ZIP archives back into text records."
    )

    # ── Server ────────────────────────────────────────────────────────────
    backend_host: str = Field(default="0.0.0.0")
    backend_port: int = Field(default=8000, ge=1024, le=65535)

    # Comma-separated origins; "*" allows any origin
    cors_origins: str = Field(default="*")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    # ── Request Limits ────────────────────────────────────────────────────
    # Upper bound on request bodies (JSON record lists and ZIP uploads).
    # Default: 100MB = 100 * 1024 * 1024
    max_request_body_size: int = Field(default=104_857_600, ge=1_048_576)

    # ── Archive Output ────────────────────────────────────────────────────
    # Deflate level for every entry; 9 is the best ratio zlib offers
    zip_compress_level: int = Field(default=9, ge=1, le=9)

    # Prefix used by generate_archive_filename when the caller passes none
    default_archive_prefix: str = Field(default="files", min_length=1)

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }


# Singleton instance — imported throughout the application
settings = Settings()
