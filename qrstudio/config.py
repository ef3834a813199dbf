from __future__ import annotations

from functools import lru_cache

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables from a .env file if present (local dev only)
load_dotenv()


class Settings(BaseSettings):
    """Service configuration loaded from environment variables or .env file."""

    model_config = SettingsConfigDict(
        env_prefix="QRSTUDIO_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # General
    log_level: str = Field("INFO", description="Root logging level.")
    cors_allow_origins: list[str] = Field(default_factory=lambda: ["*"])

    # Barcode rendering
    quiet_zone_modules: int = Field(2, ge=0, description="Quiet zone width, in modules.")

    # Logo retrieval
    logo_max_bytes: int = Field(500 * 1024, ge=1, description="Maximum logo download size in bytes.")
    logo_timeout_seconds: float = Field(8.0, gt=0, description="Ceiling for the whole logo download.")

    # Response
    cache_max_age_seconds: int = Field(86400, ge=0)
    download_filename: str = Field("qrcode.png")


@lru_cache()
def get_settings() -> Settings:
    """Return a cached Settings instance so it is only parsed once."""

    return Settings()
