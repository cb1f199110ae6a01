"""Runtime configuration."""

from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from CATSORT_* environment variables."""

    # Relocation
    join_char: str = "-"
    metadata_prefix: str = "category: "
    file_pattern: str = "*.txt"
    output_dir: Path = Path(".")

    # Cross-device moves: verify the copy before deleting the source
    verify_copies: bool = True

    # Transaction journals are only written when this is set
    journal_dir: Optional[Path] = None

    model_config = SettingsConfigDict(
        env_prefix="CATSORT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore extra fields from .env
    )


def get_settings() -> Settings:
    """Load settings from the current environment."""
    return Settings()
