"""Application settings powered by Pydantic BaseSettings."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """Centralized environment configuration."""

    model_config = SettingsConfigDict(
        env_prefix="", case_sensitive=False, env_file=".env", env_file_encoding="utf-8"
    )

    map_dir: Path = Field(default=Path("maps"), validation_alias="CBI_MAP_DIR")
    template_dir: Path | None = Field(
        default=None, validation_alias="CBI_TEMPLATE_DIR"
    )
    uci_binary: str = Field(default="uci", validation_alias="UCI_BINARY")


def get_settings() -> AppSettings:
    """Get a settings instance."""
    return AppSettings()
