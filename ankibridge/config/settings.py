"""
Application settings and configuration management.

Uses Pydantic Settings for validation and environment variable support.
"""

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_ANKI_CONNECT_URL = "http://localhost:8765"


class AnkiConnectSettings(BaseSettings):
    """AnkiConnect endpoint configuration."""

    url: str = Field(
        default=DEFAULT_ANKI_CONNECT_URL,
        description="AnkiConnect HTTP endpoint. Anki must be running with the add-on enabled.",
    )

    model_config = SettingsConfigDict(env_prefix="ANKI_")


class ServerSettings(BaseSettings):
    """Identity advertised to MCP clients during the initialization handshake."""

    name: str = Field(default="anki-connect", description="MCP server name")
    version: str = Field(default="1.0.0", description="MCP server version")

    model_config = SettingsConfigDict(env_prefix="SERVER_")


class Settings(BaseSettings):
    """Main application settings."""

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Logging level"
    )
    log_file: Path | None = Field(default=None, description="Log file path")

    # Sub-configurations
    anki: AnkiConnectSettings = Field(default_factory=AnkiConnectSettings)
    server: ServerSettings = Field(default_factory=ServerSettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )


def load_settings(env_file: str | Path | None = None) -> Settings:
    """
    Load settings from file and environment.

    Args:
        env_file: Path to .env file (optional)

    Returns:
        Loaded settings instance
    """
    if env_file:
        return Settings(_env_file=env_file)
    return Settings()
