"""Configuration loading from TOML files."""

from pathlib import Path
from typing import Any

import toml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings


class ServerConfig(BaseModel):
    """Server configuration."""

    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False


class DatabaseConfig(BaseModel):
    """Database configuration."""

    url: str = "sqlite+aiosqlite:///./cableindex.db"
    echo: bool = False
    busy_timeout: float = 30.0  # seconds a SQLite writer waits for the write lock


class SequenceConfig(BaseModel):
    """Sequence allocation configuration."""

    ref_padding: int = Field(4, ge=1, le=12)
    duplicate_retries: int = Field(1, ge=0, le=5)


class SiteConfig(BaseModel):
    """Site declared in configuration."""

    name: str
    code: str
    description: str | None = None


class Settings(BaseSettings):
    """Application settings loaded from TOML files."""

    server: ServerConfig = Field(default_factory=ServerConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    sequences: SequenceConfig = Field(default_factory=SequenceConfig)
    sites: list[SiteConfig] = Field(default_factory=list)

    # Paths
    config_dir: Path = Path("config")

    model_config = {"extra": "ignore"}


def load_toml_file(path: Path) -> dict[str, Any]:
    """Load a TOML file, returning empty dict if not found."""
    if path.exists():
        return toml.load(path)
    return {}


def load_settings(config_dir: Path | None = None) -> Settings:
    """Load settings from TOML configuration files.

    Args:
        config_dir: Path to configuration directory. Defaults to ./config

    Returns:
        Populated Settings object
    """
    if config_dir is None:
        config_dir = Path("config")

    config_data = load_toml_file(config_dir / "cableindex.toml")

    # Parse sites if present
    sites = [SiteConfig(**site) for site in config_data.pop("sites", [])]

    return Settings(
        **config_data,
        sites=sites,
        config_dir=config_dir,
    )


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def init_settings(config_dir: Path | None = None) -> Settings:
    """Initialize settings from a specific config directory."""
    global _settings
    _settings = load_settings(config_dir)
    return _settings
