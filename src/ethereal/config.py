"""
Configuration management for Ethereal.

Uses XDG base directories:
- Config: ~/.config/ethereal/config.toml
- Data: ~/ethereal/ (the journal store)
"""

from pathlib import Path
from typing import Any
import os

# XDG defaults
DEFAULT_CONFIG_HOME = Path.home() / ".config"
DEFAULT_DATA_HOME = Path.home() / "ethereal"


def get_config_dir() -> Path:
    """Get the config directory (XDG_CONFIG_HOME/ethereal)."""
    base = Path(os.environ.get("XDG_CONFIG_HOME", DEFAULT_CONFIG_HOME))
    return base / "ethereal"


def get_ethereal_home() -> Path:
    """Get the ethereal data directory (~/ethereal or ETHEREAL_HOME)."""
    if env_home := os.environ.get("ETHEREAL_HOME"):
        return Path(env_home)
    return DEFAULT_DATA_HOME


def get_config_path() -> Path:
    """Get the path to config.toml."""
    return get_config_dir() / "config.toml"


def get_store_path() -> Path:
    """Get the path to the key-value store file."""
    return get_ethereal_home() / "ethereal.db"


def ensure_dirs() -> None:
    """Ensure all required directories exist."""
    get_config_dir().mkdir(parents=True, exist_ok=True)
    get_ethereal_home().mkdir(parents=True, exist_ok=True)


def load_config() -> dict[str, Any]:
    """
    Load configuration from config.toml.

    Returns default config if file doesn't exist. Sections present in the
    file override the defaults key by key.
    """
    config_path = get_config_path()
    config = get_default_config()

    if not config_path.exists():
        return config

    # Lazy import tomli only when needed
    import tomli

    with open(config_path, "rb") as f:
        loaded = tomli.load(f)

    for section, values in loaded.items():
        if isinstance(values, dict) and isinstance(config.get(section), dict):
            config[section] = {**config[section], **values}
        else:
            config[section] = values
    return config


def get_default_config() -> dict[str, Any]:
    """Return default configuration."""
    return {
        "ai": {
            "model": "gemini-3-flash-preview",
            "base_url": "https://generativelanguage.googleapis.com",
            "schema_revision": "full",  # or "mood" for the mood-only shape
            "temperature": 0.7,
            "timeout": 30.0,
        },
    }
