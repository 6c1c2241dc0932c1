"""Configuration file manager for loading, saving, and managing skillpack settings."""

import json
import os
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from skillpack.config.constants import (
    DEFAULT_CONFIG_PATH,
    ENV_CATALOG_URL,
    ENV_HTTP_TIMEOUT,
    ENV_INSTALL_DIR,
    ENV_LOG_LEVEL,
    ENV_REGISTRY_URL,
    ENV_WORKSPACE,
)
from skillpack.config.schema import SkillpackSettings


class ConfigurationError(Exception):
    """Raised when configuration operations fail."""

    pass


def get_config_path() -> Path:
    """Get the path to the configuration file.

    Returns:
        Path to ~/.skillpack/settings.json
    """
    return DEFAULT_CONFIG_PATH


def load_config(config_path: Path | None = None) -> SkillpackSettings:
    """Load configuration from JSON file.

    Args:
        config_path: Optional path to config file. Defaults to ~/.skillpack/settings.json

    Returns:
        SkillpackSettings loaded from file, or default settings if the file doesn't exist

    Raises:
        ConfigurationError: If file exists but is invalid JSON or fails validation

    Example:
        >>> settings = load_config()
        >>> settings.hub.registry_url
        'https://clawhub.ai'
    """
    if config_path is None:
        config_path = get_config_path()

    if not config_path.exists():
        return SkillpackSettings()

    try:
        with open(config_path, encoding="utf-8") as f:
            data = json.load(f)

        return SkillpackSettings(**data)

    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in configuration file {config_path}: {e}") from e
    except ValidationError as e:
        raise ConfigurationError(f"Configuration validation failed for {config_path}:\n{e}") from e
    except (OSError, TypeError) as e:
        raise ConfigurationError(f"Failed to load configuration from {config_path}: {e}") from e


def save_config(settings: SkillpackSettings, config_path: Path | None = None) -> None:
    """Save configuration to JSON file, omitting null values.

    Args:
        settings: SkillpackSettings instance to save
        config_path: Optional path to config file. Defaults to ~/.skillpack/settings.json

    Raises:
        ConfigurationError: If save operation fails
    """
    if config_path is None:
        config_path = get_config_path()

    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, "w", encoding="utf-8") as f:
            f.write(settings.model_dump_json_minimal())
    except OSError as e:
        raise ConfigurationError(f"Failed to save configuration to {config_path}: {e}") from e


def merge_with_env(settings: SkillpackSettings) -> dict[str, Any]:
    """Collect environment variable overrides.

    Returns a dictionary shaped like the settings model that can be deep
    merged on top of the file settings.

    Args:
        settings: SkillpackSettings instance from file

    Returns:
        Dictionary of environment variable overrides

    Raises:
        ConfigurationError: If SKILLPACK_HTTP_TIMEOUT is not a number
    """
    env_overrides: dict[str, Any] = {}

    if os.getenv(ENV_WORKSPACE):
        env_overrides.setdefault("skills", {})["workspace_dir"] = os.getenv(ENV_WORKSPACE)
    if os.getenv(ENV_INSTALL_DIR):
        env_overrides.setdefault("skills", {})["install_dir"] = os.getenv(ENV_INSTALL_DIR)

    if os.getenv(ENV_REGISTRY_URL):
        env_overrides.setdefault("hub", {})["registry_url"] = os.getenv(ENV_REGISTRY_URL)
    if os.getenv(ENV_CATALOG_URL):
        env_overrides.setdefault("hub", {})["catalog_url"] = os.getenv(ENV_CATALOG_URL)
    if os.getenv(ENV_HTTP_TIMEOUT):
        raw_timeout = os.getenv(ENV_HTTP_TIMEOUT, "")
        try:
            env_overrides.setdefault("hub", {})["timeout"] = float(raw_timeout)
        except ValueError as e:
            raise ConfigurationError(
                f"Invalid {ENV_HTTP_TIMEOUT} value: {raw_timeout!r} (expected seconds)"
            ) from e

    if os.getenv(ENV_LOG_LEVEL):
        env_overrides.setdefault("agent", {})["log_level"] = os.getenv(ENV_LOG_LEVEL)

    return env_overrides


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries, with override taking precedence.

    Args:
        base: Base dictionary
        override: Override dictionary (takes precedence)

    Returns:
        Merged dictionary
    """
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def load_settings(config_path: Path | None = None) -> SkillpackSettings:
    """Load file settings and apply environment overrides on top.

    Raises:
        ConfigurationError: If the file or an override is invalid
    """
    settings = load_config(config_path)
    env_overrides = merge_with_env(settings)
    if not env_overrides:
        return settings

    merged = deep_merge(settings.model_dump(), env_overrides)
    try:
        return SkillpackSettings(**merged)
    except ValidationError as e:
        raise ConfigurationError(f"Environment override validation failed:\n{e}") from e
