"""Configuration package for skillpack."""

from .manager import (
    ConfigurationError,
    deep_merge,
    get_config_path,
    load_config,
    load_settings,
    merge_with_env,
    save_config,
)
from .schema import AgentConfig, HubConfig, MemoryConfig, SkillpackSettings, SkillsConfig

__all__ = [
    # Schema
    "SkillpackSettings",
    "AgentConfig",
    "SkillsConfig",
    "HubConfig",
    "MemoryConfig",
    # Manager
    "ConfigurationError",
    "get_config_path",
    "load_config",
    "load_settings",
    "save_config",
    "merge_with_env",
    "deep_merge",
]
