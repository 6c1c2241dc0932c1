"""Pydantic models for skillpack configuration schema."""

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator

from skillpack.config.constants import (
    DEFAULT_CATALOG_URL,
    DEFAULT_DATA_DIR,
    DEFAULT_HTTP_TIMEOUT,
    DEFAULT_LOG_FILE_NAME,
    DEFAULT_REGISTRY_URL,
    DEFAULT_SEARCH_LIMIT,
    WORKSPACE_SKILLS_SUBDIR,
)

VALID_LOG_LEVELS = {"debug", "info", "warning", "error", "critical"}


def _expand(v: str | None) -> str | None:
    if v is None or not str(v).strip():
        return None
    return str(Path(v).expanduser())


class SkillsConfig(BaseModel):
    """Skill roots and install location."""

    workspace_dir: str | None = Field(
        default=None,
        description="Workspace holding .agents/skills and skills/ (default: current directory).",
    )
    install_dir: str | None = Field(
        default=None,
        description="Directory skills are installed into. Defaults to <workspace>/skills.",
    )
    extra_roots: list[str] = Field(
        default_factory=list,
        description="Additional skill roots scanned after the fixed roots (highest precedence).",
    )
    include_personal_root: bool = Field(
        default=True,
        description="Scan ~/.agents/skills as the lowest-precedence root",
    )

    @field_validator("workspace_dir", "install_dir")
    @classmethod
    def expand_dir(cls, v: str | None) -> str | None:
        """Expand user home directory in paths."""
        return _expand(v)

    @field_validator("extra_roots")
    @classmethod
    def expand_extra_roots(cls, v: list[str]) -> list[str]:
        """Expand user home directory and drop blank entries."""
        return [path for path in (_expand(item) for item in v) if path]


class HubConfig(BaseModel):
    """Remote registry and catalog configuration."""

    registry_url: str = DEFAULT_REGISTRY_URL
    catalog_url: str = DEFAULT_CATALOG_URL
    timeout: float = Field(default=DEFAULT_HTTP_TIMEOUT, gt=0)
    search_limit: int = Field(default=DEFAULT_SEARCH_LIMIT, ge=1, le=100)


class AgentConfig(BaseModel):
    """Application-level configuration."""

    data_dir: str = str(DEFAULT_DATA_DIR)
    log_level: str = "info"

    @field_validator("data_dir")
    @classmethod
    def expand_data_dir(cls, v: str) -> str:
        """Expand user home directory in data_dir."""
        return str(Path(v).expanduser())

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level name."""
        level = v.strip().lower()
        if level not in VALID_LOG_LEVELS:
            raise ValueError(
                f"Invalid log level: {v}. Valid levels: {sorted(VALID_LOG_LEVELS)}"
            )
        return level


class MemoryConfig(BaseModel):
    """Markdown memory store configuration."""

    enabled: bool = True
    workspace_dir: str | None = None

    @field_validator("workspace_dir")
    @classmethod
    def expand_workspace_dir(cls, v: str | None) -> str | None:
        """Expand user home directory in workspace_dir."""
        return _expand(v)


class SkillpackSettings(BaseModel):
    """Root configuration model for skillpack settings."""

    version: str = "1.0"
    agent: AgentConfig = Field(default_factory=AgentConfig)
    skills: SkillsConfig = Field(default_factory=SkillsConfig)
    hub: HubConfig = Field(default_factory=HubConfig)
    memory: MemoryConfig = Field(default_factory=MemoryConfig)

    def model_dump_json_minimal(self) -> str:
        """Dump model to JSON without null values.

        Example:
            >>> settings = SkillpackSettings()
            >>> "workspace_dir" in settings.model_dump_json_minimal()
            False
        """
        return json.dumps(self.model_dump(exclude_none=True), indent=2)

    @property
    def agent_data_dir(self) -> Path:
        """Get data directory as Path object (~/.skillpack by default)."""
        return Path(self.agent.data_dir).expanduser()

    @property
    def log_file(self) -> Path:
        """Get log file path (data_dir/logs/skillpack.log)."""
        return self.agent_data_dir / "logs" / DEFAULT_LOG_FILE_NAME

    @property
    def workspace_path(self) -> Path:
        """Get workspace directory, defaulting to the current directory."""
        if self.skills.workspace_dir:
            return Path(self.skills.workspace_dir)
        return Path.cwd()

    @property
    def install_path(self) -> Path:
        """Get install directory, defaulting to <workspace>/skills."""
        if self.skills.install_dir:
            return Path(self.skills.install_dir)
        return self.workspace_path / WORKSPACE_SKILLS_SUBDIR

    @property
    def memory_workspace_path(self) -> Path:
        """Get memory workspace, defaulting to the skills workspace."""
        if self.memory.workspace_dir:
            return Path(self.memory.workspace_dir)
        return self.workspace_path

    @classmethod
    def get_json_schema(cls) -> dict[str, Any]:
        """Get JSON schema for the settings model."""
        return cls.model_json_schema()
