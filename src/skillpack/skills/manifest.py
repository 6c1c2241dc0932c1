"""Skill manifest schema and parsing.

This module defines Pydantic models for SKILL.md front matter and the
runtime skill metadata, and provides utilities for splitting and parsing
YAML front matter.

The SKILL.md format follows this structure:
```yaml
---
name: skill-name
description: Brief description of the skill
platforms: [linux, macos]
deps: [git, jq]
version: 1.0.0
---

# Skill Documentation
Markdown instructions for using the skill...
```

The closing delimiter may also be `...`. A UTF-8 byte order mark before
the opening delimiter is ignored.
"""

import logging
from datetime import date, datetime
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from skillpack.skills.availability import normalize_platform

logger = logging.getLogger(__name__)

SKILL_FILE_NAME = "SKILL.md"

_BOM = "\ufeff"


def _as_str_list(value: Any) -> list[str]:
    """Coerce a YAML scalar or sequence into a list of strings."""
    if value is None:
        return []
    if isinstance(value, (list, tuple, set)):
        return [str(item) for item in value if item is not None]
    return [str(value)]


def _as_optional_str(value: Any) -> str | None:
    """Coerce YAML scalars (numbers, dates) into strings."""
    if value is None:
        return None
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, (dict, list)):
        raise ValueError("expected a scalar value")
    return str(value)


class SkillCompatibility(BaseModel):
    """Nested `compatibility` block of the front matter."""

    os: list[str] = Field(default_factory=list)
    deps: list[str] = Field(default_factory=list)

    model_config = ConfigDict(extra="ignore")

    @field_validator("os", "deps", mode="before")
    @classmethod
    def coerce_list(cls, v: Any) -> list[str]:
        return _as_str_list(v)


class SkillFrontmatter(BaseModel):
    """Pydantic model for SKILL.md YAML front matter.

    All fields are optional. Unknown fields are ignored so manifests written
    for other agents still load.

    Example:
        >>> fm = SkillFrontmatter(name="weather", description="Check weather")
        >>> fm.platforms
        []
    """

    name: str | None = None
    description: str = ""
    platforms: list[str] = Field(default_factory=list)
    deps: list[str] = Field(default_factory=list)
    compatibility: SkillCompatibility = Field(default_factory=SkillCompatibility)
    source: str | None = None
    version: str | None = None
    updated_at: str | None = None

    model_config = ConfigDict(extra="ignore")

    @field_validator("platforms", "deps", mode="before")
    @classmethod
    def coerce_list(cls, v: Any) -> list[str]:
        return _as_str_list(v)

    @field_validator("name", "source", "version", "updated_at", mode="before")
    @classmethod
    def coerce_scalar(cls, v: Any) -> str | None:
        return _as_optional_str(v)

    @field_validator("description", mode="before")
    @classmethod
    def coerce_description(cls, v: Any) -> str:
        return _as_optional_str(v) or ""

    @field_validator("compatibility", mode="before")
    @classmethod
    def coerce_compatibility(cls, v: Any) -> Any:
        return {} if v is None else v


class SkillMetadata(BaseModel):
    """Runtime metadata for a skill found under a skills root.

    Fields:
        name: Skill name (front matter name, or directory name when blank)
        description: Description from front matter
        dir_path: Absolute path to the skill directory
        platforms: Normalized, sorted, unique platform tags
        deps: Sorted, unique executable names that must be on PATH
        source: Front matter source, or the tag of the root it was found in
        version: Optional version string
        updated_at: Optional update timestamp string
    """

    name: str
    description: str = ""
    dir_path: Path
    platforms: list[str] = Field(default_factory=list)
    deps: list[str] = Field(default_factory=list)
    source: str
    version: str | None = None
    updated_at: str | None = None


def split_frontmatter(content: str) -> tuple[str, str] | None:
    """Split SKILL.md content into raw YAML and body.

    The first line must be exactly `---`. The block ends at the first line
    that is exactly `---` or `...`. The body is everything after the closing
    line, stripped.

    Args:
        content: Full SKILL.md file content

    Returns:
        Tuple of (yaml_text, body) or None if there is no complete front matter block
    """
    content = content.removeprefix(_BOM)
    lines = content.splitlines(keepends=True)
    if not lines or lines[0].rstrip("\r\n") != "---":
        return None

    for index, line in enumerate(lines[1:], start=1):
        if line.rstrip("\r\n") in ("---", "..."):
            yaml_text = "".join(lines[1:index])
            body = "".join(lines[index + 1 :]).strip()
            return yaml_text, body

    return None


def parse_frontmatter(content: str) -> tuple[SkillFrontmatter, str] | None:
    """Parse SKILL.md front matter and body.

    Args:
        content: Full SKILL.md file content

    Returns:
        Tuple of (front matter, body), or None if the front matter is missing,
        empty, not a mapping, or fails YAML or model validation
    """
    split = split_frontmatter(content)
    if split is None:
        return None

    yaml_text, body = split
    if not yaml_text.strip():
        return None

    try:
        data = yaml.safe_load(yaml_text)
    except yaml.YAMLError as e:
        logger.debug(f"Invalid YAML front matter: {e}")
        return None

    if not isinstance(data, dict):
        return None

    try:
        return SkillFrontmatter.model_validate(data), body
    except Exception as e:
        logger.debug(f"Invalid SKILL.md front matter: {e}")
        return None


def _normalized_unique(values: list[str], transform) -> list[str]:
    cleaned = {transform(value) for value in values}
    cleaned.discard("")
    return sorted(cleaned)


def parse_skill_md(
    content: str, dir_path: Path, default_source: str
) -> tuple[SkillMetadata, str] | None:
    """Build runtime metadata and instructions from SKILL.md content.

    Args:
        content: Full SKILL.md file content
        dir_path: Skill directory (used for the fallback name)
        default_source: Root tag used when the manifest has no `source`

    Returns:
        Tuple of (SkillMetadata, body), or None if the manifest is not parseable
    """
    parsed = parse_frontmatter(content)
    if parsed is None:
        return None

    fm, body = parsed

    name = (fm.name or "").strip()
    if not name:
        name = dir_path.name
    if not name:
        return None

    platforms = _normalized_unique(fm.platforms + fm.compatibility.os, normalize_platform)
    deps = _normalized_unique(fm.deps + fm.compatibility.deps, str.strip)

    source = (fm.source or "").strip() or default_source
    version = (fm.version or "").strip() or None
    updated_at = (fm.updated_at or "").strip() or None

    metadata = SkillMetadata(
        name=name,
        description=fm.description,
        dir_path=dir_path,
        platforms=platforms,
        deps=deps,
        source=source,
        version=version,
        updated_at=updated_at,
    )
    return metadata, body


def read_skill_name(skill_md_path: Path) -> str | None:
    """Read the front matter `name` of a SKILL.md file.

    Args:
        skill_md_path: Path to SKILL.md

    Returns:
        Stripped name, or None when the front matter has no name or does not parse

    Raises:
        OSError: If the file cannot be read
    """
    content = skill_md_path.read_text(encoding="utf-8", errors="replace")
    parsed = parse_frontmatter(content)
    if parsed is None or parsed[0].name is None:
        return None
    return parsed[0].name.strip()
