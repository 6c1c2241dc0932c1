"""Skill discovery inside an acquired source tree.

Walks a directory tree collecting every directory that contains SKILL.md,
skipping dependency caches, build output and version control metadata.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from skillpack.skills.errors import SkillManifestError
from skillpack.skills.manifest import SKILL_FILE_NAME, read_skill_name

logger = logging.getLogger(__name__)

PRUNED_DIR_NAMES = frozenset(
    {".git", "node_modules", "dist", "build", "__pycache__", "target", ".venv", "venv"}
)


@dataclass(frozen=True)
class DiscoveredSkill:
    """A directory holding SKILL.md, with its front matter name if any."""

    dir: Path
    name: str | None = None


def _read_name(skill_md: Path) -> str | None:
    try:
        return read_skill_name(skill_md)
    except OSError as e:
        raise SkillManifestError(f"failed to read {skill_md}: {e}") from e


def discover_skills(root: Path) -> list[DiscoveredSkill]:
    """Find every skill directory under `root`.

    The root itself is checked first. Each directory is reported once, in
    walk order.

    Args:
        root: Directory to search

    Returns:
        Discovered skills in walk order

    Raises:
        SkillManifestError: If a SKILL.md file cannot be read
    """
    root = root.resolve()
    found: list[DiscoveredSkill] = []
    seen: set[Path] = set()

    root_manifest = root / SKILL_FILE_NAME
    if root_manifest.is_file():
        found.append(DiscoveredSkill(dir=root, name=_read_name(root_manifest)))
        seen.add(root)

    for dirpath, dirnames, filenames in os.walk(root, followlinks=False):
        pruned = [name for name in dirnames if name in PRUNED_DIR_NAMES]
        if pruned:
            logger.debug(f"Skipping {', '.join(pruned)} under {dirpath}")
        dirnames[:] = sorted(name for name in dirnames if name not in PRUNED_DIR_NAMES)

        if SKILL_FILE_NAME not in filenames:
            continue

        skill_md = Path(dirpath) / SKILL_FILE_NAME
        if not skill_md.is_file():
            continue

        skill_dir = Path(dirpath).resolve()
        if skill_dir in seen:
            continue
        seen.add(skill_dir)
        found.append(DiscoveredSkill(dir=skill_dir, name=_read_name(skill_md)))

    return found


def sort_for_listing(skills: list[DiscoveredSkill]) -> list[DiscoveredSkill]:
    """Order skills by name with missing names last, then directory."""
    return sorted(skills, key=lambda skill: (not skill.name, skill.name or "", str(skill.dir)))


def normalize_filters(filters: list[str]) -> list[str]:
    """Normalize skill filters for matching.

    Blank entries are dropped, an `owner/repo@` prefix is removed and the
    remainder is lowercased.

    Examples:
        >>> normalize_filters(["owner/repo@My Skill", "Frontend", " "])
        ['my skill', 'frontend']
    """
    normalized = []
    for raw in filters:
        trimmed = raw.strip()
        if not trimmed:
            continue
        skill = trimmed.rsplit("@", 1)[-1].strip().lower()
        if skill:
            normalized.append(skill)
    return normalized


def filter_discovered_skills(
    skills: list[DiscoveredSkill], filters: list[str]
) -> list[DiscoveredSkill]:
    """Keep skills whose directory name or front matter name matches a filter.

    No filters, or a `*` filter, keeps everything.
    """
    needles = normalize_filters(filters)
    if not needles or "*" in needles:
        return list(skills)

    selected = []
    for skill in skills:
        dir_name = skill.dir.name.lower()
        skill_name = (skill.name or "").strip().lower()
        if any(needle == dir_name or needle == skill_name for needle in needles):
            selected.append(skill)
    return selected
