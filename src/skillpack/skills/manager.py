"""Runtime skill manager.

Scans an ordered list of skill roots, gates skills on platform and
executable dependencies, and renders skills for activation by an agent.
Later roots take precedence over earlier ones. Nothing is cached; every
call re-reads the roots from disk.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from skillpack.config.constants import (
    PERSONAL_SKILLS_DIR,
    PROJECT_SKILLS_SUBDIR,
    WORKSPACE_SKILLS_SUBDIR,
)
from skillpack.skills.availability import current_platform, missing_deps, platform_allowed
from skillpack.skills.errors import (
    AvailabilityError,
    SkillError,
    SkillManifestError,
    SkillNotFoundError,
    ValidationError,
)
from skillpack.skills.manifest import SKILL_FILE_NAME, SkillMetadata, parse_skill_md

if TYPE_CHECKING:
    from skillpack.config.schema import SkillpackSettings

logger = logging.getLogger(__name__)

SOURCE_PERSONAL = "agents-personal"
SOURCE_PROJECT = "agents-project"
SOURCE_WORKSPACE = "workspace"
SOURCE_EXTRA = "extra"


@dataclass(frozen=True)
class SkillRoot:
    """A directory whose immediate children are skills, with its source tag."""

    path: Path
    source: str


def _read_manifest(skill_md: Path) -> str | None:
    try:
        return skill_md.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        logger.warning(f"Could not read {skill_md}: {e}")
        return None


class SkillManager:
    """Discover, gate and activate skills across layered roots.

    Example:
        >>> manager = SkillManager.from_workspace_dir(Path("."))
        >>> print(manager.build_skills_catalog())  # doctest: +SKIP
    """

    def __init__(self, roots: list[SkillRoot]):
        """Initialize SkillManager.

        Args:
            roots: Skill roots, lowest precedence first
        """
        self.roots = list(roots)

    @classmethod
    def from_workspace_dir(cls, workspace: Path) -> "SkillManager":
        """Build the personal, project and workspace roots for a workspace."""
        return cls(
            [
                SkillRoot(PERSONAL_SKILLS_DIR, SOURCE_PERSONAL),
                SkillRoot(workspace / PROJECT_SKILLS_SUBDIR, SOURCE_PROJECT),
                SkillRoot(workspace / WORKSPACE_SKILLS_SUBDIR, SOURCE_WORKSPACE),
            ]
        )

    @classmethod
    def from_settings(cls, settings: "SkillpackSettings") -> "SkillManager":
        """Build roots from settings.

        The personal root can be switched off; extra roots are appended last.
        """
        workspace = settings.workspace_path
        roots = []
        if settings.skills.include_personal_root:
            roots.append(SkillRoot(PERSONAL_SKILLS_DIR, SOURCE_PERSONAL))
        roots.append(SkillRoot(workspace / PROJECT_SKILLS_SUBDIR, SOURCE_PROJECT))
        roots.append(SkillRoot(workspace / WORKSPACE_SKILLS_SUBDIR, SOURCE_WORKSPACE))
        roots.extend(SkillRoot(Path(path), SOURCE_EXTRA) for path in settings.skills.extra_roots)
        return cls(roots)

    def _scan_root(self, root: SkillRoot) -> list[SkillMetadata]:
        """Parse every immediate child skill of a root; missing roots yield nothing."""
        if not root.path.is_dir():
            return []

        try:
            children = sorted(child for child in root.path.iterdir() if child.is_dir())
        except OSError as e:
            logger.warning(f"Could not list skill root {root.path}: {e}")
            return []

        skills = []
        for child in children:
            skill_md = child / SKILL_FILE_NAME
            if not skill_md.is_file():
                continue
            content = _read_manifest(skill_md)
            if content is None:
                continue
            parsed = parse_skill_md(content, child, root.source)
            if parsed is None:
                logger.debug(f"Skipping {child}: SKILL.md front matter does not parse")
                continue
            skills.append(parsed[0])
        return skills

    @staticmethod
    def check_available(metadata: SkillMetadata) -> None:
        """Raise AvailabilityError if the skill fails the platform or dependency gate."""
        if not platform_allowed(metadata.platforms):
            raise AvailabilityError(
                f"Skill '{metadata.name}' is not available on this platform "
                f"(current: {current_platform()}, supported: {', '.join(metadata.platforms)})."
            )

        missing = missing_deps(metadata.deps)
        if missing:
            raise AvailabilityError(
                f"Skill '{metadata.name}' is missing required dependencies: {', '.join(missing)}"
            )

    @staticmethod
    def _is_available(metadata: SkillMetadata) -> bool:
        return platform_allowed(metadata.platforms) and not missing_deps(metadata.deps)

    def discover_skills(self) -> list[SkillMetadata]:
        """List skills that pass both gates, later roots overriding earlier ones.

        Returns:
            Available skills sorted by name
        """
        by_name: dict[str, SkillMetadata] = {}
        for root in self.roots:
            for metadata in self._scan_root(root):
                if self._is_available(metadata):
                    by_name[metadata.name.lower()] = metadata
                else:
                    logger.debug(f"Skill '{metadata.name}' in {root.path} is not available here")
        return sorted(by_name.values(), key=lambda metadata: metadata.name)

    def _all_skills(self) -> dict[str, SkillMetadata]:
        merged: dict[str, SkillMetadata] = {}
        for root in self.roots:
            for metadata in self._scan_root(root):
                merged[metadata.name.lower()] = metadata
        return merged

    def load_skill_checked(self, name: str) -> tuple[SkillMetadata, str]:
        """Load a skill by name after gating it.

        The highest-precedence skill with the name is selected before gating,
        so an unavailable override hides an available skill of the same name.

        Args:
            name: Skill name (case-insensitive)

        Returns:
            Tuple of (SkillMetadata, instructions body)

        Raises:
            ValidationError: If the name is blank
            AvailabilityError: If the selected skill fails a gate
            SkillManifestError: If the selected skill cannot be re-read
            SkillNotFoundError: If no skill has the name
        """
        trimmed = name.strip()
        if not trimmed:
            raise ValidationError("Skill name cannot be empty.")

        metadata = self._all_skills().get(trimmed.lower())
        if metadata is None:
            available = [skill.name for skill in self.discover_skills()]
            if available:
                raise SkillNotFoundError(
                    f"Skill '{trimmed}' not found. Available skills: {', '.join(available)}"
                )
            raise SkillNotFoundError(
                f"Skill '{trimmed}' not found. No skills are currently available."
            )

        self.check_available(metadata)

        content = _read_manifest(metadata.dir_path / SKILL_FILE_NAME)
        parsed = None
        if content is not None:
            parsed = parse_skill_md(content, metadata.dir_path, metadata.source)
        if parsed is None:
            raise SkillManifestError(f"Skill '{trimmed}' exists but could not be loaded.")

        return parsed

    def build_skills_catalog(self) -> str:
        """Render available skills as an `<available_skills>` block, or "" if none."""
        skills = self.discover_skills()
        if not skills:
            return ""

        lines = ["<available_skills>"]
        lines.extend(f"- {skill.name}: {skill.description}" for skill in skills)
        lines.append("</available_skills>")
        return "\n".join(lines)

    def activate(self, name: str) -> str:
        """Load a skill and render it for an agent.

        Errors are returned as "Error: ..." text instead of raised.
        """
        try:
            metadata, body = self.load_skill_checked(name)
        except SkillError as e:
            logger.info(f"Skill activation failed for '{name}': {e}")
            return f"Error: {e}"
        return render_skill(metadata, body)


def render_skill(metadata: SkillMetadata, body: str) -> str:
    """Format skill metadata and instructions as Markdown."""
    parts = [
        f"# Skill: {metadata.name}\n\n",
        f"Description: {metadata.description}\n",
        f"Skill directory: {metadata.dir_path}\n",
        f"Source: {metadata.source}\n",
    ]
    if metadata.version:
        parts.append(f"Version: {metadata.version}\n")
    if metadata.updated_at:
        parts.append(f"Updated at: {metadata.updated_at}\n")
    if metadata.platforms:
        parts.append(f"Platforms: {', '.join(metadata.platforms)}\n")
    if metadata.deps:
        parts.append(f"Dependencies: {', '.join(metadata.deps)}\n")
    parts.append(f"\n## Instructions\n\n{body}")
    return "".join(parts)
