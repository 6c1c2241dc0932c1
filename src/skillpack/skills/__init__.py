"""Skill subsystem for skillpack.

Skills are directories holding a SKILL.md file: YAML front matter plus
Markdown instructions. This package resolves skill sources, installs skills
into a skills root, searches remote catalogs and activates installed skills
at runtime.

Example:
    >>> from skillpack.skills import SkillInstaller, SkillManager, SourceInstallRequest
    >>> installer = SkillInstaller()
    >>> installer.install_from_source(
    ...     SourceInstallRequest(source="owner/repo", skills_root=Path("skills"))
    ... )  # doctest: +SKIP
    >>> SkillManager.from_workspace_dir(Path(".")).activate("my-skill")  # doctest: +SKIP
"""

from skillpack.skills.discovery import DiscoveredSkill, discover_skills
from skillpack.skills.errors import (
    ArchiveError,
    AvailabilityError,
    FilesystemError,
    GitError,
    NetworkError,
    SkillError,
    SkillInstallError,
    SkillManifestError,
    SkillNotFoundError,
    SkillSecurityError,
    SourceResolutionError,
    ValidationError,
)
from skillpack.skills.hub import CatalogSearchResult, RegistrySearchResult, SkillHub
from skillpack.skills.installer import (
    CatalogInstallRequest,
    InstalledSkill,
    RegistryInstallRequest,
    SkillInstaller,
    SourceInstallRequest,
    SourceSkill,
)
from skillpack.skills.manager import SkillManager, SkillRoot
from skillpack.skills.manifest import SkillMetadata
from skillpack.skills.security import sanitize_name
from skillpack.skills.source import SourceAddress, parse_source

__all__ = [
    # Errors
    "SkillError",
    "ValidationError",
    "SourceResolutionError",
    "NetworkError",
    "ArchiveError",
    "FilesystemError",
    "GitError",
    "AvailabilityError",
    "SkillNotFoundError",
    "SkillManifestError",
    "SkillInstallError",
    "SkillSecurityError",
    # Sources and discovery
    "SourceAddress",
    "parse_source",
    "DiscoveredSkill",
    "discover_skills",
    "sanitize_name",
    # Install
    "SkillInstaller",
    "InstalledSkill",
    "SourceSkill",
    "RegistryInstallRequest",
    "SourceInstallRequest",
    "CatalogInstallRequest",
    # Remote catalogs
    "SkillHub",
    "RegistrySearchResult",
    "CatalogSearchResult",
    # Runtime
    "SkillManager",
    "SkillRoot",
    "SkillMetadata",
]
