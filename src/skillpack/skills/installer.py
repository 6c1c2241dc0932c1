"""Skill installer.

This module installs skills into a skills root from three kinds of sources:

- a registry slug, downloaded as a zip archive
- a source address (local path, GitHub shorthand or URL, raw git URL)
- a catalog query, resolved to a source address and installed from there

Each installed skill becomes an immediate child directory of the skills
root, named after its sanitized skill name.
"""

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel, Field

from skillpack.skills.acquire import (
    acquire_source,
    ensure_skill_md_exists,
    extract_zip,
    flatten_single_nested_dir,
    resolve_search_root,
)
from skillpack.skills.discovery import (
    DiscoveredSkill,
    discover_skills,
    filter_discovered_skills,
    sort_for_listing,
)
from skillpack.skills.errors import (
    FilesystemError,
    SkillInstallError,
    SkillNotFoundError,
    ValidationError,
)
from skillpack.skills.hub import CatalogSearchResult, SkillHub
from skillpack.skills.security import (
    ensure_safe_relative_path,
    pick_unique_install_name,
    sanitize_name,
)
from skillpack.skills.source import parse_source

logger = logging.getLogger(__name__)

REGISTRY_SOURCE_PREFIX = "registry:"
CATALOG_INSTALL_SEARCH_LIMIT = 25


class RegistryInstallRequest(BaseModel):
    """Install a single skill from the primary registry."""

    slug: str
    version: str | None = None
    tag: str | None = None
    skills_root: Path
    force: bool = False


class SourceInstallRequest(BaseModel):
    """Install skills found in a source address."""

    source: str
    skill_filters: list[str] = Field(default_factory=list)
    skills_root: Path
    force: bool = False


class CatalogInstallRequest(BaseModel):
    """Install the best catalog match for a slug or query."""

    slug_or_query: str
    skills_root: Path
    force: bool = False


@dataclass
class InstalledSkill:
    """A skill directory written by an install."""

    install_name: str
    path: Path
    source: str
    version: str | None = None


@dataclass
class SourceSkill:
    """A skill found in a source, as shown by list_from_source."""

    directory: str
    name: str | None = None


def ensure_dir(path: Path) -> None:
    """Create `path` and its parents, raising FilesystemError on failure."""
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise FilesystemError("failed to create directory", path) from e


def prepare_install_target(path: Path, force: bool) -> None:
    """Make `path` an empty directory ready for a skill.

    Raises:
        SkillInstallError: If the target exists and `force` is False
        FilesystemError: If the old target cannot be removed or the new one created
    """
    if path.exists() or path.is_symlink():
        if not force:
            raise SkillInstallError(
                f"target already exists: {path} (set force=true to overwrite)"
            )
        try:
            if path.is_dir() and not path.is_symlink():
                shutil.rmtree(path)
            else:
                path.unlink()
        except OSError as e:
            raise FilesystemError("failed to remove existing target", path) from e

    ensure_dir(path)


def copy_skill_directory(src: Path, dst: Path) -> None:
    """Recursively copy a skill directory, skipping symbolic links.

    Every relative path is checked before anything is written for it.

    Raises:
        SkillSecurityError: If a relative path could escape `dst`
        FilesystemError: If a directory cannot be read or written
    """
    try:
        entries = sorted(src.iterdir())
    except OSError as e:
        raise FilesystemError("failed to read directory", src) from e

    for entry in entries:
        relative = entry.relative_to(src)
        ensure_safe_relative_path(relative)

        if entry.is_symlink():
            logger.debug(f"Skipping symlink {entry}")
            continue

        target = dst / relative
        if entry.is_dir():
            ensure_dir(target)
            copy_skill_directory(entry, target)
        elif entry.is_file():
            try:
                shutil.copy2(entry, target)
            except OSError as e:
                raise FilesystemError(f"failed to copy {entry}", target) from e


def derive_install_name(skill: DiscoveredSkill) -> str:
    """Sanitized front matter name, falling back to the directory name."""
    if skill.name and skill.name.strip():
        return sanitize_name(skill.name)
    return sanitize_name(skill.dir.name)


def merge_filters(request_filters: list[str], skill_filter: str | None) -> list[str]:
    merged = [value.strip() for value in request_filters if value.strip()]
    if skill_filter:
        merged.append(skill_filter)
    return merged


def select_catalog_result(
    results: list[CatalogSearchResult], slug_or_query: str
) -> CatalogSearchResult:
    """Pick an exact slug match, else an exact name match, else the first result."""
    needle = slug_or_query.strip().lower()
    for result in results:
        if result.slug.strip().lower() == needle:
            return result
    for result in results:
        if result.name.strip().lower() == needle:
            return result
    return results[0]


class SkillInstaller:
    """Install skills into a skills root.

    Example:
        >>> installer = SkillInstaller(SkillHub())
        >>> installer.install_from_source(
        ...     SourceInstallRequest(source="owner/repo@my-skill", skills_root=Path("skills"))
        ... )  # doctest: +SKIP
    """

    def __init__(self, hub: SkillHub | None = None):
        """Initialize SkillInstaller.

        Args:
            hub: Client for registry downloads and catalog searches
        """
        self.hub = hub or SkillHub()

    def install_from_registry(self, request: RegistryInstallRequest) -> InstalledSkill:
        """Download and install a skill from the primary registry.

        Args:
            request: Registry install request

        Returns:
            The installed skill

        Raises:
            ValidationError: If the slug is blank
            SkillInstallError: If the target exists and force is False
            NetworkError: If the download fails
            ArchiveError: If the archive is corrupt
            SkillManifestError: If the extracted content has no SKILL.md at its root
        """
        slug = request.slug.strip()
        if not slug:
            raise ValidationError("slug cannot be empty")

        ensure_dir(request.skills_root)
        install_name = sanitize_name(slug)
        target = request.skills_root / install_name
        prepare_install_target(target, request.force)

        logger.info(f"Downloading skill '{slug}' from registry...")
        archive = self.hub.download(slug, request.version, request.tag)
        written = extract_zip(archive, target)
        logger.debug(f"Extracted {written} files into {target}")
        flatten_single_nested_dir(target)
        ensure_skill_md_exists(target)

        logger.info(f"Installed skill '{install_name}' from registry into {target}")
        return InstalledSkill(
            install_name=install_name,
            path=target,
            source=f"{REGISTRY_SOURCE_PREFIX}{slug}",
            version=request.version,
        )

    def install_from_source(self, request: SourceInstallRequest) -> list[InstalledSkill]:
        """Install every matching skill found in a source.

        Args:
            request: Source install request

        Returns:
            Installed skills in discovery order

        Raises:
            SourceResolutionError: If the source or its subpath cannot be resolved
            GitError: If cloning fails
            SkillNotFoundError: If the source holds no SKILL.md
            ValidationError: If no skill matches the filters
            SkillInstallError: If a target exists and force is False
        """
        address = parse_source(request.source)
        ensure_dir(request.skills_root)
        filters = merge_filters(request.skill_filters, address.skill_filter)

        installed: list[InstalledSkill] = []
        with acquire_source(address) as source_root:
            search_root = resolve_search_root(source_root, address)
            discovered = discover_skills(search_root)
            if not discovered:
                raise SkillNotFoundError(f"no SKILL.md files found in source: {search_root}")

            selected = filter_discovered_skills(discovered, filters)
            if not selected:
                raise ValidationError(f"no skills matched filters: {', '.join(filters)}")

            used_names: set[str] = set()
            for skill in selected:
                install_name = pick_unique_install_name(derive_install_name(skill), used_names)
                target = request.skills_root / install_name
                prepare_install_target(target, request.force)
                copy_skill_directory(skill.dir, target)
                ensure_skill_md_exists(target)

                logger.info(
                    f"Installed skill '{install_name}' from {address.original} into {target}"
                )
                installed.append(
                    InstalledSkill(install_name=install_name, path=target, source=address.original)
                )

        return installed

    def install_from_catalog(self, request: CatalogInstallRequest) -> list[InstalledSkill]:
        """Resolve a catalog slug or query to a source and install from it.

        Raises:
            ValidationError: If the query is blank
            SkillNotFoundError: If the catalog returns no results
        """
        query = request.slug_or_query.strip()
        if not query:
            raise ValidationError("slug or query cannot be empty")

        results = self.hub.search_catalog(query, limit=CATALOG_INSTALL_SEARCH_LIMIT)
        if not results:
            raise SkillNotFoundError(f"no catalog results for: {query}")

        chosen = select_catalog_result(results, query)
        source = chosen.source.strip() or chosen.slug
        logger.info(f"Catalog match for '{query}': {chosen.name or chosen.slug} ({source})")

        return self.install_from_source(
            SourceInstallRequest(
                source=source,
                skill_filters=[chosen.name],
                skills_root=request.skills_root,
                force=request.force,
            )
        )

    def list_from_source(self, source: str) -> list[SourceSkill]:
        """List the skills a source would install, without installing.

        Raises:
            SourceResolutionError: If the source or its subpath cannot be resolved
            GitError: If cloning fails
            SkillNotFoundError: If the source holds no SKILL.md
        """
        address = parse_source(source)
        with acquire_source(address) as source_root:
            search_root = resolve_search_root(source_root, address)
            discovered = discover_skills(search_root)

        if not discovered:
            raise SkillNotFoundError(f"no SKILL.md files found in source: {search_root}")

        return [
            SourceSkill(directory=skill.dir.name, name=skill.name)
            for skill in sort_for_listing(discovered)
        ]
