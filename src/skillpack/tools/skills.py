"""Skill tools for agents.

SkillTools lets an agent activate installed skills, search the remote
catalogs and install new skills into the configured install directory.
"""

import asyncio
import logging
from typing import Annotated

from pydantic import Field

from skillpack.config import SkillpackSettings
from skillpack.skills.errors import (
    GitError,
    NetworkError,
    SkillError,
    SkillInstallError,
    SkillNotFoundError,
    SourceResolutionError,
    ValidationError,
)
from skillpack.skills.hub import SkillHub
from skillpack.skills.installer import (
    REGISTRY_SOURCE_PREFIX,
    InstalledSkill,
    RegistryInstallRequest,
    SkillInstaller,
    SourceInstallRequest,
)
from skillpack.skills.manager import SkillManager
from skillpack.tools.toolset import AgentToolset

logger = logging.getLogger(__name__)

MISSING_SKILL_NAME = "Error: Missing required field: skill_name"


def _error_code(error: SkillError) -> str:
    """Map a skill exception to a machine-readable error code."""
    if isinstance(error, ValidationError):
        return "invalid_input"
    if isinstance(error, NetworkError):
        return "network_error"
    if isinstance(error, SkillNotFoundError):
        return "not_found"
    if isinstance(error, SkillInstallError):
        return "already_exists"
    if isinstance(error, (GitError, SourceResolutionError)):
        return "source_error"
    return "install_failed"


class SkillTools(AgentToolset):
    """Skill activation, search and install tools.

    Response formats follow AgentToolset: `activate_skill` returns plain
    text (Markdown instructions or "Error: ..."), the other tools return
    success or error dicts.

    Error codes:
        invalid_input: blank query, slug or source, or no skill matched the filters
        network_error: registry or catalog request failed
        not_found: the source holds no skills
        already_exists: an install target exists and force was not set
        source_error: the source could not be parsed, cloned or resolved
        install_failed: any other install failure

    Example:
        >>> tools = SkillTools(SkillpackSettings())
        >>> result = await tools.search_skills("weather")  # doctest: +SKIP
    """

    def __init__(
        self,
        settings: SkillpackSettings,
        manager: SkillManager | None = None,
        hub: SkillHub | None = None,
        installer: SkillInstaller | None = None,
    ):
        """Initialize SkillTools.

        Args:
            settings: Skillpack settings
            manager: Runtime skill manager (built from settings if omitted)
            hub: Registry client (built from settings if omitted)
            installer: Installer (built around `hub` if omitted)
        """
        super().__init__(settings)
        self.manager = manager or SkillManager.from_settings(settings)
        self.hub = hub or SkillHub(
            registry_url=settings.hub.registry_url,
            catalog_url=settings.hub.catalog_url,
            timeout=settings.hub.timeout,
        )
        self.installer = installer or SkillInstaller(self.hub)

    def get_tools(self) -> list:
        """Get list of skill tools."""
        return [self.activate_skill, self.search_skills, self.install_skill]

    async def activate_skill(
        self, skill_name: Annotated[str, Field(description="Name of the skill to activate")] = ""
    ) -> str:
        """Load a skill's instructions by name. Returns Markdown or an error message."""
        if not skill_name or not skill_name.strip():
            return MISSING_SKILL_NAME
        return await asyncio.to_thread(self.manager.activate, skill_name)

    async def search_skills(
        self,
        query: Annotated[str, Field(description="Search keywords")],
        limit: Annotated[int, Field(description="Maximum results per catalog")] = 10,
    ) -> dict:
        """Search the skill registry and community catalog. Returns matching skills."""
        try:
            registry = await asyncio.to_thread(self.hub.search_registry, query, limit)
            catalog = await asyncio.to_thread(self.hub.search_catalog, query, limit)
        except SkillError as e:
            logger.warning(f"Skill search failed for '{query}': {e}")
            return self._create_error_response(error=_error_code(e), message=str(e))

        result = {
            "registry": [item.model_dump() for item in registry],
            "catalog": [item.model_dump() for item in catalog],
        }
        return self._create_success_response(
            result=result,
            message=f"Found {len(registry)} registry and {len(catalog)} catalog results",
        )

    async def install_skill(
        self,
        source: Annotated[
            str,
            Field(description="registry:<slug>, owner/repo[@skill], GitHub URL, git URL or path"),
        ],
        force: Annotated[bool, Field(description="Overwrite existing skills")] = False,
    ) -> dict:
        """Install a skill from the registry or a git/local source. Returns installed names."""
        try:
            installed = await asyncio.to_thread(self._install, source, force)
        except SkillError as e:
            logger.warning(f"Skill install failed for '{source}': {e}")
            return self._create_error_response(error=_error_code(e), message=str(e))

        names = [skill.install_name for skill in installed]
        return self._create_success_response(
            result=names, message=f"Installed {len(names)} skill(s): {', '.join(names)}"
        )

    def _install(self, source: str, force: bool) -> list[InstalledSkill]:
        trimmed = source.strip()
        if not trimmed:
            raise ValidationError("source cannot be empty")

        skills_root = self.settings.install_path
        if trimmed.startswith(REGISTRY_SOURCE_PREFIX):
            slug = trimmed[len(REGISTRY_SOURCE_PREFIX) :]
            request = RegistryInstallRequest(slug=slug, skills_root=skills_root, force=force)
            return [self.installer.install_from_registry(request)]

        request = SourceInstallRequest(source=trimmed, skills_root=skills_root, force=force)
        return self.installer.install_from_source(request)
