"""Unit tests for skillpack.tools.skills module."""

from pathlib import Path
from unittest.mock import MagicMock

import pytest
import requests

from skillpack.skills.errors import (
    GitError,
    NetworkError,
    SkillInstallError,
    SkillNotFoundError,
    SourceResolutionError,
    ValidationError,
)
from skillpack.skills.hub import CatalogSearchResult, RegistrySearchResult, SkillHub
from skillpack.skills.installer import InstalledSkill, SkillInstaller
from skillpack.tools.skills import MISSING_SKILL_NAME, SkillTools, _error_code


@pytest.fixture
def mock_hub():
    """Create a mocked SkillHub."""
    return MagicMock(spec=SkillHub)


@pytest.fixture
def mock_installer():
    """Create a mocked SkillInstaller."""
    return MagicMock(spec=SkillInstaller)


@pytest.fixture
def skill_tools(skillpack_settings, mock_hub, mock_installer):
    """Create SkillTools with mocked network and install layers."""
    return SkillTools(skillpack_settings, hub=mock_hub, installer=mock_installer)


@pytest.mark.unit
@pytest.mark.tools
class TestSkillTools:
    """Tests for SkillTools class."""

    def test_initialization(self, skillpack_settings):
        """Test SkillTools builds its collaborators from settings."""
        tools = SkillTools(skillpack_settings)

        assert tools.settings == skillpack_settings
        assert tools.hub.registry_url == skillpack_settings.hub.registry_url.rstrip("/")
        assert tools.installer.hub is tools.hub

    def test_get_tools(self, skill_tools):
        """Test get_tools returns the three tool functions."""
        tools_list = skill_tools.get_tools()

        assert tools_list == [
            skill_tools.activate_skill,
            skill_tools.search_skills,
            skill_tools.install_skill,
        ]

    @pytest.mark.parametrize(
        "error, code",
        [
            (ValidationError("x"), "invalid_input"),
            (NetworkError("x", url="u"), "network_error"),
            (SkillNotFoundError("x"), "not_found"),
            (SkillInstallError("x"), "already_exists"),
            (GitError("u", "d"), "source_error"),
            (SourceResolutionError("x"), "source_error"),
        ],
    )
    def test_error_codes(self, error, code):
        """Test skill exceptions map to error codes."""
        assert _error_code(error) == code


@pytest.mark.unit
@pytest.mark.tools
class TestActivateSkill:
    """Tests for the activate_skill tool."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("name", ["", "   "])
    async def test_missing_name(self, skill_tools, name):
        """Test a blank name returns the missing-field message."""
        assert await skill_tools.activate_skill(name) == MISSING_SKILL_NAME

    @pytest.mark.asyncio
    async def test_activates_installed_skill(self, skill_tools, skillpack_settings, make_skill):
        """Test an installed skill is rendered."""
        make_skill(skillpack_settings.install_path, "demo", name="demo", body="Do the thing.")

        text = await skill_tools.activate_skill("demo")

        assert text.startswith("# Skill: demo\n")
        assert text.endswith("Do the thing.")

    @pytest.mark.asyncio
    async def test_unknown_skill(self, skill_tools):
        """Test unknown skills return error text."""
        text = await skill_tools.activate_skill("ghost")

        assert text == "Error: Skill 'ghost' not found. No skills are currently available."


@pytest.mark.unit
@pytest.mark.tools
class TestSearchSkills:
    """Tests for the search_skills tool."""

    @pytest.mark.asyncio
    async def test_combines_results(self, skill_tools, mock_hub):
        """Test registry and catalog results are returned together."""
        mock_hub.search_registry.return_value = [
            RegistrySearchResult(slug="weather", display_name="Weather", score=1.5)
        ]
        mock_hub.search_catalog.return_value = [
            CatalogSearchResult(slug="wx", name="wx", source="o/r", installs=3)
        ]

        result = await skill_tools.search_skills("weather", limit=5)

        mock_hub.search_registry.assert_called_once_with("weather", 5)
        mock_hub.search_catalog.assert_called_once_with("weather", 5)
        assert result["success"] is True
        assert result["message"] == "Found 1 registry and 1 catalog results"
        assert result["result"]["registry"][0]["slug"] == "weather"
        assert result["result"]["registry"][0]["display_name"] == "Weather"
        assert result["result"]["catalog"] == [
            {"slug": "wx", "name": "wx", "source": "o/r", "installs": 3}
        ]

    @pytest.mark.asyncio
    async def test_network_error(self, skill_tools, mock_hub):
        """Test network failures become error responses."""
        mock_hub.search_registry.side_effect = NetworkError("request failed (500): u", url="u")

        result = await skill_tools.search_skills("weather")

        assert result == {
            "success": False,
            "error": "network_error",
            "message": "request failed (500): u",
        }
        mock_hub.search_catalog.assert_not_called()

    @pytest.mark.asyncio
    async def test_blank_query(self, skill_tools, mock_hub):
        """Test blank queries become invalid_input responses."""
        mock_hub.search_registry.side_effect = ValidationError("query cannot be empty")

        result = await skill_tools.search_skills(" ")

        assert result["success"] is False
        assert result["error"] == "invalid_input"

    @pytest.mark.asyncio
    async def test_mistyped_hub_response(self, skillpack_settings):
        """Test a mistyped registry field becomes a network_error response."""
        session = MagicMock(spec=requests.Session)
        response = MagicMock()
        response.ok = True
        response.status_code = 200
        response.url = "https://registry.test/api/v1/search"
        response.text = '{"results": [{"slug": "a", "updatedAt": "2024-01-01"}]}'
        response.json.return_value = {"results": [{"slug": "a", "updatedAt": "2024-01-01"}]}
        session.get.return_value = response
        tools = SkillTools(skillpack_settings, hub=SkillHub(session=session))

        result = await tools.search_skills("a")

        assert result["success"] is False
        assert result["error"] == "network_error"
        assert result["message"].startswith("failed to parse JSON response")


@pytest.mark.unit
@pytest.mark.tools
class TestInstallSkill:
    """Tests for the install_skill tool."""

    @pytest.mark.asyncio
    async def test_registry_install(self, skill_tools, mock_installer, skillpack_settings):
        """Test registry: sources install from the registry."""
        target = skillpack_settings.install_path / "weather"
        mock_installer.install_from_registry.return_value = InstalledSkill(
            install_name="weather", path=target, source="registry:weather"
        )

        result = await skill_tools.install_skill("registry:weather", force=True)

        request = mock_installer.install_from_registry.call_args.args[0]
        assert request.slug == "weather"
        assert request.force is True
        assert request.skills_root == skillpack_settings.install_path
        assert result == {
            "success": True,
            "result": ["weather"],
            "message": "Installed 1 skill(s): weather",
        }

    @pytest.mark.asyncio
    async def test_source_install(self, skill_tools, mock_installer, skillpack_settings):
        """Test other sources install from the source address."""
        root = skillpack_settings.install_path
        mock_installer.install_from_source.return_value = [
            InstalledSkill(install_name="a", path=root / "a", source="o/r"),
            InstalledSkill(install_name="b", path=root / "b", source="o/r"),
        ]

        result = await skill_tools.install_skill(" o/r ")

        request = mock_installer.install_from_source.call_args.args[0]
        assert request.source == "o/r"
        assert request.force is False
        assert result["result"] == ["a", "b"]
        assert result["message"] == "Installed 2 skill(s): a, b"

    @pytest.mark.asyncio
    async def test_blank_source(self, skill_tools, mock_installer):
        """Test blank sources are rejected."""
        result = await skill_tools.install_skill("  ")

        assert result == {
            "success": False,
            "error": "invalid_input",
            "message": "source cannot be empty",
        }
        mock_installer.install_from_source.assert_not_called()

    @pytest.mark.asyncio
    async def test_existing_target(self, skill_tools, mock_installer):
        """Test install conflicts become already_exists responses."""
        mock_installer.install_from_source.side_effect = SkillInstallError(
            "target already exists: /x (set force=true to overwrite)"
        )

        result = await skill_tools.install_skill("./skills")

        assert result["success"] is False
        assert result["error"] == "already_exists"

    @pytest.mark.asyncio
    async def test_real_local_install(self, skillpack_settings, skill_source):
        """Test a local source is installed and then activatable."""
        tools = SkillTools(skillpack_settings)

        result = await tools.install_skill(str(skill_source))
        text = await tools.activate_skill("beta")

        assert result["success"] is True
        assert result["result"] == ["alpha-skill", "beta"]
        assert text.endswith("Beta body.")

    @pytest.mark.asyncio
    async def test_unreadable_skill_directory(self, skillpack_settings, skill_source, monkeypatch):
        """Test a directory that cannot be listed becomes an install_failed response."""
        original_iterdir = Path.iterdir

        def iterdir(self):
            if self.name == "scripts":
                raise PermissionError(13, "Permission denied", str(self))
            return original_iterdir(self)

        monkeypatch.setattr(Path, "iterdir", iterdir)
        tools = SkillTools(skillpack_settings)

        result = await tools.install_skill(str(skill_source))

        assert result["success"] is False
        assert result["error"] == "install_failed"
        assert "failed to read directory" in result["message"]
