"""Unit tests for skillpack.cli module."""

import json
import logging
from unittest.mock import patch

import pytest
import typer
from typer.testing import CliRunner

from skillpack.cli.app import app
from skillpack.cli.utils import setup_logging
from skillpack.config.constants import ENV_LOG_LEVEL
from skillpack.config.schema import SkillpackSettings
from skillpack.skills.errors import NetworkError
from skillpack.skills.hub import CatalogSearchResult, RegistrySearchResult


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep SKILLPACK_* variables from leaking into CLI runs."""
    for name in [
        "SKILLPACK_WORKSPACE",
        "SKILLPACK_INSTALL_DIR",
        "SKILLPACK_REGISTRY_URL",
        "SKILLPACK_CATALOG_URL",
        "SKILLPACK_HTTP_TIMEOUT",
        ENV_LOG_LEVEL,
    ]:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def config_file(tmp_path, workspace_dir):
    """Settings file pointing at a temporary workspace and data directory."""
    path = tmp_path / "settings.json"
    path.write_text(
        json.dumps(
            {
                "agent": {"data_dir": str(tmp_path / "data")},
                "skills": {"workspace_dir": str(workspace_dir), "include_personal_root": False},
            }
        )
    )
    return path


@pytest.fixture
def run(config_file):
    """Invoke the CLI with the temporary settings file and logging setup stubbed."""
    runner = CliRunner()

    def invoke(*args):
        with patch("skillpack.cli.app.setup_logging"):
            return runner.invoke(app, ["--config", str(config_file), *args])

    return invoke


@pytest.fixture
def mock_hub():
    """Patch the SkillHub used by CLI commands."""
    with patch("skillpack.cli.skill_commands.SkillHub") as hub_class:
        yield hub_class.return_value


@pytest.mark.unit
@pytest.mark.cli
class TestCLIFramework:
    """Tests for CLI framework and structure."""

    def setup_method(self):
        """Set up test runner."""
        self.runner = CliRunner()

    def test_app_is_typer_instance(self):
        """Test that CLI app is a Typer instance."""
        assert isinstance(app, typer.Typer)

    def test_version_flag(self):
        """Test --version prints the version and exits cleanly."""
        result = self.runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert "skillpack version" in result.stdout

    def test_help_lists_commands(self):
        """Test --help lists every command."""
        result = self.runner.invoke(app, ["--help"])

        assert result.exit_code == 0
        for command in ["search", "install", "list-source", "list", "show"]:
            assert command in result.stdout

    def test_no_command_prints_help(self):
        """Test running without a command prints help."""
        result = self.runner.invoke(app, [])

        assert result.exit_code == 0
        assert "Usage" in result.stdout

    def test_invalid_config(self, tmp_path):
        """Test an invalid settings file exits with an error."""
        bad = tmp_path / "bad.json"
        bad.write_text("{not json")

        result = self.runner.invoke(app, ["--config", str(bad), "list"])

        assert result.exit_code == 1
        assert "Invalid JSON" in result.stdout


@pytest.mark.unit
@pytest.mark.cli
class TestListAndShow:
    """Tests for the list and show commands."""

    def test_list_empty(self, run):
        """Test listing with no skills."""
        result = run("list")

        assert result.exit_code == 0
        assert "No skills are currently available." in result.stdout

    def test_list_workspace_skills(self, run, workspace_dir, make_skill):
        """Test listing shows workspace skills."""
        make_skill(workspace_dir / "skills", "demo", name="demo", description="Demo skill")

        result = run("list")

        assert result.exit_code == 0
        assert "Available Skills" in result.stdout
        assert "demo" in result.stdout
        assert "Demo skill" in result.stdout

    def test_list_other_workspace(self, run, tmp_path, make_skill):
        """Test --workspace points listing at another workspace."""
        other = tmp_path / "other"
        make_skill(other / ".agents" / "skills", "elsewhere", name="elsewhere")

        result = run("list", "--workspace", str(other))

        assert result.exit_code == 0
        assert "elsewhere" in result.stdout

    def test_show_skill(self, run, workspace_dir, make_skill):
        """Test show prints the activation text."""
        make_skill(workspace_dir / "skills", "demo", name="demo", body="Do it [now].")

        result = run("show", "demo")

        assert result.exit_code == 0
        assert "# Skill: demo" in result.stdout
        assert "## Instructions" in result.stdout
        assert "Do it [now]." in result.stdout

    def test_show_unknown_skill(self, run):
        """Test show exits with an error for unknown skills."""
        result = run("show", "ghost")

        assert result.exit_code == 1
        assert "Skill 'ghost' not found" in result.stdout


@pytest.mark.unit
@pytest.mark.cli
class TestInstall:
    """Tests for the install and list-source commands."""

    def test_install_local_source(self, run, skill_source, workspace_dir):
        """Test a local source is installed into <workspace>/skills."""
        result = run("install", str(skill_source), "--skill", "beta")

        assert result.exit_code == 0
        assert "Installed skill: beta" in result.stdout
        assert (workspace_dir / "skills" / "beta" / "SKILL.md").is_file()
        assert not (workspace_dir / "skills" / "alpha-skill").exists()

    def test_install_root_and_force(self, run, skill_source, tmp_path):
        """Test --root changes the destination and --force allows reinstalling."""
        root = tmp_path / "custom"

        first = run("install", str(skill_source), "--root", str(root))
        second = run("install", str(skill_source), "--root", str(root))
        third = run("install", str(skill_source), "--root", str(root), "--force")

        assert first.exit_code == 0
        assert second.exit_code == 1
        assert "target already exists" in second.stdout
        assert third.exit_code == 0
        assert (root / "alpha-skill" / "SKILL.md").is_file()

    def test_install_registry(self, run, mock_hub, make_zip, workspace_dir):
        """Test registry: sources download from the registry."""
        mock_hub.download.return_value = make_zip({"SKILL.md": "---\nname: weather\n---\nBody"})

        result = run("install", "registry:weather", "--version", "1.0")

        assert result.exit_code == 0
        mock_hub.download.assert_called_once_with("weather", "1.0", None)
        assert (workspace_dir / "skills" / "weather" / "SKILL.md").is_file()

    def test_install_catalog(self, run, mock_hub, skill_source, workspace_dir):
        """Test --catalog resolves the source through the catalog."""
        mock_hub.search_catalog.return_value = [
            CatalogSearchResult(slug="alpha", name="Alpha Skill", source=str(skill_source))
        ]

        result = run("install", "alpha", "--catalog")

        assert result.exit_code == 0
        assert (workspace_dir / "skills" / "alpha-skill" / "SKILL.md").is_file()

    @pytest.mark.parametrize(
        ("args", "message"),
        [
            (["registry:weather", "--skill", "x"], "--skill cannot be used with registry installs"),
            (["alpha", "--catalog", "--skill", "x"], "--skill cannot be used with --catalog"),
            (["owner/repo", "--version", "1.0"], "--version and --tag only apply to registry"),
            (["alpha", "--catalog", "--tag", "latest"], "--version and --tag only apply"),
        ],
    )
    def test_install_rejects_ignored_options(self, run, mock_hub, args, message):
        """Test options the install mode would ignore are rejected before any work."""
        result = run("install", *args)

        assert result.exit_code == 1
        assert message in result.stdout
        mock_hub.download.assert_not_called()
        mock_hub.search_catalog.assert_not_called()

    def test_list_source(self, run, skill_source):
        """Test list-source prints the skills in a source."""
        result = run("list-source", str(skill_source))

        assert result.exit_code == 0
        assert "alpha" in result.stdout
        assert "beta" in result.stdout

    def test_list_source_missing(self, run, tmp_path):
        """Test list-source fails for a missing path."""
        result = run("list-source", str(tmp_path / "missing"))

        assert result.exit_code == 1
        assert "Error:" in result.stdout


@pytest.mark.unit
@pytest.mark.cli
class TestSearch:
    """Tests for the search command."""

    def test_registry_search(self, run, mock_hub):
        """Test registry results are shown in a table."""
        mock_hub.search_registry.return_value = [
            RegistrySearchResult(slug="weather", display_name="Weather", version="1.0", score=0.5)
        ]

        result = run("search", "weather", "--limit", "5")

        assert result.exit_code == 0
        mock_hub.search_registry.assert_called_once_with("weather", 5)
        assert "Registry Skills" in result.stdout
        assert "weather" in result.stdout

    def test_default_limit_from_settings(self, run, mock_hub):
        """Test the configured search limit is used when --limit is omitted."""
        mock_hub.search_registry.return_value = []

        result = run("search", "weather")

        assert result.exit_code == 0
        mock_hub.search_registry.assert_called_once_with("weather", 20)
        assert "No registry results for 'weather'" in result.stdout

    def test_catalog_search(self, run, mock_hub):
        """Test --catalog searches the community catalog."""
        mock_hub.search_catalog.return_value = [
            CatalogSearchResult(slug="pdf", name="pdf", source="o/r", installs=12)
        ]

        result = run("search", "pdf", "--catalog")

        assert result.exit_code == 0
        assert "Catalog Skills" in result.stdout
        mock_hub.search_registry.assert_not_called()

    def test_search_failure(self, run, mock_hub):
        """Test network failures exit with an error."""
        mock_hub.search_registry.side_effect = NetworkError("request failed (500): u", url="u")

        result = run("search", "weather")

        assert result.exit_code == 1
        assert "request failed (500)" in result.stdout


@pytest.mark.unit
@pytest.mark.cli
class TestSetupLogging:
    """Tests for setup_logging."""

    @pytest.fixture(autouse=True)
    def restore_root_logger(self):
        """Restore root logger handlers after basicConfig(force=True)."""
        root = logging.getLogger()
        handlers, level = root.handlers[:], root.level
        yield
        for handler in root.handlers:
            if handler not in handlers:
                handler.close()
        root.handlers[:] = handlers
        root.setLevel(level)

    def test_writes_to_data_dir(self, tmp_path):
        """Test logs go to <data_dir>/logs/skillpack.log at the configured level."""
        settings = SkillpackSettings(agent={"data_dir": str(tmp_path), "log_level": "warning"})

        log_file = setup_logging(settings)

        assert log_file == tmp_path / "logs" / "skillpack.log"
        assert log_file.parent.is_dir()
        assert logging.getLogger().level == logging.WARNING

    def test_env_level_wins(self, tmp_path, monkeypatch):
        """Test SKILLPACK_LOG_LEVEL overrides the configured level."""
        monkeypatch.setenv(ENV_LOG_LEVEL, "debug")
        settings = SkillpackSettings(agent={"data_dir": str(tmp_path)})

        setup_logging(settings)

        assert logging.getLogger().level == logging.DEBUG


def test_main_module_exposes_app():
    """Test python -m skillpack uses the Typer app."""
    import skillpack.__main__ as main_module

    assert isinstance(main_module.app, typer.Typer)
