"""Unit tests for install-name sanitization and path checks."""

import pytest

from skillpack.skills.errors import SkillSecurityError
from skillpack.skills.security import (
    FALLBACK_SKILL_NAME,
    MAX_SKILL_NAME_LENGTH,
    ensure_safe_relative_path,
    is_safe_relative_path,
    is_within_directory,
    pick_unique_install_name,
    sanitize_name,
)


@pytest.mark.unit
@pytest.mark.skills
class TestSanitizeName:
    """Test sanitize_name function."""

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("  Hello World!  ", "hello-world"),
            ("../My_Skill", "my_skill"),
            ("...", FALLBACK_SKILL_NAME),
            ("", FALLBACK_SKILL_NAME),
            ("web-design", "web-design"),
            ("Web  Design / v2", "web-design-v2"),
            ("skill.v1.2", "skill.v1.2"),
            ("--Cool Skill--", "cool-skill"),
            ("Ünïcode Näme", "n-code-n-me"),
        ],
    )
    def test_sanitize(self, raw, expected):
        """Should lowercase, collapse disallowed runs and strip edges."""
        assert sanitize_name(raw) == expected

    def test_truncates_long_names(self):
        """Should cap names at the maximum length."""
        assert len(sanitize_name("a" * 400)) == MAX_SKILL_NAME_LENGTH

    def test_result_is_always_safe(self):
        """Sanitized names never contain path separators or parent references."""
        for raw in ["../../etc/passwd", "C:\\Windows", "/abs/path", "a/../b"]:
            sanitized = sanitize_name(raw)
            assert "/" not in sanitized
            assert "\\" not in sanitized
            assert sanitized not in ("", ".", "..")


@pytest.mark.unit
@pytest.mark.skills
class TestPickUniqueInstallName:
    """Test pick_unique_install_name function."""

    def test_first_use_keeps_base(self):
        """First occurrence keeps the base name."""
        used = set()
        assert pick_unique_install_name("demo", used) == "demo"
        assert used == {"demo"}

    def test_collisions_get_numeric_suffix(self):
        """Later collisions get -2, -3 and so on."""
        used = set()
        names = [pick_unique_install_name("demo", used) for _ in range(3)]
        assert names == ["demo", "demo-2", "demo-3"]

    def test_skips_taken_suffixes(self):
        """A suffix already in use is skipped."""
        used = {"demo", "demo-2"}
        assert pick_unique_install_name("demo", used) == "demo-3"


@pytest.mark.unit
@pytest.mark.skills
class TestRelativePathChecks:
    """Test relative path validation."""

    @pytest.mark.parametrize("path", ["SKILL.md", "scripts/run.py", "a/b/c.txt", "./notes.md"])
    def test_safe_paths(self, path):
        """Plain relative paths are safe."""
        assert is_safe_relative_path(path) is True

    @pytest.mark.parametrize(
        "path",
        [
            "../etc/passwd",
            "a/../../b",
            "/etc/passwd",
            "C:\\Windows\\x",
            "C:/x",
            "\\\\server\\share",
            "..\\x",
            "",
        ],
    )
    def test_unsafe_paths(self, path):
        """Parent, absolute, drive and UNC paths are unsafe."""
        assert is_safe_relative_path(path) is False

    def test_ensure_raises_security_error(self):
        """ensure_safe_relative_path should raise for unsafe paths."""
        with pytest.raises(SkillSecurityError, match="unsafe relative path while copying"):
            ensure_safe_relative_path("../escape")

    def test_ensure_accepts_safe_path(self):
        """ensure_safe_relative_path should not raise for safe paths."""
        ensure_safe_relative_path("scripts/run.sh")

    def test_is_within_directory(self, tmp_path):
        """Targets must resolve inside the base directory."""
        assert is_within_directory(tmp_path, tmp_path / "a" / "b") is True
        assert is_within_directory(tmp_path, tmp_path / ".." / "other") is False
