"""Skill directory fixtures for testing."""

import io
import zipfile
from pathlib import Path

import pytest


def write_skill(
    root: Path,
    dir_name: str,
    name: str | None = None,
    description: str = "Test skill",
    body: str = "Follow these steps.",
    extra: str = "",
) -> Path:
    """Write `root/dir_name/SKILL.md` and return the skill directory."""
    skill_dir = root / dir_name
    skill_dir.mkdir(parents=True, exist_ok=True)
    lines = ["---"]
    if name is not None:
        lines.append(f"name: {name}")
    lines.append(f"description: {description}")
    if extra:
        lines.append(extra.rstrip("\n"))
    lines.append("---")
    lines.append(body)
    (skill_dir / "SKILL.md").write_text("\n".join(lines) + "\n", encoding="utf-8")
    return skill_dir


@pytest.fixture
def make_skill():
    """Factory writing SKILL.md files.

    Example:
        make_skill(root, "weather", name="weather", extra="deps: [curl]")
    """
    return write_skill


@pytest.fixture
def skill_source(tmp_path):
    """Create a local source tree with two skills and some noise."""
    source = tmp_path / "source"
    write_skill(source / "skills", "alpha", name="Alpha Skill", body="Alpha body.")
    write_skill(source / "skills", "beta", name="beta", body="Beta body.")
    (source / "skills" / "beta" / "scripts").mkdir()
    (source / "skills" / "beta" / "scripts" / "run.sh").write_text("echo beta\n")
    write_skill(source / "node_modules", "ignored", name="ignored")
    (source / "README.md").write_text("# Source\n")
    return source


def build_zip(entries: dict[str, str]) -> bytes:
    """Build zip bytes from a name -> text mapping (names ending in / are directories)."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        for entry_name, text in entries.items():
            archive.writestr(entry_name, text)
    return buffer.getvalue()


@pytest.fixture
def make_zip():
    """Factory building in-memory zip archives."""
    return build_zip
