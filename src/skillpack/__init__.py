"""skillpack - Skill installer, registry client and runtime activation for agents."""

from importlib.metadata import PackageNotFoundError, version

# Read version from package metadata (pyproject.toml)
try:
    __version__ = version("skillpack")
except PackageNotFoundError:
    # Fallback for development environments where package isn't installed
    __version__ = "0.0.0.dev"

from skillpack.config import SkillpackSettings

__all__ = ["SkillpackSettings", "__version__"]
