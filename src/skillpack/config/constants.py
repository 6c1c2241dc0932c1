"""Configuration constants for skillpack.

Single source of truth for default configuration values, kept apart from
schema.py to avoid circular imports.
"""

from pathlib import Path

# Default paths
DEFAULT_DATA_DIR = Path.home() / ".skillpack"
DEFAULT_CONFIG_PATH = DEFAULT_DATA_DIR / "settings.json"
DEFAULT_LOG_FILE_NAME = "skillpack.log"

# Runtime skill roots
PERSONAL_SKILLS_DIR = Path.home() / ".agents" / "skills"
PROJECT_SKILLS_SUBDIR = Path(".agents") / "skills"
WORKSPACE_SKILLS_SUBDIR = Path("skills")

# Remote catalogs
DEFAULT_REGISTRY_URL = "https://clawhub.ai"
DEFAULT_CATALOG_URL = "https://skills.sh"
DEFAULT_HTTP_TIMEOUT = 20.0
DEFAULT_SEARCH_LIMIT = 20

# Environment variables
ENV_WORKSPACE = "SKILLPACK_WORKSPACE"
ENV_INSTALL_DIR = "SKILLPACK_INSTALL_DIR"
ENV_REGISTRY_URL = "SKILLPACK_REGISTRY_URL"
ENV_CATALOG_URL = "SKILLPACK_CATALOG_URL"
ENV_HTTP_TIMEOUT = "SKILLPACK_HTTP_TIMEOUT"
ENV_LOG_LEVEL = "SKILLPACK_LOG_LEVEL"
