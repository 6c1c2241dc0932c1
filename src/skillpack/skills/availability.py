"""Platform and executable-dependency gates for runtime skills.

A skill may declare the operating systems it supports and the executables
it expects on PATH. These helpers decide whether a skill can run on the
current machine.
"""

import os
import sys

DEFAULT_PATHEXT = ".COM;.EXE;.BAT;.CMD"

_PLATFORM_ALIASES = {"macos": "darwin", "osx": "darwin"}
_ALL_PLATFORMS = {"all", "*"}


def current_platform() -> str:
    """Return the running OS tag: darwin, linux, windows or unknown."""
    if sys.platform == "darwin":
        return "darwin"
    if sys.platform.startswith("linux"):
        return "linux"
    if sys.platform in ("win32", "cygwin"):
        return "windows"
    return "unknown"


def normalize_platform(value: str) -> str:
    """Normalize a declared platform tag.

    Examples:
        >>> normalize_platform(" MacOS ")
        'darwin'
        >>> normalize_platform("Linux")
        'linux'
    """
    tag = value.strip().lower()
    return _PLATFORM_ALIASES.get(tag, tag)


def platform_allowed(platforms: list[str], current: str | None = None) -> bool:
    """Check declared platforms against the running OS.

    An empty list, `all` or `*` always passes.

    Args:
        platforms: Declared platform tags
        current: OS tag to check against (defaults to current_platform())

    Returns:
        True if the skill may run on this platform
    """
    if not platforms:
        return True

    current = current or current_platform()
    for platform in platforms:
        tag = normalize_platform(platform)
        if tag in _ALL_PLATFORMS or tag == current:
            return True
    return False


def _windows_candidates(command: str) -> list[str]:
    exts = os.environ.get("PATHEXT") or DEFAULT_PATHEXT
    ext_list = [ext.strip().lower() for ext in exts.split(";") if ext.strip()]
    lower = command.lower()
    if any(lower.endswith(ext) for ext in ext_list):
        return [command]
    return [command] + [f"{command}{ext}" for ext in ext_list]


def _windows_match(directory: str, candidates: list[str]) -> bool:
    try:
        entries = {entry.lower(): entry for entry in os.listdir(directory)}
    except OSError:
        return False
    for candidate in candidates:
        entry = entries.get(candidate.lower())
        if entry and os.path.isfile(os.path.join(directory, entry)):
            return True
    return False


def command_exists(command: str, platform: str | None = None) -> bool:
    """Check whether an executable is reachable through PATH.

    On Windows each PATH directory is checked for the bare name and for the
    name with every PATHEXT extension, case-insensitively. Elsewhere an
    executable regular file with the exact name is required.

    Args:
        command: Executable name
        platform: OS tag (defaults to current_platform())

    Returns:
        True if found. A blank name always counts as found.
    """
    if not command.strip():
        return True

    platform = platform or current_platform()
    path_dirs = [entry for entry in os.environ.get("PATH", "").split(os.pathsep) if entry]

    if platform == "windows":
        candidates = _windows_candidates(command)
        return any(_windows_match(directory, candidates) for directory in path_dirs)

    for directory in path_dirs:
        candidate = os.path.join(directory, command)
        if os.path.isfile(candidate) and os.access(candidate, os.X_OK):
            return True
    return False


def missing_deps(deps: list[str], platform: str | None = None) -> list[str]:
    """Return the declared executables that cannot be found, by exact name."""
    return [dep for dep in deps if not command_exists(dep, platform)]
