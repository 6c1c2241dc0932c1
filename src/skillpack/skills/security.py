"""Security validation for skill subsystem.

This module provides install-name sanitization and relative path checks
used when copying or extracting skill content.
"""

import re
from pathlib import Path, PurePath, PurePosixPath, PureWindowsPath

from skillpack.skills.errors import SkillSecurityError

FALLBACK_SKILL_NAME = "unnamed-skill"
MAX_SKILL_NAME_LENGTH = 255

_DISALLOWED_RUN = re.compile(r"[^a-z0-9._]+")


def sanitize_name(name: str) -> str:
    """Turn an arbitrary skill name or slug into a safe directory name.

    Lowercases, replaces every run of characters outside `[a-z0-9._]` with a
    single hyphen, strips leading and trailing dots and hyphens, and caps the
    result at 255 characters. An empty result becomes `unnamed-skill`.

    Args:
        name: Raw name (front matter name, directory name or registry slug)

    Returns:
        Sanitized install name

    Examples:
        >>> sanitize_name("  Hello World!  ")
        'hello-world'
        >>> sanitize_name("../My_Skill")
        'my_skill'
        >>> sanitize_name("...")
        'unnamed-skill'
    """
    sanitized = _DISALLOWED_RUN.sub("-", name.lower()).strip(".-")
    if not sanitized:
        return FALLBACK_SKILL_NAME
    return sanitized[:MAX_SKILL_NAME_LENGTH]


def pick_unique_install_name(base: str, used_names: set[str]) -> str:
    """Pick an install name not yet used in the current batch.

    The first occurrence keeps `base`; later ones get `-2`, `-3`, ...
    The chosen name is added to `used_names`.

    Examples:
        >>> used = set()
        >>> [pick_unique_install_name("demo", used) for _ in range(3)]
        ['demo', 'demo-2', 'demo-3']
    """
    if base not in used_names:
        used_names.add(base)
        return base

    index = 2
    while True:
        candidate = f"{base}-{index}"
        if candidate not in used_names:
            used_names.add(candidate)
            return candidate
        index += 1


def is_safe_relative_path(path: PurePath | str) -> bool:
    """Check that a relative path cannot escape its base directory.

    Rejects parent-directory components, absolute paths and drive or UNC
    prefixes, in both POSIX and Windows spellings.

    Examples:
        >>> is_safe_relative_path("scripts/run.py")
        True
        >>> is_safe_relative_path("../etc/passwd")
        False
    """
    text = str(path)
    if not text:
        return False

    posix = PurePosixPath(text.replace("\\", "/"))
    if posix.is_absolute() or ".." in posix.parts:
        return False

    windows = PureWindowsPath(text)
    if windows.drive or windows.root:
        return False

    return True


def ensure_safe_relative_path(path: PurePath | str) -> None:
    """Raise SkillSecurityError if `path` is not a safe relative path."""
    if not is_safe_relative_path(path):
        raise SkillSecurityError(f"unsafe relative path while copying: {path}")


def is_within_directory(base: Path, target: Path) -> bool:
    """Check that `target` resolves inside `base`."""
    try:
        target.resolve().relative_to(base.resolve())
    except ValueError:
        return False
    return True
