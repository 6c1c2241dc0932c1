"""Custom exceptions for skill subsystem.

This module defines a hierarchy of domain-specific exceptions for skill
resolution, acquisition, installation and runtime activation.

Exception Hierarchy:
    SkillError (base)
    ├── ValidationError
    ├── SourceResolutionError
    ├── NetworkError
    ├── ArchiveError
    ├── FilesystemError
    ├── GitError
    ├── AvailabilityError
    ├── SkillNotFoundError
    ├── SkillManifestError
    ├── SkillInstallError
    └── SkillSecurityError
"""

from pathlib import Path


class SkillError(Exception):
    """Base exception for all skill-related errors.

    All custom exceptions in the skill subsystem inherit from this base class,
    allowing for catch-all error handling at the tool and CLI boundaries.

    Example:
        >>> try:
        ...     # some skill operation
        ...     pass
        ... except SkillError as e:
        ...     print(f"Error: {e}")
    """

    pass


class ValidationError(SkillError):
    """Invalid caller input.

    Raised for empty queries, slugs, skill names or sources, and when no
    discovered skill matches the requested filters.

    Example:
        >>> raise ValidationError("query cannot be empty")
    """

    pass


class SourceResolutionError(SkillError):
    """Source address could not be resolved to a searchable directory.

    Example:
        >>> raise SourceResolutionError("source subpath does not exist: /tmp/x/skills")
    """

    pass


class NetworkError(SkillError):
    """HTTP request failed or returned an unusable response.

    Attributes:
        status_code: HTTP status code (None for transport or parse failures)
        url: Requested URL
        snippet: Trimmed response body (may be empty)
    """

    def __init__(
        self,
        message: str,
        url: str,
        status_code: int | None = None,
        snippet: str = "",
    ):
        """Initialize NetworkError.

        Args:
            message: Error message
            url: Requested URL
            status_code: HTTP status code if a response was received
            snippet: Trimmed response body
        """
        self.url = url
        self.status_code = status_code
        self.snippet = snippet
        super().__init__(message)


class ArchiveError(SkillError):
    """Downloaded archive is corrupt or cannot be opened."""

    pass


class FilesystemError(SkillError):
    """Create, remove, move or copy failure on disk.

    Attributes:
        path: Offending path
    """

    def __init__(self, message: str, path: Path | str):
        self.path = Path(path)
        super().__init__(f"{message}: {path}")


class GitError(SkillError):
    """Git clone failed.

    Attributes:
        url: Repository URL
        details: Captured stderr, stdout or a generic message
    """

    def __init__(self, url: str, details: str):
        self.url = url
        self.details = details
        super().__init__(f"git clone failed for {url}: {details}")


class AvailabilityError(SkillError):
    """Skill exists but cannot run here (platform mismatch or missing executables).

    Example:
        >>> raise AvailabilityError("Skill 'x' is missing required dependencies: jq")
    """

    pass


class SkillNotFoundError(SkillError):
    """Skill not found in any skills root or source.

    Example:
        >>> raise SkillNotFoundError("Skill 'kalshi-markets' not found")
    """

    pass


class SkillManifestError(SkillError):
    """Skill manifest (SKILL.md) missing or unreadable.

    Example:
        >>> raise SkillManifestError("installed directory is missing SKILL.md at root: /tmp/x")
    """

    pass


class SkillInstallError(SkillError):
    """Install target cannot be prepared (for example it already exists)."""

    pass


class SkillSecurityError(SkillError):
    """Unsafe path detected while copying or extracting skill content.

    Example:
        >>> raise SkillSecurityError("unsafe relative path while copying: ../etc/passwd")
    """

    pass
