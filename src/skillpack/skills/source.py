"""Source address parsing.

Classifies a user-supplied source string into one of:

- a local path (`./skills`, `../repo`, `/abs/path`, `.`, `..`)
- GitHub owner/repo shorthand (`owner/repo`, `owner/repo/sub/dir`,
  `owner/repo@skill-name`)
- a GitHub web URL (`https://github.com/owner/repo/tree/main/skills`)
- any other git URL, used verbatim
"""

from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from urllib.parse import urlparse

from skillpack.skills.errors import SourceResolutionError

GITHUB_PREFIXES = ("https://github.com/", "http://github.com/")


@dataclass(frozen=True)
class SourceAddress:
    """Parsed skill source.

    Exactly one of `git_url` and `local_path` is set.
    """

    original: str
    git_url: str | None = None
    local_path: Path | None = None
    ref_name: str | None = None
    subpath: PurePosixPath | None = None
    skill_filter: str | None = None

    @property
    def is_local(self) -> bool:
        return self.local_path is not None


def _github_git_url(owner: str, repo: str) -> str:
    return f"https://github.com/{owner}/{repo}.git"


def is_local_path(value: str) -> bool:
    """Check whether a source string names a filesystem path."""
    return (
        Path(value).is_absolute()
        or value.startswith("./")
        or value.startswith("../")
        or value in (".", "..")
    )


def parse_owner_repo(source: str) -> SourceAddress | None:
    """Parse `owner/repo[/subpath][@skill]` shorthand.

    Returns None when the string looks like a URL, has fewer than two path
    segments, or has a domain-like owner.
    """
    if "://" in source or source.startswith("git@"):
        return None

    repo_and_path = source
    skill_filter = None
    index = source.rfind("@")
    if index > 0:
        repo_and_path = source[:index]
        raw_filter = source[index + 1 :].strip()
        skill_filter = raw_filter or None

    segments = [part for part in repo_and_path.split("/") if part]
    if len(segments) < 2:
        return None

    owner, repo = segments[0], segments[1]
    if owner.startswith(".") or repo.startswith(".") or "." in owner:
        return None

    subpath = PurePosixPath("/".join(segments[2:])) if len(segments) > 2 else None

    return SourceAddress(
        original=source,
        git_url=_github_git_url(owner, repo),
        subpath=subpath,
        skill_filter=skill_filter,
    )


def parse_github_url(source: str) -> SourceAddress | None:
    """Parse `https://github.com/owner/repo[/tree/<ref>[/subpath]]`.

    Returns None for non-GitHub URLs or URLs without owner and repo.
    """
    if not source.startswith(GITHUB_PREFIXES):
        return None

    try:
        parsed = urlparse(source)
    except ValueError as e:
        raise SourceResolutionError(f"invalid source URL: {source}") from e

    segments = [segment for segment in parsed.path.split("/") if segment]
    if len(segments) < 2:
        return None

    owner = segments[0]
    repo = segments[1]
    while repo.endswith(".git"):
        repo = repo[: -len(".git")]
    rest = segments[2:]

    ref_name = None
    subpath = None
    if len(rest) >= 2 and rest[0] == "tree":
        ref_name = rest[1]
        if len(rest) > 2:
            subpath = PurePosixPath("/".join(rest[2:]))

    return SourceAddress(
        original=source,
        git_url=_github_git_url(owner, repo),
        ref_name=ref_name,
        subpath=subpath,
    )


def parse_source(source: str) -> SourceAddress:
    """Classify a source string.

    Args:
        source: Raw source string (surrounding whitespace ignored)

    Returns:
        Parsed SourceAddress

    Raises:
        SourceResolutionError: If the source is empty or an unparsable GitHub URL

    Examples:
        >>> parse_source("vercel-labs/agent-skills@web-design").git_url
        'https://github.com/vercel-labs/agent-skills.git'
        >>> parse_source("./my-skills").local_path
        PosixPath('my-skills')
    """
    trimmed = source.strip()
    if not trimmed:
        raise SourceResolutionError("source cannot be empty")

    if is_local_path(trimmed):
        return SourceAddress(original=trimmed, local_path=Path(trimmed))

    parsed = parse_owner_repo(trimmed)
    if parsed is not None:
        return parsed

    parsed = parse_github_url(trimmed)
    if parsed is not None:
        return parsed

    return SourceAddress(original=trimmed, git_url=trimmed)
