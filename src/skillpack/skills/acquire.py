"""Skill content acquisition.

This module materializes skill sources on disk: shallow git clones into a
scratch directory scoped to a single call, and registry zip archives
extracted into an install target.
"""

import gc
import io
import logging
import shutil
import sys
import tempfile
import zipfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from git import GitCommandError, Repo

from skillpack.skills.errors import (
    ArchiveError,
    FilesystemError,
    GitError,
    SkillManifestError,
    SourceResolutionError,
)
from skillpack.skills.manifest import SKILL_FILE_NAME
from skillpack.skills.security import is_safe_relative_path, is_within_directory
from skillpack.skills.source import SourceAddress

logger = logging.getLogger(__name__)


def _clean_git_output(text: str | bytes | None) -> str:
    """Strip GitPython's `stderr: '...'` decoration from captured output."""
    if not text:
        return ""
    if isinstance(text, bytes):
        text = text.decode("utf-8", errors="replace")
    cleaned = text.strip()
    for prefix in ("stderr:", "stdout:"):
        if cleaned.startswith(prefix):
            cleaned = cleaned[len(prefix) :].strip()
    if len(cleaned) >= 2 and cleaned[0] == cleaned[-1] == "'":
        cleaned = cleaned[1:-1]
    return cleaned.strip()


def clone_repo(address: SourceAddress, clone_dir: Path) -> None:
    """Shallow-clone a git source into `clone_dir`.

    Args:
        address: Parsed source with `git_url` set
        clone_dir: Destination directory (must be empty or absent)

    Raises:
        SourceResolutionError: If the source has no git URL
        GitError: If the clone fails; carries stderr, else stdout, else a generic message
    """
    if address.git_url is None:
        raise SourceResolutionError("missing git URL for clone")

    clone_kwargs: dict[str, object] = {"depth": 1}
    if address.ref_name:
        clone_kwargs["branch"] = address.ref_name

    logger.info(f"Cloning skills from {address.git_url}...")
    repo = None
    try:
        repo = Repo.clone_from(address.git_url, clone_dir, **clone_kwargs)
    except GitCommandError as e:
        details = (
            _clean_git_output(e.stderr) or _clean_git_output(e.stdout) or "unknown git error"
        )
        raise GitError(address.git_url, details) from e
    finally:
        # Release file handles so the scratch directory can be removed on Windows
        if repo is not None:
            repo.close()
            if sys.platform == "win32":
                del repo
                gc.collect()


@contextmanager
def acquire_source(address: SourceAddress) -> Iterator[Path]:
    """Yield a local directory holding the source's content.

    Local sources are yielded as-is. Git sources are cloned into a temporary
    directory that is removed when the context exits, on success or error.

    Example:
        >>> with acquire_source(parse_source("owner/repo")) as root:  # doctest: +SKIP
        ...     discover_skills(root)
    """
    if address.local_path is not None:
        yield address.local_path
        return

    with tempfile.TemporaryDirectory(prefix="skillpack-clone-") as temp_dir:
        clone_dir = Path(temp_dir) / "repo"
        clone_repo(address, clone_dir)
        yield clone_dir


def resolve_search_root(source_root: Path, address: SourceAddress) -> Path:
    """Apply the source's subpath and check that it exists.

    Raises:
        SourceResolutionError: If the resulting directory does not exist
    """
    search_root = source_root / address.subpath if address.subpath else source_root
    if not search_root.exists():
        raise SourceResolutionError(f"source subpath does not exist: {search_root}")
    return search_root


def extract_zip(zip_bytes: bytes, target_dir: Path) -> int:
    """Extract a zip archive into `target_dir` entry by entry.

    Entries with empty names or paths that would land outside `target_dir`
    (zip-slip) are skipped.

    Args:
        zip_bytes: Raw archive bytes
        target_dir: Existing destination directory

    Returns:
        Number of files written

    Raises:
        ArchiveError: If the archive or an entry is corrupt
        FilesystemError: If a directory or file cannot be written
    """
    try:
        archive = zipfile.ZipFile(io.BytesIO(zip_bytes))
    except zipfile.BadZipFile as e:
        raise ArchiveError(f"failed to open zip archive: {e}") from e

    written = 0
    with archive:
        for info in archive.infolist():
            name = info.filename
            if not name or "\x00" in name or not is_safe_relative_path(name.rstrip("/\\")):
                logger.warning(f"Skipping unsafe zip entry: {name!r}")
                continue

            out_path = target_dir / name.replace("\\", "/")
            if not is_within_directory(target_dir, out_path):
                logger.warning(f"Skipping zip entry outside target: {name!r}")
                continue

            if info.is_dir() or name.endswith("/"):
                try:
                    out_path.mkdir(parents=True, exist_ok=True)
                except OSError as e:
                    raise FilesystemError("failed to create directory", out_path) from e
                continue

            try:
                out_path.parent.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise FilesystemError("failed to create parent directory", out_path.parent) from e

            try:
                with archive.open(info) as src, open(out_path, "wb") as dst:
                    shutil.copyfileobj(src, dst)
            except (zipfile.BadZipFile, EOFError) as e:
                raise ArchiveError(f"failed to read zip entry {name}: {e}") from e
            except OSError as e:
                raise FilesystemError("failed to extract file", out_path) from e
            written += 1

    return written


def flatten_single_nested_dir(target_dir: Path) -> bool:
    """Promote a lone wrapper directory's contents up one level.

    Registry archives often wrap the skill in a single top-level folder. If
    `target_dir` has no SKILL.md, contains exactly one directory and no files,
    and that directory holds SKILL.md, its entries are moved into
    `target_dir` and the wrapper is removed.

    Returns:
        True if the directory was flattened

    Raises:
        FilesystemError: If an entry cannot be moved or the wrapper removed
    """
    if (target_dir / SKILL_FILE_NAME).is_file():
        return False

    try:
        entries = list(target_dir.iterdir())
    except OSError as e:
        raise FilesystemError("failed to read directory", target_dir) from e

    dirs = [entry for entry in entries if entry.is_dir()]
    files = [entry for entry in entries if entry.is_file()]
    if files or len(dirs) != 1:
        return False

    child = dirs[0]
    if not (child / SKILL_FILE_NAME).is_file():
        return False

    # Move the wrapper aside first so an entry sharing its name can take its place
    staging = target_dir / f".flatten-{child.name}"
    try:
        child.rename(staging)
    except OSError as e:
        raise FilesystemError("failed to stage nested dir", child) from e
    child = staging

    for entry in list(child.iterdir()):
        destination = target_dir / entry.name
        try:
            entry.rename(destination)
        except OSError as e:
            raise FilesystemError(
                f"failed to move extracted content from {entry}", destination
            ) from e

    try:
        shutil.rmtree(child)
    except OSError as e:
        raise FilesystemError("failed to remove nested dir", child) from e

    logger.debug(f"Flattened nested skill directory {child.name} into {target_dir}")
    return True


def ensure_skill_md_exists(directory: Path) -> None:
    """Raise SkillManifestError unless `directory` has SKILL.md at its root."""
    if not (directory / SKILL_FILE_NAME).is_file():
        raise SkillManifestError(
            f"installed directory is missing {SKILL_FILE_NAME} at root: {directory}"
        )
