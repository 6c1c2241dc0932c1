"""Markdown file memory store.

Long-term memory lives in `<workspace>/memory/MEMORY.md`, with daily notes
in `<workspace>/memory/YYYY-MM-DD.md`. Appends rewrite MEMORY.md in place
while holding the store's lock.
"""

from __future__ import annotations

import logging
import threading
from datetime import date
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from skillpack.config.schema import SkillpackSettings

logger = logging.getLogger(__name__)

MAX_CONTEXT_CHARS = 8000
MAX_EXTRACTED_NOTES_CHARS = 8000
EXTRACTED_SECTION_HEADER = "## Extracted Notes"
REMEMBERED_FACTS_SECTION_HEADER = "## Remembered Facts"
TRUNCATION_MARKER = "... (truncated)"


def today_date() -> str:
    return date.today().isoformat()


def truncate(content: str, max_chars: int) -> str:
    """Shorten `content` to roughly `max_chars`, preferring natural boundaries.

    Tries paragraph, sentence and line breaks in the second half of the
    allowed text, then a space, then a hard cut.

    Examples:
        >>> truncate("short", 100)
        'short'
    """
    if len(content) <= max_chars:
        return content

    truncate_at = max(max_chars - 20, 0)
    head = content[:truncate_at]
    for sep in ("\n\n", ".\n", ". ", "\n"):
        pos = head.rfind(sep)
        if pos > truncate_at // 2:
            return f"{content[: pos + len(sep)]}\n{TRUNCATION_MARKER}"

    pos = head.rfind(" ")
    if pos > truncate_at // 2:
        return f"{content[:pos]} {TRUNCATION_MARKER}"

    return f"{head}{TRUNCATION_MARKER}"


def _append_to_section(
    existing: str, header: str, bullets: str, max_chars: int | None = None
) -> str:
    """Append bullet lines to a `## ` section, creating it at the end if absent.

    When `max_chars` is set, whole lines are dropped from the top of the
    section until its body fits.
    """
    section_start = existing.find(header)
    if section_start == -1:
        content = existing
        if content and not content.endswith("\n"):
            content += "\n"
        return f"{content}\n{header}\n{bullets}\n"

    after_header = section_start + len(header)
    before = existing[:after_header]
    rest = existing[after_header:]

    section_end = rest.find("\n## ")
    if section_end == -1:
        section_end = len(rest)
    section_body = rest[:section_end].strip("\n")
    after_section = rest[section_end:]

    combined = f"{section_body}\n{bullets}" if section_body else bullets

    if max_chars is not None:
        while len(combined) > max_chars:
            newline = combined.find("\n")
            if newline == -1:
                break
            combined = combined[newline + 1 :]

    return f"{before}\n{combined}\n{after_section}"


class MemoryStore:
    """Markdown memory for an agent workspace.

    Each store serializes its own appends with a lock. Pass the same lock to
    several stores that share a workspace to serialize them together.

    Example:
        >>> store = MemoryStore(Path("workspace"))
        >>> store.append_remembered_fact("User prefers concise responses")
        >>> "concise" in store.read_long_term()
        True
    """

    def __init__(self, workspace: Path, lock: threading.Lock | None = None):
        """Initialize MemoryStore and create the memory directory.

        Args:
            workspace: Workspace directory
            lock: Lock guarding MEMORY.md rewrites (a new one if omitted)
        """
        self.workspace = workspace
        self.memory_dir = workspace / "memory"
        self.memory_dir.mkdir(parents=True, exist_ok=True)
        self.memory_file = self.memory_dir / "MEMORY.md"
        self._lock = lock or threading.Lock()

    @classmethod
    def from_settings(cls, settings: SkillpackSettings) -> MemoryStore | None:
        """Create a store in the configured memory workspace, or None when memory is disabled."""
        if not settings.memory.enabled:
            return None
        return cls(settings.memory_workspace_path)

    def get_today_file(self) -> Path:
        return self.memory_dir / f"{today_date()}.md"

    @staticmethod
    def _read(path: Path) -> str:
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return ""

    def read_today(self) -> str:
        return self._read(self.get_today_file())

    def read_long_term(self) -> str:
        return self._read(self.memory_file)

    def get_memory_context(self, max_chars: int = MAX_CONTEXT_CHARS) -> str:
        """Build a prompt context block from long-term memory and today's notes.

        Long-term memory gets 60% of the budget; today's notes get what is
        left, if more than 100 characters remain.

        Returns:
            Context text, or "" when there is nothing to show
        """
        parts = []
        remaining = max_chars

        long_term = self.read_long_term()
        if long_term:
            truncated = truncate(long_term, int(max_chars * 0.6))
            parts.append(f"## Long-term Memory\n{truncated}")
            remaining = max(remaining - len(truncated), 0)

        today = self.read_today()
        if today and remaining > 100:
            parts.append(f"## Today's Notes\n{truncate(today, remaining)}")

        return "\n\n".join(parts)

    def append_extracted_facts(self, facts: list[str]) -> None:
        """Append facts to the Extracted Notes section, trimming the oldest past 8000 chars."""
        if not facts:
            return

        today = today_date()
        bullets = "\n".join(f"- [{today}] {fact}" for fact in facts)
        with self._lock:
            existing = self.read_long_term()
            updated = _append_to_section(
                existing, EXTRACTED_SECTION_HEADER, bullets, MAX_EXTRACTED_NOTES_CHARS
            )
            self.memory_file.write_text(updated, encoding="utf-8")
        logger.debug(f"Appended {len(facts)} extracted facts to {self.memory_file}")

    def append_remembered_fact(self, fact: str) -> None:
        """Append one fact to the Remembered Facts section. Blank facts are ignored."""
        fact = fact.strip()
        if not fact:
            return

        bullet = f"- [{today_date()}] {fact}"
        with self._lock:
            existing = self.read_long_term()
            updated = _append_to_section(existing, REMEMBERED_FACTS_SECTION_HEADER, bullet)
            self.memory_file.write_text(updated, encoding="utf-8")
        logger.debug(f"Remembered fact in {self.memory_file}")
