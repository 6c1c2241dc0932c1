"""Markdown memory store for agent workspaces."""

from skillpack.memory.store import MemoryStore

__all__ = ["MemoryStore"]
