"""Memory fixtures for testing."""

import pytest

from skillpack.memory.store import MemoryStore


@pytest.fixture
def memory_store(workspace_dir):
    """Create MemoryStore in a temporary workspace."""
    return MemoryStore(workspace_dir)
