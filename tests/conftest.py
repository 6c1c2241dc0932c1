"""Shared test fixtures for all tests.

This file imports and re-exports fixtures from the fixtures/ module so they
are discovered by pytest for every test directory.
"""

from tests.fixtures.config import skillpack_settings, workspace_dir  # noqa: F401
from tests.fixtures.memory import memory_store  # noqa: F401
from tests.fixtures.skills import make_skill, make_zip, skill_source  # noqa: F401
