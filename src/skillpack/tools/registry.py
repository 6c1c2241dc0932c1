"""Explicit tool name to callable mapping built from toolsets."""

import logging
from collections.abc import Callable
from typing import Any

from skillpack.tools.toolset import AgentToolset

logger = logging.getLogger(__name__)


class ToolRegistry:
    """Registry of tool callables keyed by their function name.

    Example:
        >>> registry = ToolRegistry()
        >>> registry.register_toolset(SkillTools(settings))  # doctest: +SKIP
        >>> await registry.call("activate_skill", skill_name="weather")  # doctest: +SKIP
    """

    def __init__(self) -> None:
        self._tools: dict[str, Callable] = {}

    def register(self, tool: Callable, name: str | None = None) -> None:
        """Register a single tool; a later registration under the same name replaces it."""
        tool_name = name or tool.__name__
        if tool_name in self._tools:
            logger.warning(f"Replacing registered tool '{tool_name}'")
        self._tools[tool_name] = tool

    def register_toolset(self, toolset: AgentToolset) -> None:
        """Register every tool returned by `toolset.get_tools()`."""
        for tool in toolset.get_tools():
            self.register(tool)
        logger.debug(f"Registered toolset {type(toolset).__name__}")

    def get(self, name: str) -> Callable:
        """Look up a tool.

        Raises:
            KeyError: If no tool has the name
        """
        if name not in self._tools:
            raise KeyError(f"Unknown tool: {name}")
        return self._tools[name]

    def names(self) -> list[str]:
        """Registered tool names, sorted."""
        return sorted(self._tools)

    async def call(self, name: str, **kwargs: Any) -> Any:
        """Invoke a tool by name and await its result.

        Raises:
            KeyError: If no tool has the name
        """
        return await self.get(name)(**kwargs)
