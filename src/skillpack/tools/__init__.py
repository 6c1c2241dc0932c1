"""Tool implementations for skillpack."""

from skillpack.tools.registry import ToolRegistry
from skillpack.tools.skills import SkillTools
from skillpack.tools.toolset import AgentToolset

__all__ = ["AgentToolset", "SkillTools", "ToolRegistry"]
