"""Base class for skillpack toolsets.

Toolsets group related tools with shared dependencies, avoiding global
state and enabling dependency injection for testing.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

from skillpack.config import SkillpackSettings
from skillpack.utils.responses import create_error_response, create_success_response


class AgentToolset(ABC):
    """Base class for toolsets exposed to an agent.

    Each toolset receives a SkillpackSettings instance, making it easy to
    point at temporary directories in tests.

    Example:
        >>> class MyTools(AgentToolset):
        ...     def get_tools(self):
        ...         return [self.my_tool]
        ...
        ...     async def my_tool(self, arg: str) -> dict:
        ...         return self._create_success_response(
        ...             result=f"Processed: {arg}",
        ...             message="Tool executed successfully"
        ...         )
    """

    def __init__(self, settings: SkillpackSettings):
        """Initialize toolset with settings.

        Args:
            settings: Skillpack settings with workspace, install and hub configuration
        """
        self.settings = settings

    @abstractmethod
    def get_tools(self) -> list[Callable]:
        """Get list of tool functions.

        Tools should be async callables with type hints and a one-line
        docstring the agent can read.

        Returns:
            List of callable tool functions
        """
        pass

    def _create_success_response(self, result: Any, message: str = "") -> dict:
        """Create standardized success response.

        Args:
            result: Tool execution result (can be any type)
            message: Optional success message for logging/display

        Returns:
            Structured response dict with success=True
        """
        return create_success_response(result, message)

    def _create_error_response(self, error: str, message: str) -> dict:
        """Create standardized error response.

        Args:
            error: Machine-readable error code (e.g., "invalid_input")
            message: Human-friendly error message

        Returns:
            Structured response dict with success=False
        """
        return create_error_response(error, message)
