"""Shared response helper functions for tools.

Tool methods return plain dicts in one of two shapes so an agent can
handle results uniformly without catching exceptions.
"""

from typing import Any


def create_success_response(result: Any, message: str = "") -> dict:
    """Create standardized success response.

    Args:
        result: Operation result (can be any type)
        message: Optional success message for logging/display

    Returns:
        Structured response dict with success=True

    Example:
        >>> create_success_response(result=["weather"], message="Installed 1 skill")
        {'success': True, 'result': ['weather'], 'message': 'Installed 1 skill'}
    """
    return {
        "success": True,
        "result": result,
        "message": message,
    }


def create_error_response(error: str, message: str) -> dict:
    """Create standardized error response.

    Args:
        error: Machine-readable error code (e.g., "network_error")
        message: Human-friendly error message

    Returns:
        Structured response dict with success=False

    Example:
        >>> create_error_response(error="invalid_input", message="query cannot be empty")
        {'success': False, 'error': 'invalid_input', 'message': 'query cannot be empty'}
    """
    return {
        "success": False,
        "error": error,
        "message": message,
    }
