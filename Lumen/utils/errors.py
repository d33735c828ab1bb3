"""Exception hierarchy for Lumen.

The interpretation pipeline itself never raises for user input: an
unclassifiable query is a result value. These exceptions cover the edges:
configuration, rule tables and the action registry.
"""

from __future__ import annotations

import functools
import logging
from typing import Callable, Optional, TypeVar

logger = logging.getLogger("LUMEN.Errors")

T = TypeVar("T")


class LumenException(Exception):
    """Base exception for Lumen."""

    def __init__(self, message: str, context: Optional[dict] = None):
        """Initialize exception with context.

        Args:
            message: Error message
            context: Dictionary with additional context (component, details, etc.)
        """
        self.message = message
        self.context = context or {}
        super().__init__(message)

    def __str__(self) -> str:
        """String representation with context."""
        result = f"[{self.__class__.__name__}] {self.message}"
        if self.context:
            result += f" (context: {self.context})"
        return result


class ConfigurationError(LumenException):
    """Raised when configuration is invalid."""
    pass


class RuleSetError(LumenException):
    """Raised when an intent or entity rule table is malformed."""
    pass


class ActionRegistryError(LumenException):
    """Raised on invalid action registration."""
    pass


class ActionNotFoundError(ActionRegistryError):
    """Raised when an action id is not registered."""
    pass


class ActionValidationError(ActionRegistryError):
    """Raised when invocation parameters do not satisfy an action."""
    pass


def with_error_context(component: str, operation: str) -> Callable:
    """Decorator to add context to errors.

    Args:
        component: Component name (e.g., "rules", "config")
        operation: Operation name (e.g., "load", "compile")

    Returns:
        Decorator function
    """
    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> T:
            try:
                return func(*args, **kwargs)
            except LumenException:
                # Re-raise Lumen exceptions as-is
                raise
            except Exception as e:
                context = {
                    "component": component,
                    "operation": operation,
                    "original_error": str(e),
                }
                logger.debug(f"Wrapping error in {component}.{operation}: {e}")
                raise LumenException(
                    f"Error in {component}.{operation}: {e}",
                    context=context,
                ) from e
        return wrapper
    return decorator


__all__ = [
    "LumenException",
    "ConfigurationError",
    "RuleSetError",
    "ActionRegistryError",
    "ActionNotFoundError",
    "ActionValidationError",
    "with_error_context",
]
