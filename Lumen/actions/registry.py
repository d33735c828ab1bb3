"""Action registry: registration, discovery and invocation validation."""

from __future__ import annotations

import logging
import threading
from typing import Any, Dict, Iterable, List, Optional

from ..utils.errors import ActionNotFoundError, ActionRegistryError, ActionValidationError
from .catalog import BUILTIN_ACTIONS, AgentAction

logger = logging.getLogger("LUMEN.Actions")

_TYPE_CHECKS = {
    "string": lambda v: isinstance(v, str),
    "number": lambda v: isinstance(v, (int, float)) and not isinstance(v, bool),
    "boolean": lambda v: isinstance(v, bool),
    "object": lambda v: isinstance(v, dict),
    "array": lambda v: isinstance(v, (list, tuple)),
}


class ActionRegistry:
    """In-process catalogue of agent actions keyed by id."""

    def __init__(self, actions: Optional[Iterable[AgentAction]] = None):
        self._actions: Dict[str, AgentAction] = {}
        self._lock = threading.Lock()
        for action in actions or []:
            self.register(action)

    def register(self, action: AgentAction, replace: bool = False) -> None:
        """Register an action; duplicate ids are rejected unless replace=True."""
        if not isinstance(action, AgentAction):
            raise ActionRegistryError(f"Expected AgentAction, got {type(action).__name__}")
        with self._lock:
            if action.id in self._actions and not replace:
                raise ActionRegistryError(f"Action already registered: {action.id}")
            self._actions[action.id] = action
        logger.debug(f"Registered agent action: {action.id}")

    def unregister(self, action_id: str) -> bool:
        with self._lock:
            removed = self._actions.pop(action_id, None) is not None
        if removed:
            logger.debug(f"Unregistered agent action: {action_id}")
        return removed

    def has_action(self, action_id: str) -> bool:
        return action_id in self._actions

    def get_action(self, action_id: str) -> Optional[AgentAction]:
        return self._actions.get(action_id)

    def require(self, action_id: str) -> AgentAction:
        action = self._actions.get(action_id)
        if action is None:
            raise ActionNotFoundError(f"Action not found: {action_id}", {"action_id": action_id})
        return action

    def get_actions(self, include_disabled: bool = False) -> List[AgentAction]:
        """All actions in registration order; disabled ones only on request."""
        with self._lock:
            actions = list(self._actions.values())
        return [a for a in actions if include_disabled or a.enabled]

    def get_actions_by_category(self, category: str) -> List[AgentAction]:
        return [a for a in self.get_actions() if a.category == category]

    def search_actions(self, query: str) -> List[AgentAction]:
        """Case-insensitive match on name, description or category."""
        needle = (query or "").strip().lower()
        if not needle:
            return self.get_actions()
        return [
            a for a in self.get_actions()
            if needle in a.name.lower()
            or needle in a.description.lower()
            or (a.category and needle in a.category.lower())
        ]

    def validate_parameters(self, action_id: str, parameters: Dict[str, Any]) -> None:
        """Check an invocation against the action's parameter metadata.

        Raises:
            ActionNotFoundError: unknown action id
            ActionValidationError: missing required, unknown, or mistyped parameters
        """
        action = self.require(action_id)
        if not isinstance(parameters, dict):
            raise ActionValidationError("Parameters must be an object", {"action_id": action_id})

        declared = {p.name: p for p in action.parameters}
        missing = [name for name in action.required_parameters if parameters.get(name) is None]
        unknown = [name for name in parameters if name not in declared]
        mistyped = [
            name for name, value in parameters.items()
            if name in declared and value is not None and not _TYPE_CHECKS[declared[name].type](value)
        ]

        if missing or unknown or mistyped:
            raise ActionValidationError(
                f"Invalid parameters for {action_id}",
                {"missing": missing, "unknown": unknown, "mistyped": mistyped},
            )

    def build_invocation(self, action_id: str, parameters: Dict[str, Any]) -> Dict[str, Any]:
        """Validated invocation payload with declared defaults filled in."""
        self.validate_parameters(action_id, parameters)
        action = self.require(action_id)
        resolved = {p.name: p.default for p in action.parameters if p.default is not None}
        resolved.update({k: v for k, v in parameters.items() if v is not None})
        return {"actionId": action.id, "parameters": resolved}

    def __len__(self) -> int:
        return len(self._actions)


def create_default_registry() -> ActionRegistry:
    """Registry pre-loaded with the built-in photo actions."""
    return ActionRegistry(BUILTIN_ACTIONS)


__all__ = ["ActionRegistry", "create_default_registry"]
