"""Map a classified intent to invokable action descriptors."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from .catalog import INTENT_ACTIONS, AgentAction
from .registry import ActionRegistry, create_default_registry

logger = logging.getLogger("LUMEN.Actions")


class ActionSuggester:
    """Registry-backed intent -> actions lookup.

    Declared async so a registry living behind I/O can be swapped in; the
    default registry is in-process and never suspends.
    """

    def __init__(
        self,
        registry: Optional[ActionRegistry] = None,
        intent_actions: Optional[Dict[str, List[str]]] = None,
    ):
        self.registry = registry if registry is not None else create_default_registry()
        self.intent_actions = intent_actions or INTENT_ACTIONS

    async def suggest_actions(self, intent: str) -> List[AgentAction]:
        actions: List[AgentAction] = []
        for action_id in self.intent_actions.get(intent, []):
            action = self.registry.get_action(action_id)
            if action is None:
                logger.warning(f"Intent '{intent}' maps to unregistered action {action_id}")
                continue
            if action.enabled:
                actions.append(action)
        return actions


__all__ = ["ActionSuggester"]
