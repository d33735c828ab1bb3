from .catalog import AgentAction, AgentExample, AgentParameter, AgentReturns, Permission, BUILTIN_ACTIONS
from .registry import ActionRegistry, create_default_registry
from .suggester import ActionSuggester

__all__ = [
    "AgentAction",
    "AgentExample",
    "AgentParameter",
    "AgentReturns",
    "Permission",
    "BUILTIN_ACTIONS",
    "ActionRegistry",
    "create_default_registry",
    "ActionSuggester",
]
