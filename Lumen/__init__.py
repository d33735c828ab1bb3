"""Lumen - natural-language photo query interpretation"""

from __future__ import annotations

__version__ = "0.1.0"

# Pipeline
from .core.handler import IntentHandler
from .core.intent import IntentClassifier
from .core.confidence import ConfidenceCalculator
from .core.types import Entity, EntityType, IntentClassification, SemanticQuery, Span

# Extraction helpers
from .extraction.entities import EntityExtractor, extract_entities, extract_parameters

# Actions
from .actions import ActionRegistry, ActionSuggester, AgentAction, create_default_registry

# Configuration
from .config.settings import LumenConfig, get_config
from .config.rules import RuleSet, default_ruleset, load_ruleset
from .config.logging_config import setup_logging

# Errors
from .utils.errors import (
    LumenException, ConfigurationError, RuleSetError,
    ActionRegistryError, ActionNotFoundError, ActionValidationError,
)

# API
from .api import LumenAPIServer, LumenAPIClient

__all__ = [
    # Version
    "__version__",

    # Pipeline
    "IntentHandler",
    "IntentClassifier",
    "ConfidenceCalculator",
    "Entity",
    "EntityType",
    "IntentClassification",
    "SemanticQuery",
    "Span",

    # Extraction
    "EntityExtractor",
    "extract_entities",
    "extract_parameters",

    # Actions
    "ActionRegistry",
    "ActionSuggester",
    "AgentAction",
    "create_default_registry",

    # Configuration
    "LumenConfig",
    "get_config",
    "RuleSet",
    "default_ruleset",
    "load_ruleset",
    "setup_logging",

    # Errors
    "LumenException",
    "ConfigurationError",
    "RuleSetError",
    "ActionRegistryError",
    "ActionNotFoundError",
    "ActionValidationError",

    # API
    "LumenAPIServer",
    "LumenAPIClient",
]
