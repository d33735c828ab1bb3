"""Centralized configuration system for Lumen.

Supports environment variables, config files, and programmatic overrides.
"""

from __future__ import annotations

import os
import json
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, Optional
import logging

from ..utils.errors import ConfigurationError

logger = logging.getLogger("LUMEN.Config")


@dataclass
class ConfidenceConfig:
    """Confidence heuristics, applied in declaration order."""
    base_confidence: float = 0.60
    vague_confidence: float = 0.50  # replaces the running value for vague queries
    specific_keyword_boost: float = 0.15
    entity_weight: float = 0.30  # multiplier on mean entity confidence
    short_query_chars: int = 5
    short_query_penalty: float = 0.20
    long_query_chars: int = 200
    long_query_penalty: float = 0.10
    floor_trigger: float = 0.30
    floor_value: float = 0.40
    clarification_threshold: float = 0.50

    def validate(self) -> None:
        """Raise ConfigurationError on out-of-range values."""
        for name in (
            "base_confidence", "vague_confidence", "specific_keyword_boost",
            "short_query_penalty", "long_query_penalty", "floor_trigger",
            "floor_value", "clarification_threshold",
        ):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ConfigurationError(f"confidence.{name} must be within [0, 1]", {"value": value})
        if self.entity_weight <= 0.0:
            raise ConfigurationError("confidence.entity_weight must be positive", {"value": self.entity_weight})
        if self.short_query_chars >= self.long_query_chars:
            raise ConfigurationError(
                "confidence.short_query_chars must be below long_query_chars",
                {"short": self.short_query_chars, "long": self.long_query_chars},
            )


@dataclass
class RulesConfig:
    """Rule table source."""
    path: Optional[str] = None  # JSON file overriding built-in tables


@dataclass
class APIConfig:
    """REST surface configuration."""
    host: str = "0.0.0.0"
    port: int = 8000
    max_query_chars: int = 10000
    cors_origins: str = "*"


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
    format: str = "standard"  # standard | json
    file_path: Optional[str] = None


@dataclass
class LumenConfig:
    """Master configuration for Lumen."""
    confidence: ConfidenceConfig = field(default_factory=ConfidenceConfig)
    rules: RulesConfig = field(default_factory=RulesConfig)
    api: APIConfig = field(default_factory=APIConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary."""
        return asdict(self)

    def to_json(self) -> str:
        """Convert config to JSON string."""
        return json.dumps(self.to_dict(), indent=2)

    def save(self, path: str) -> None:
        """Save config to JSON file."""
        try:
            with open(path, 'w') as f:
                json.dump(self.to_dict(), f, indent=2)
            logger.info(f"Config saved to {path}")
        except OSError as e:
            logger.error(f"Failed to save config: {e}")
            raise ConfigurationError(f"Could not write config to {path}", {"error": str(e)}) from e

    @classmethod
    def load(cls, path: str) -> LumenConfig:
        """Load config from JSON file."""
        if not os.path.exists(path):
            logger.warning(f"Config file not found: {path}, using defaults")
            return cls()

        try:
            with open(path, 'r') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Could not read config file {path}", {"error": str(e)}) from e

        config = cls()
        for key, value in data.items():
            if hasattr(config, key) and isinstance(value, dict):
                # Recursively update dataclass fields
                setattr(config, key, cls._update_dataclass(getattr(config, key), value))

        config.confidence.validate()
        logger.info(f"Config loaded from {path}")
        return config

    @staticmethod
    def _update_dataclass(obj: Any, data: Dict[str, Any]) -> Any:
        """Recursively update dataclass from dict."""
        if not isinstance(data, dict):
            return obj

        for key, value in data.items():
            if hasattr(obj, key):
                current = getattr(obj, key)
                if hasattr(current, '__dataclass_fields__'):
                    setattr(obj, key, LumenConfig._update_dataclass(current, value))
                else:
                    setattr(obj, key, value)
        return obj

    @classmethod
    def from_env(cls, base: Optional[LumenConfig] = None) -> LumenConfig:
        """Load config from environment variables with safe parsing.

        Values present in the environment are applied on top of ``base``
        (or the defaults), whatever ``base`` already holds.
        """
        config = base if base is not None else cls()

        def safe_int(key: str, default: Optional[int] = None) -> Optional[int]:
            val = os.getenv(key)
            if val is not None:
                try:
                    return int(val)
                except ValueError:
                    logger.warning(f"Invalid int for {key}={val}, using default")
                    return default
            return default

        def safe_float(key: str, default: Optional[float] = None) -> Optional[float]:
            val = os.getenv(key)
            if val is not None:
                try:
                    return float(val)
                except ValueError:
                    logger.warning(f"Invalid float for {key}={val}, using default")
                    return default
            return default

        def safe_str(key: str, default: Optional[str] = None) -> Optional[str]:
            val = os.getenv(key)
            return val if val is not None else default

        # Confidence heuristics from env
        if (threshold := safe_float("LUMEN_CLARIFICATION_THRESHOLD")) is not None:
            config.confidence.clarification_threshold = threshold
        if (weight := safe_float("LUMEN_ENTITY_WEIGHT")) is not None:
            config.confidence.entity_weight = weight
        if (boost := safe_float("LUMEN_SPECIFIC_KEYWORD_BOOST")) is not None:
            config.confidence.specific_keyword_boost = boost

        # Rules from env
        if (rules_path := safe_str("LUMEN_RULES_PATH")) is not None:
            config.rules.path = rules_path

        # API from env
        if (host := safe_str("LUMEN_API_HOST")) is not None:
            config.api.host = host
        if (port := safe_int("LUMEN_API_PORT")) is not None:
            config.api.port = port
        if (max_chars := safe_int("LUMEN_MAX_QUERY_CHARS")) is not None:
            config.api.max_query_chars = max_chars

        # Logging from env
        if (level := safe_str("LUMEN_LOG_LEVEL")) is not None:
            config.logging.level = level
        if (fmt := safe_str("LUMEN_LOG_FORMAT")) is not None:
            config.logging.format = fmt
        if (filepath := safe_str("LUMEN_LOG_FILE")) is not None:
            config.logging.file_path = filepath

        config.confidence.validate()
        logger.debug("Config loaded from environment variables")
        return config


def get_config(config_path: Optional[str] = None, use_env: bool = True) -> LumenConfig:
    """Get Lumen configuration.

    Priority: env vars > config file > defaults
    """
    config = LumenConfig()

    if config_path and os.path.exists(config_path):
        config = LumenConfig.load(config_path)

    if use_env:
        config = LumenConfig.from_env(config)

    return config


__all__ = [
    "LumenConfig",
    "ConfidenceConfig",
    "RulesConfig",
    "APIConfig",
    "LoggingConfig",
    "get_config",
]
