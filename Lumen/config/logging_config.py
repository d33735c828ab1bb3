"""Logging setup for Lumen entry points.

Two output styles: coloured single-line text for terminals, and one JSON
object per line for log shippers. Library code only ever calls
logging.getLogger("LUMEN.<Component>"); handlers are installed here.
"""

from __future__ import annotations

import json
import logging
import logging.handlers
import sys
from typing import Optional

from .settings import LoggingConfig


class JSONFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        log_dict = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        request_id = getattr(record, "request_id", None)
        if request_id:
            log_dict["request_id"] = request_id

        if record.exc_info:
            log_dict["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_dict)


class StandardFormatter(logging.Formatter):
    """Text formatter, coloured when stdout is a terminal."""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[41m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        if sys.stdout.isatty():
            color = self.COLORS.get(record.levelname, "")
            reset = self.RESET
        else:
            color = reset = ""

        result = f"{self.formatTime(record)} {color}{record.levelname:8s}{reset} [{record.name}] {record.getMessage()}"
        if record.exc_info:
            result += "\n" + self.formatException(record.exc_info)
        return result


def setup_logging(
    log_level: str = "INFO",
    log_format: str = "standard",
    log_file: Optional[str] = None,
    component_levels: Optional[dict] = None,
) -> None:
    """Install root handlers for a Lumen process.

    Args:
        log_level: Root level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: "standard" or "json"
        log_file: Optional path for a rotating file handler
        component_levels: Per-logger overrides, e.g. {"LUMEN.Entities": "DEBUG"}
    """
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    level = getattr(logging, log_level.upper(), logging.INFO)
    root_logger.setLevel(level)

    formatter = JSONFormatter() if log_format.lower() == "json" else StandardFormatter()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        try:
            file_handler = logging.handlers.RotatingFileHandler(
                log_file,
                maxBytes=10_000_000,  # 10MB
                backupCount=5,
            )
            file_handler.setLevel(level)
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)
        except OSError as e:
            root_logger.warning(f"Failed to set up file logging: {e}")

    if component_levels:
        for component, component_level in component_levels.items():
            logging.getLogger(component).setLevel(getattr(logging, component_level.upper(), logging.INFO))

    logging.getLogger("LUMEN").info(f"Logging initialized: level={log_level}, format={log_format}")


def setup_logging_from_config(config: LoggingConfig) -> None:
    setup_logging(log_level=config.level, log_format=config.format, log_file=config.file_path)


def get_logger(name: str) -> logging.Logger:
    """Logger under the LUMEN namespace."""
    if name != "LUMEN" and not name.startswith("LUMEN."):
        name = f"LUMEN.{name}"
    return logging.getLogger(name)


__all__ = ["setup_logging", "setup_logging_from_config", "get_logger", "JSONFormatter", "StandardFormatter"]
