"""Lumen REST API module."""

from .schemas import APIResponse
from .server import LumenAPIClient, LumenAPIServer, create_app

__all__ = ["LumenAPIServer", "LumenAPIClient", "APIResponse", "create_app"]
