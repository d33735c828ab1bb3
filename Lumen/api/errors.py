"""Error handling for the Lumen API."""

import logging
from typing import Any, Dict, Optional, Tuple

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from ..utils.errors import ActionNotFoundError, ActionValidationError, LumenException

logger = logging.getLogger("LUMEN.Errors")


class APIError(Exception):
    """Base API error."""

    def __init__(self, message: str, status_code: int = 400, error_code: str = "API_ERROR"):
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        super().__init__(message)


class ValidationError(APIError):
    """Malformed request body or query string."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, 400, "VALIDATION_ERROR")
        self.details = details


def _envelope(error_code: str, message: str, details: Any, request_id: Optional[str]) -> Dict[str, Any]:
    # Late import: schemas imports this module.
    from .schemas import APIResponse

    data: Dict[str, Any] = {"message": message}
    if details:
        data["details"] = details
    return APIResponse(success=False, data=data, error=error_code, request_id=request_id).to_dict()


def format_error_response(error: Exception, request_id: Optional[str] = None) -> Tuple[Dict[str, Any], int]:
    """Map an exception to (envelope, status)."""
    if isinstance(error, APIError):
        return _envelope(error.error_code, error.message, getattr(error, "details", None), request_id), error.status_code

    if isinstance(error, ActionNotFoundError):
        return _envelope("NOT_FOUND", error.message, error.context, request_id), 404

    if isinstance(error, ActionValidationError):
        return _envelope("VALIDATION_ERROR", error.message, error.context, request_id), 400

    if isinstance(error, HTTPException):
        code = error.code or 400
        return _envelope(error.name.upper().replace(" ", "_"), error.description or str(error), None, request_id), code

    if isinstance(error, LumenException):
        logger.error(f"Lumen error: {error}", exc_info=True)
    else:
        logger.error(f"Unhandled exception: {type(error).__name__}: {error}", exc_info=True)
    return _envelope("INTERNAL_SERVER_ERROR", "An unexpected error occurred. Please try again later.", None, request_id), 500


def setup_error_handlers(app: Flask) -> None:
    """Register error handlers with the Flask app."""

    @app.errorhandler(APIError)
    def handle_api_error(error):
        response, status = format_error_response(error, getattr(request, "request_id", None))
        return jsonify(response), status

    @app.errorhandler(LumenException)
    def handle_lumen_error(error):
        response, status = format_error_response(error, getattr(request, "request_id", None))
        return jsonify(response), status

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        response, status = format_error_response(error, getattr(request, "request_id", None))
        return jsonify(response), status

    @app.errorhandler(Exception)
    def handle_generic_error(error):
        response, status = format_error_response(error, getattr(request, "request_id", None))
        return jsonify(response), status


__all__ = ["APIError", "ValidationError", "format_error_response", "setup_error_handlers"]
