"""REST API for Lumen: query interpretation and action discovery over HTTP."""

from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, Optional

import requests
from dotenv import load_dotenv
from flask import Flask, jsonify, request
from flask_cors import CORS

from .. import __version__
from ..config.logging_config import setup_logging_from_config
from ..config.settings import LumenConfig, get_config
from ..core.handler import IntentHandler
from ..extraction.entities import extract_parameters
from .errors import ValidationError, setup_error_handlers
from .schemas import ActionListQuery, APIResponse, ClassifyRequest, EntitiesRequest, parse_request

logger = logging.getLogger("LUMEN.API")


def add_security_headers(response):
    """Add security headers to response."""
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    return response


class LumenAPIServer:
    """Flask front end over an IntentHandler."""

    def __init__(
        self,
        handler: IntentHandler,
        host: str = "0.0.0.0",
        port: int = 8000,
        max_query_chars: int = 10_000,
        cors_origins: str = "*",
    ):
        self.handler = handler
        self.host = host
        self.port = port
        self.max_query_chars = max_query_chars
        self.cors_origins = cors_origins
        self.app: Optional[Flask] = None

    @classmethod
    def from_config(cls, config: LumenConfig, handler: Optional[IntentHandler] = None) -> LumenAPIServer:
        return cls(
            handler or IntentHandler(config),
            host=config.api.host,
            port=config.api.port,
            max_query_chars=config.api.max_query_chars,
            cors_origins=config.api.cors_origins,
        )

    @property
    def registry(self):
        return self.handler.action_suggester.registry

    def create_flask_app(self) -> Flask:
        """Create the Flask application."""
        app = Flask(__name__)
        app.json.sort_keys = False

        CORS(app, resources={r"/api/*": {"origins": self.cors_origins}})

        setup_error_handlers(app)
        self._register_middleware(app)
        self._register_routes(app)

        self.app = app
        return app

    def _register_middleware(self, app: Flask) -> None:

        @app.before_request
        def before_request():
            request.request_id = request.headers.get("X-Request-ID", str(uuid.uuid4()))  # type: ignore[attr-defined]

        @app.after_request
        def after_request(response):
            response = add_security_headers(response)
            if hasattr(request, "request_id"):
                response.headers["X-Request-ID"] = request.request_id  # type: ignore[attr-defined]
            return response

    def _ok(self, data: Any, status: int = 200):
        return jsonify(APIResponse(
            success=True,
            data=data,
            request_id=getattr(request, "request_id", None),
        ).to_dict()), status

    def _query_from_body(self, schema_class) -> str:
        body = parse_request(schema_class, request.get_json(silent=True))
        if len(body.query) > self.max_query_chars:
            raise ValidationError(
                f"Query exceeds {self.max_query_chars} characters",
                {"length": len(body.query), "max": self.max_query_chars},
            )
        return body.query

    def _register_routes(self, app: Flask) -> None:
        """Register API routes."""

        @app.route("/health", methods=["GET"])
        def health():
            """Service health check."""
            stats = self.handler.get_stats()
            healthy = stats["healthy"]
            return jsonify(APIResponse(
                success=healthy,
                data={
                    "status": "healthy" if healthy else "unhealthy",
                    "version": __version__,
                    "handler": stats,
                },
                error=None if healthy else "UNHEALTHY",
                request_id=getattr(request, "request_id", None),
            ).to_dict()), 200 if healthy else 503

        @app.route("/api/classify", methods=["POST"])
        def classify():
            """Interpret a query into a SemanticQuery."""
            query = self._query_from_body(ClassifyRequest)
            result = self.handler.classify_intent_sync(query)
            logger.debug(f"classify {query[:50]!r} -> {result.intent} ({result.confidence:.2f})")
            return self._ok(result.to_dict())

        @app.route("/api/entities", methods=["POST"])
        def entities():
            """Extract entities and the grouped parameters only."""
            query = self._query_from_body(EntitiesRequest)
            found = self.handler.extract_entities(query)
            return self._ok({
                "entities": [e.to_dict() for e in found],
                "parameters": extract_parameters(found),
            })

        @app.route("/api/actions", methods=["GET"])
        def list_actions():
            """List registered actions, optionally by category or text search."""
            params = parse_request(ActionListQuery, request.args.to_dict())
            actions = self.registry.search_actions(params.q or "")
            if params.category:
                actions = [a for a in actions if a.category == params.category]
            return self._ok({"actions": [a.to_dict() for a in actions], "count": len(actions)})

        @app.route("/api/actions/<path:action_id>", methods=["GET"])
        def get_action(action_id: str):
            """Full descriptor for one action."""
            return self._ok(self.registry.require(action_id).to_dict())

        @app.route("/api/docs", methods=["GET"])
        def api_docs():
            """API documentation."""
            docs = {
                "title": "Lumen API",
                "version": __version__,
                "description": "Natural-language photo query interpretation",
                "endpoints": {
                    "GET /health": "Service health and handler statistics",
                    "POST /api/classify": "Interpret a query: {\"query\": str}",
                    "POST /api/entities": "Extract entities only: {\"query\": str}",
                    "GET /api/actions": "List actions (?category=, ?q=)",
                    "GET /api/actions/<id>": "One action descriptor",
                    "GET /api/docs": "This documentation",
                },
                "request_format": {
                    "headers": {
                        "Content-Type": "application/json",
                        "X-Request-ID": "Optional request tracking ID",
                    }
                },
                "response_format": {
                    "success": "Boolean indicating success",
                    "data": "Response payload",
                    "error": "Error code if failed",
                    "request_id": "Request tracking ID",
                    "timestamp": "Response timestamp",
                },
            }
            return jsonify(docs), 200

    def run(self, debug: bool = False):
        """Run the development server."""
        if self.app is None:
            self.create_flask_app()

        logger.info(f"Starting Lumen API server on {self.host}:{self.port}")
        if self.app is not None:
            self.app.run(host=self.host, port=self.port, debug=debug, use_reloader=False)


class LumenAPIClient:
    """Client for the Lumen API."""

    def __init__(self, base_url: str = "http://localhost:8000", timeout: float = 10.0):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session: Optional[requests.Session] = None

    def _get_session(self) -> requests.Session:
        """Get or create session."""
        if self.session is None:
            self.session = requests.Session()
            self.session.headers.update({"Accept": "application/json"})
        return self.session

    def _data(self, resp) -> Any:
        resp.raise_for_status()
        return resp.json()["data"]

    def health_check(self) -> bool:
        """Check if API is healthy."""
        try:
            resp = self._get_session().get(f"{self.base_url}/health", timeout=2)
            return resp.status_code == 200
        except requests.RequestException:
            return False

    def classify(self, query: str) -> Dict[str, Any]:
        """Interpret a query; returns the SemanticQuery dict."""
        resp = self._get_session().post(f"{self.base_url}/api/classify", json={"query": query}, timeout=self.timeout)
        return self._data(resp)

    def entities(self, query: str) -> Dict[str, Any]:
        """Entities and grouped parameters for a query."""
        resp = self._get_session().post(f"{self.base_url}/api/entities", json={"query": query}, timeout=self.timeout)
        return self._data(resp)

    def list_actions(self, category: Optional[str] = None, q: Optional[str] = None) -> Dict[str, Any]:
        params = {k: v for k, v in (("category", category), ("q", q)) if v}
        resp = self._get_session().get(f"{self.base_url}/api/actions", params=params, timeout=self.timeout)
        return self._data(resp)

    def get_action(self, action_id: str) -> Dict[str, Any]:
        resp = self._get_session().get(f"{self.base_url}/api/actions/{action_id}", timeout=self.timeout)
        return self._data(resp)

    def get_docs(self) -> Dict[str, Any]:
        """Get API documentation."""
        resp = self._get_session().get(f"{self.base_url}/api/docs", timeout=self.timeout)
        resp.raise_for_status()
        return resp.json()


def create_app(config: Optional[LumenConfig] = None) -> Flask:
    """Factory function to create Flask app for WSGI servers."""
    config = config or get_config()
    return LumenAPIServer.from_config(config).create_flask_app()


def run_server() -> None:
    """Console entry point: development server from env/.env config."""
    load_dotenv()
    config = get_config()
    setup_logging_from_config(config.logging)
    LumenAPIServer.from_config(config).run()


__all__ = [
    "LumenAPIServer",
    "LumenAPIClient",
    "create_app",
    "run_server",
]
