"""Integration tests for the REST API and its client."""

import json
from unittest.mock import MagicMock

import pytest
import requests

from Lumen.api.schemas import APIResponse, ClassifyRequest, parse_request
from Lumen.api.errors import ValidationError
from Lumen.api.server import LumenAPIClient, LumenAPIServer, create_app
from Lumen.config.settings import LumenConfig
from Lumen.core.handler import IntentHandler


@pytest.fixture
def server():
    """Create API server over a default handler."""
    return LumenAPIServer(IntentHandler(), max_query_chars=200)


@pytest.fixture
def client(server):
    """Create Flask test client."""
    app = server.create_flask_app()
    app.config["TESTING"] = True

    with app.test_client() as client:
        yield client


class TestSchemas:
    """Test request schemas."""

    def test_valid_request(self):
        """Test a query body validates."""
        assert parse_request(ClassifyRequest, {"query": "show photos"}).query == "show photos"

    def test_empty_query_allowed(self):
        """Test blank queries reach the handler."""
        assert parse_request(ClassifyRequest, {"query": ""}).query == ""

    def test_missing_query(self):
        """Test a missing field is a validation error with details."""
        with pytest.raises(ValidationError) as exc_info:
            parse_request(ClassifyRequest, {})
        assert exc_info.value.details["errors"][0]["field"] == "query"

    def test_non_object_body(self):
        """Test non-object bodies are rejected."""
        with pytest.raises(ValidationError):
            parse_request(ClassifyRequest, ["show photos"])

    def test_response_envelope(self):
        """Test the envelope keys."""
        data = APIResponse(success=True, data={"x": 1}, request_id="r1").to_dict()
        assert set(data) == {"success", "data", "error", "request_id", "timestamp"}
        assert data["timestamp"]


class TestHealthCheck:
    """Test health check endpoint."""

    def test_health_check(self, client):
        """Test health check returns 200."""
        response = client.get("/health")
        assert response.status_code == 200
        data = json.loads(response.data)
        assert data["success"] is True
        assert data["data"]["status"] == "healthy"
        assert data["data"]["handler"]["registeredActions"] == 5

    def test_request_id_echoed(self, client):
        """Test X-Request-ID is propagated."""
        response = client.get("/health", headers={"X-Request-ID": "abc-123"})
        assert response.headers["X-Request-ID"] == "abc-123"
        assert json.loads(response.data)["request_id"] == "abc-123"


class TestClassifyEndpoint:
    """Test POST /api/classify."""

    def test_classify(self, client):
        """Test a query is interpreted."""
        response = client.post("/api/classify", json={"query": "show me photos with sunset"})
        assert response.status_code == 200
        data = json.loads(response.data)["data"]
        assert data["intent"] == "filter"
        assert data["parameters"] == {"keywords": ["sunset"]}
        assert data["suggestedActions"][0]["id"] == "photo-gallery.filter"
        assert data["needsClarification"] is False

    def test_blank_query_is_unknown(self, client):
        """Test blank queries are a result, not an error."""
        response = client.post("/api/classify", json={"query": "   "})
        assert response.status_code == 200
        data = json.loads(response.data)["data"]
        assert data["intent"] == "unknown"
        assert data["confidence"] == 0.0

    def test_missing_query(self, client):
        """Test a missing query field."""
        response = client.post("/api/classify", json={"text": "photos"})
        assert response.status_code == 400
        data = json.loads(response.data)
        assert data["success"] is False
        assert data["error"] == "VALIDATION_ERROR"

    def test_non_json_body(self, client):
        """Test a non-JSON body."""
        response = client.post("/api/classify", data="show photos", content_type="text/plain")
        assert response.status_code == 400

    def test_non_string_query(self, client):
        """Test a numeric query is rejected."""
        response = client.post("/api/classify", json={"query": 42})
        assert response.status_code == 400

    def test_query_too_long(self, client):
        """Test the configured length limit."""
        response = client.post("/api/classify", json={"query": "photos " * 50})
        assert response.status_code == 400
        assert json.loads(response.data)["data"]["details"]["max"] == 200


class TestEntitiesEndpoint:
    """Test POST /api/entities."""

    def test_entities(self, client):
        """Test entities and parameters are returned."""
        response = client.post("/api/entities", json={"query": "photos taken in Paris from 2023"})
        assert response.status_code == 200
        data = json.loads(response.data)["data"]
        assert data["parameters"] == {"dates": ["2023"], "locations": ["Paris"]}
        assert {e["type"] for e in data["entities"]} == {"DATE", "LOCATION"}


class TestActionEndpoints:
    """Test action discovery endpoints."""

    def test_list_actions(self, client):
        """Test all actions are listed."""
        data = json.loads(client.get("/api/actions").data)["data"]
        assert data["count"] == 5

    def test_filter_by_category(self, client):
        """Test category filtering."""
        data = json.loads(client.get("/api/actions?category=album-list").data)["data"]
        assert [a["id"] for a in data["actions"]] == ["album-list.open"]

    def test_search(self, client):
        """Test text search."""
        data = json.loads(client.get("/api/actions?q=manage").data)["data"]
        assert [a["id"] for a in data["actions"]] == ["photo-manager.manage"]

    def test_get_action(self, client):
        """Test one action descriptor."""
        response = client.get("/api/actions/photo-manager.manage")
        assert response.status_code == 200
        data = json.loads(response.data)["data"]
        assert data["permissions"] == ["write", "delete"]
        assert data["humanEquivalent"]

    def test_unknown_action(self, client):
        """Test unknown action ids return 404."""
        response = client.get("/api/actions/no.such.action")
        assert response.status_code == 404
        assert json.loads(response.data)["error"] == "NOT_FOUND"


class TestErrors:
    """Test error envelope for routing errors."""

    def test_unknown_route(self, client):
        """Test unknown routes use the envelope."""
        response = client.get("/api/nope")
        assert response.status_code == 404
        data = json.loads(response.data)
        assert data["success"] is False
        assert data["error"] == "NOT_FOUND"

    def test_wrong_method(self, client):
        """Test wrong methods are rejected."""
        response = client.get("/api/classify")
        assert response.status_code == 405


class TestAppFactory:
    """Test the WSGI factory."""

    def test_create_app(self):
        """Test the factory builds a working app from config."""
        app = create_app(LumenConfig())
        with app.test_client() as client:
            assert client.get("/health").status_code == 200

    def test_docs(self, client):
        """Test the docs route lists endpoints."""
        docs = json.loads(client.get("/api/docs").data)
        assert "POST /api/classify" in docs["endpoints"]


class TestClient:
    """Test the HTTP client against a stubbed session."""

    def setup_method(self):
        self.client = LumenAPIClient("http://lumen.test/")
        self.session = MagicMock()
        self.client.session = self.session

    def test_classify(self):
        """Test classify posts the query and unwraps data."""
        self.session.post.return_value.json.return_value = {"success": True, "data": {"intent": "search"}}
        assert self.client.classify("find pics") == {"intent": "search"}
        args, kwargs = self.session.post.call_args
        assert args[0] == "http://lumen.test/api/classify"
        assert kwargs["json"] == {"query": "find pics"}

    def test_list_actions_params(self):
        """Test only given filters are sent."""
        self.session.get.return_value.json.return_value = {"success": True, "data": {"actions": [], "count": 0}}
        self.client.list_actions(category="album-list")
        assert self.session.get.call_args.kwargs["params"] == {"category": "album-list"}

    def test_http_error_raised(self):
        """Test HTTP errors propagate."""
        self.session.get.return_value.raise_for_status.side_effect = requests.HTTPError("404")
        with pytest.raises(requests.HTTPError):
            self.client.get_action("missing")

    def test_health_check_connection_error(self):
        """Test an unreachable server reports unhealthy."""
        self.session.get.side_effect = requests.ConnectionError("refused")
        assert self.client.health_check() is False


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
