"""Request validation schemas and the response envelope for the Lumen API."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError as SchemaValidationError, field_validator

from .errors import ValidationError

T = TypeVar("T", bound=BaseModel)


class QueryRequest(BaseModel):
    """Body carrying one free-text query.

    An empty or blank query is accepted; interpreting it yields the
    unknown result rather than a validation failure.
    """
    model_config = ConfigDict(
        extra="ignore",
        json_schema_extra={"example": {"query": "show me sunset photos from 2023"}},
    )

    query: str = Field(..., description="Free-text photo query")


class ClassifyRequest(QueryRequest):
    """POST /api/classify body."""


class EntitiesRequest(QueryRequest):
    """POST /api/entities body."""


class ActionListQuery(BaseModel):
    """GET /api/actions query string."""
    model_config = ConfigDict(extra="ignore")

    category: Optional[str] = Field(default=None, description="Restrict to one category")
    q: Optional[str] = Field(default=None, description="Case-insensitive text search")

    @field_validator("category", "q")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        return v.strip()


def parse_request(schema_class: Type[T], data: Any) -> T:
    """Validate a payload, raising the API ValidationError on failure."""
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    try:
        return schema_class.model_validate(data)
    except SchemaValidationError as e:
        details: List[Dict[str, str]] = [
            {"field": ".".join(str(part) for part in err["loc"]), "message": err["msg"]}
            for err in e.errors()
        ]
        raise ValidationError("Invalid request", {"errors": details}) from e


@dataclass
class APIResponse:
    """Standard response envelope."""
    success: bool
    data: Any
    error: Optional[str] = None
    request_id: Optional[str] = None
    timestamp: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "data": self.data,
            "error": self.error,
            "request_id": self.request_id,
            "timestamp": self.timestamp or datetime.now(timezone.utc).isoformat(),
        }


__all__ = [
    "QueryRequest",
    "ClassifyRequest",
    "EntitiesRequest",
    "ActionListQuery",
    "parse_request",
    "APIResponse",
]
