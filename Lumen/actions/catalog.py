"""Agent action descriptors and the built-in photo actions.

An action is self-describing: its parameter list carries enough metadata for
a caller to build a valid invocation without further lookups.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Permission(str, Enum):
    """Capabilities an action needs."""
    READ = "read"
    WRITE = "write"
    DELETE = "delete"
    ADMIN = "admin"
    EXECUTE = "execute"


class AgentParameter(BaseModel):
    """One invocation parameter."""
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    type: Literal["string", "number", "boolean", "object", "array"]
    required: bool = False
    description: str = ""
    default: Optional[Any] = None


class AgentReturns(BaseModel):
    """Shape of an action's result."""
    model_config = ConfigDict(frozen=True)

    type: Literal["object", "array", "string", "number", "boolean", "void"]
    description: str = ""


class AgentExample(BaseModel):
    """Documented usage; never executed."""
    model_config = ConfigDict(frozen=True)

    description: str
    input: Dict[str, Any] = Field(default_factory=dict)
    output: Any = None


class AgentAction(BaseModel):
    """Named, parameterised operation a classified query can turn into."""
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "id": "photo-gallery.search",
                "name": "Search Photos",
                "description": "Search through the photo collection",
                "parameters": [{"name": "query", "type": "string", "required": True, "description": "Search text"}],
                "returns": {"type": "array", "description": "Matching photos"},
                "permissions": ["read"],
                "humanEquivalent": "Type into the search box",
                "examples": [],
            }
        },
    )

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    description: str = ""
    parameters: List[AgentParameter] = Field(default_factory=list)
    returns: AgentReturns
    permissions: List[Permission] = Field(default_factory=list)
    human_equivalent: str = Field("", alias="humanEquivalent")
    examples: List[AgentExample] = Field(default_factory=list)
    category: Optional[str] = None
    enabled: bool = True
    version: str = "1.0.0"

    @field_validator("permissions")
    @classmethod
    def unique_permissions(cls, v: List[Permission]) -> List[Permission]:
        seen: List[Permission] = []
        for permission in v:
            if permission not in seen:
                seen.append(permission)
        return seen

    @field_validator("parameters")
    @classmethod
    def unique_parameter_names(cls, v: List[AgentParameter]) -> List[AgentParameter]:
        names = [p.name for p in v]
        if len(names) != len(set(names)):
            raise ValueError(f"Duplicate parameter names: {names}")
        return v

    @property
    def required_parameters(self) -> List[str]:
        return [p.name for p in self.parameters if p.required]

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready dict using the public camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)


FILTER_ACTION = AgentAction(
    id="photo-gallery.filter",
    name="Apply Photo Filter",
    description="Filter photos by keywords, dates, locations or albums",
    parameters=[
        AgentParameter(name="keywords", type="array", description="Keywords to filter by"),
        AgentParameter(name="dates", type="array", description="Dates or date phrases to filter by"),
        AgentParameter(name="locations", type="array", description="Places the photos were taken"),
        AgentParameter(name="albums", type="array", description="Albums to restrict the filter to"),
    ],
    returns=AgentReturns(type="object", description="Filtered photos result"),
    permissions=[Permission.READ],
    human_equivalent="Use the filter controls in the photo gallery",
    examples=[AgentExample(description="Filter beach photos", input={"keywords": ["beach"]}, output=[])],
    category="photo-gallery",
)

ADVANCED_FILTER_ACTION = AgentAction(
    id="photo-gallery.advanced-filter",
    name="Advanced Photo Filter",
    description="Apply several filter criteria at once",
    parameters=[
        AgentParameter(name="filters", type="array", required=True, description="List of {criteria, value} objects"),
        AgentParameter(name="match", type="string", default="all", description="'all' or 'any' of the criteria"),
    ],
    returns=AgentReturns(type="object", description="Filtered photos result"),
    permissions=[Permission.READ],
    human_equivalent="Use the advanced filter panel in the photo gallery",
    examples=[AgentExample(
        description="Sunset photos from 2023",
        input={"filters": [{"criteria": "keyword", "value": "sunset"}, {"criteria": "date", "value": "2023"}]},
        output=[],
    )],
    category="photo-gallery",
)

SEARCH_ACTION = AgentAction(
    id="photo-gallery.search",
    name="Search Photos",
    description="Search through the photo collection with a text query",
    parameters=[
        AgentParameter(name="query", type="string", required=True, description="Search query text"),
        AgentParameter(name="filters", type="object", description="Additional filters"),
    ],
    returns=AgentReturns(type="array", description="Matching photos"),
    permissions=[Permission.READ],
    human_equivalent="Type into the search box",
    examples=[AgentExample(description="Search sunset photos", input={"query": "sunset"}, output=[])],
    category="photo-gallery",
)

OPEN_ALBUM_ACTION = AgentAction(
    id="album-list.open",
    name="Open Album",
    description="Navigate to a specific album",
    parameters=[
        AgentParameter(name="albumName", type="string", required=True, description="Name of the album to open"),
    ],
    returns=AgentReturns(type="object", description="Album details and photos"),
    permissions=[Permission.READ],
    human_equivalent="Click on the album in the album list",
    examples=[AgentExample(description="Open vacation album", input={"albumName": "vacation"}, output={})],
    category="album-list",
)

MANAGE_ACTION = AgentAction(
    id="photo-manager.manage",
    name="Manage Photos",
    description="Delete, edit, move or upload photos",
    parameters=[
        AgentParameter(
            name="operation",
            type="string",
            required=True,
            description="One of delete, remove, edit, rename, move, upload, create",
        ),
        AgentParameter(name="photoIds", type="array", required=True, description="IDs of the photos to operate on"),
    ],
    returns=AgentReturns(type="object", description="Operation result"),
    permissions=[Permission.WRITE, Permission.DELETE],
    human_equivalent="Select photos and use the delete or edit buttons",
    examples=[AgentExample(description="Delete photos", input={"operation": "delete", "photoIds": ["p1"]}, output={})],
    category="photo-manager",
)

BUILTIN_ACTIONS = (FILTER_ACTION, ADVANCED_FILTER_ACTION, SEARCH_ACTION, OPEN_ALBUM_ACTION, MANAGE_ACTION)

# Suggestion order per intent; anything not listed suggests nothing.
INTENT_ACTIONS: Dict[str, List[str]] = {
    "filter": [FILTER_ACTION.id, ADVANCED_FILTER_ACTION.id],
    "search": [SEARCH_ACTION.id, FILTER_ACTION.id],
    "navigate": [OPEN_ALBUM_ACTION.id],
    "manage": [MANAGE_ACTION.id],
}


__all__ = [
    "Permission",
    "AgentParameter",
    "AgentReturns",
    "AgentExample",
    "AgentAction",
    "BUILTIN_ACTIONS",
    "INTENT_ACTIONS",
]
