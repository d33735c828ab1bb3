"""Result types shared by every stage of the interpretation pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class EntityType(str, Enum):
	"""Entity types recognised in photo queries."""
	KEYWORD = "KEYWORD"
	DATE = "DATE"
	LOCATION = "LOCATION"
	ALBUM = "ALBUM"

	@property
	def parameter_group(self) -> str:
		"""Name of the parameter group this type is collected under."""
		return self.value.lower() + "s"


@dataclass(frozen=True)
class Span:
	"""Character offsets into the original query string."""
	start: int
	end: int

	def to_dict(self) -> Dict[str, int]:
		return {"start": self.start, "end": self.end}


@dataclass(frozen=True)
class Entity:
	"""A typed span of query text."""
	type: EntityType
	value: str
	confidence: float
	span: Span
	source: Optional[str] = None  # rule that produced the entity

	def to_dict(self) -> Dict[str, Any]:
		data: Dict[str, Any] = {
			"type": self.type.value,
			"value": self.value,
			"confidence": round(self.confidence, 4),
			"span": self.span.to_dict(),
		}
		if self.source:
			data["source"] = self.source
		return data


@dataclass
class IntentClassification:
	"""Explainable outcome of intent scoring."""
	intent: str
	scores: Dict[str, int]
	normalized_query: str
	matched_rules: Dict[str, List[str]] = field(default_factory=dict)

	@property
	def alternatives(self) -> List[Dict[str, Any]]:
		"""Other intents that scored above zero, best first."""
		ranked = sorted(
			((name, score) for name, score in self.scores.items() if name != self.intent and score > 0),
			key=lambda item: item[1],
			reverse=True,
		)
		return [{"intent": name, "score": score} for name, score in ranked]

	def to_dict(self) -> Dict[str, Any]:
		return {
			"intent": self.intent,
			"scores": dict(self.scores),
			"normalizedQuery": self.normalized_query,
			"matchedRules": {k: list(v) for k, v in self.matched_rules.items()},
			"alternatives": self.alternatives,
		}


@dataclass
class SemanticQuery:
	"""Structured interpretation of a free-text photo query."""
	intent: str
	confidence: float
	entities: List[Entity]
	parameters: Dict[str, List[str]]
	needs_clarification: bool
	clarification_questions: List[str]
	suggested_actions: List[Any]
	original_query: str
	normalized_query: str = ""
	metadata: Dict[str, Any] = field(default_factory=dict)

	def to_dict(self) -> Dict[str, Any]:
		"""JSON-serialisable record using the public camelCase keys."""
		return {
			"intent": self.intent,
			"confidence": round(self.confidence, 4),
			"entities": [e.to_dict() for e in self.entities],
			"parameters": {k: list(v) for k, v in self.parameters.items()},
			"needsClarification": self.needs_clarification,
			"clarificationQuestions": list(self.clarification_questions),
			"suggestedActions": [_action_to_dict(a) for a in self.suggested_actions],
			"originalQuery": self.original_query,
			"normalizedQuery": self.normalized_query,
			"metadata": dict(self.metadata),
		}


def _action_to_dict(action: Any) -> Any:
	if hasattr(action, "to_dict"):
		return action.to_dict()
	return action


__all__ = ["EntityType", "Span", "Entity", "IntentClassification", "SemanticQuery"]
