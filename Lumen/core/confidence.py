"""Confidence scoring and clarification logic.

The adjustments run in a fixed order and are not commutative: the vague-query
rule replaces the running value, the floor only looks at what the earlier
steps produced.
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional, Sequence

from ..config.rules import UNKNOWN_INTENT, RuleSet, default_ruleset
from ..config.settings import ConfidenceConfig
from .types import Entity, EntityType

logger = logging.getLogger("LUMEN.Confidence")

UNKNOWN_QUESTION = "Could you clarify what you want to do with your photos?"
SEARCH_QUESTION = "What type of photos would you like to see?"
FILTER_QUESTION = "What criteria would you like to filter by?"
NAVIGATE_QUESTION = "Which album would you like to open?"
GENERIC_QUESTION = "Could you add a keyword, date, location or album to narrow this down?"


class ConfidenceCalculator:
	"""Heuristic [0, 1] confidence for a classified query."""

	def __init__(self, config: Optional[ConfidenceConfig] = None, rules: Optional[RuleSet] = None):
		self.config = config or ConfidenceConfig()
		self.rules = rules or default_ruleset()

	def calculate_confidence(self, intent: str, entities: Sequence[Entity], query: Any) -> float:
		if intent == UNKNOWN_INTENT:
			return 0.0

		text = query if isinstance(query, str) else ""
		lowered = text.lower()
		cfg = self.config

		confidence = cfg.base_confidence
		confidence = self._adjust_for_query_type(confidence, lowered)
		confidence = self._adjust_for_entities(confidence, entities)
		confidence = self._adjust_for_length(confidence, text)
		if confidence < cfg.floor_trigger:
			confidence = cfg.floor_value

		confidence = min(1.0, max(0.0, confidence))
		logger.debug(f"Confidence for intent={intent}: {confidence:.3f}")
		return confidence

	def _adjust_for_query_type(self, confidence: float, lowered: str) -> float:
		if any(term in lowered for term in self.rules.vague_terms):
			return self.config.vague_confidence
		if any(keyword in lowered for keyword in self.rules.specific_keywords):
			confidence += self.config.specific_keyword_boost
		return confidence

	def _adjust_for_entities(self, confidence: float, entities: Sequence[Entity]) -> float:
		if entities:
			mean = sum(e.confidence for e in entities) / len(entities)
			confidence += mean * self.config.entity_weight
		return confidence

	def _adjust_for_length(self, confidence: float, text: str) -> float:
		if len(text) < self.config.short_query_chars:
			confidence -= self.config.short_query_penalty
		elif len(text) > self.config.long_query_chars:
			confidence -= self.config.long_query_penalty
		return confidence

	def check_needs_clarification(self, intent: str, entities: Sequence[Entity], confidence: float) -> bool:
		if confidence < self.config.clarification_threshold:
			return True
		if intent == UNKNOWN_INTENT:
			return True
		return intent in ("filter", "search") and not entities

	def generate_clarification_questions(self, intent: str, entities: Sequence[Entity]) -> List[str]:
		"""Canned prompts, in the order their conditions are checked."""
		questions: List[str] = []

		if intent == UNKNOWN_INTENT:
			questions.append(UNKNOWN_QUESTION)
		if intent == "search" and not entities:
			questions.append(SEARCH_QUESTION)
		if intent == "filter" and not entities:
			questions.append(FILTER_QUESTION)
		if intent == "navigate" and not any(e.type == EntityType.ALBUM for e in entities):
			questions.append(NAVIGATE_QUESTION)

		return questions

	def clarify(self, intent: str, entities: Sequence[Entity], confidence: float) -> List[str]:
		"""Questions to ask, or [] when the query is actionable as-is."""
		if not self.check_needs_clarification(intent, entities, confidence):
			return []
		questions = self.generate_clarification_questions(intent, entities)
		return questions or [GENERIC_QUESTION]


__all__ = [
	"ConfidenceCalculator",
	"UNKNOWN_QUESTION",
	"SEARCH_QUESTION",
	"FILTER_QUESTION",
	"NAVIGATE_QUESTION",
	"GENERIC_QUESTION",
]
