"""Intent handler: the single entry point of the interpretation pipeline.

raw text -> entities -> intent -> confidence -> clarification
         -> parameters -> suggested actions -> SemanticQuery

The handler is total over its input: any string (or non-string, treated as
empty) yields a well-formed SemanticQuery. Unclassifiable input is reported
as intent "unknown" with confidence 0, never as an exception.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List, Optional

from ..actions.registry import ActionRegistry
from ..actions.suggester import ActionSuggester
from ..config.rules import UNKNOWN_INTENT, RuleSet, load_ruleset
from ..config.settings import LumenConfig
from ..extraction.entities import EntityExtractor, extract_parameters
from .confidence import UNKNOWN_QUESTION, ConfidenceCalculator
from .intent import IntentClassifier
from .types import Entity, IntentClassification, SemanticQuery

logger = logging.getLogger("LUMEN.Handler")

HANDLER_VERSION = "1.0.0"


class IntentHandler:
	"""Compose extractor, classifier, calculator and suggester."""

	def __init__(
		self,
		config: Optional[LumenConfig] = None,
		rules: Optional[RuleSet] = None,
		registry: Optional[ActionRegistry] = None,
	):
		self.config = config or LumenConfig()
		self.rules = rules or load_ruleset(self.config.rules.path)
		self.entity_extractor = EntityExtractor(self.rules)
		self.intent_classifier = IntentClassifier(self.rules)
		self.confidence_calculator = ConfidenceCalculator(self.config.confidence, self.rules)
		self.action_suggester = ActionSuggester(registry)

	async def classify_intent(self, query: Any) -> SemanticQuery:
		"""Interpret a free-text photo query."""
		text = query if isinstance(query, str) else ""
		if not text.strip():
			return self._unknown_result(text)

		try:
			return await self._interpret(text)
		except Exception as e:
			logger.error(f"Interpretation failed for {text[:50]!r}, degrading to unknown: {e}", exc_info=True)
			return self._unknown_result(text)

	def classify_intent_sync(self, query: Any) -> SemanticQuery:
		"""Blocking wrapper for callers without an event loop (CLI, WSGI)."""
		return asyncio.run(self.classify_intent(query))

	async def _interpret(self, text: str) -> SemanticQuery:
		calculator = self.confidence_calculator

		entities = self.entity_extractor.extract_entities(text)
		classification = self.intent_classifier.classify(text)
		intent = classification.intent
		confidence = calculator.calculate_confidence(intent, entities, text)
		needs_clarification = calculator.check_needs_clarification(intent, entities, confidence)
		questions = calculator.clarify(intent, entities, confidence) if needs_clarification else []
		parameters = extract_parameters(entities)
		actions = await self.action_suggester.suggest_actions(intent)

		logger.debug(
			f"Interpreted {text[:50]!r}: intent={intent} confidence={confidence:.2f} "
			f"entities={len(entities)} clarify={needs_clarification}"
		)
		return SemanticQuery(
			intent=intent,
			confidence=confidence,
			entities=entities,
			parameters=parameters,
			needs_clarification=needs_clarification,
			clarification_questions=questions,
			suggested_actions=actions,
			original_query=text,
			normalized_query=classification.normalized_query,
			metadata=self._metadata(classification.scores),
		)

	def extract_entities(self, query: Any) -> List[Entity]:
		"""Entities only, without classification."""
		return self.entity_extractor.extract_entities(query)

	def explain(self, query: Any) -> IntentClassification:
		"""Per-intent scores and the rules that fired."""
		return self.intent_classifier.classify(query)

	def _unknown_result(self, text: str) -> SemanticQuery:
		return SemanticQuery(
			intent=UNKNOWN_INTENT,
			confidence=0.0,
			entities=[],
			parameters={},
			needs_clarification=True,
			clarification_questions=[UNKNOWN_QUESTION],
			suggested_actions=[],
			original_query=text,
			normalized_query="",
			metadata=self._metadata({intent: 0 for intent in self.rules.intents}),
		)

	def _metadata(self, scores: Dict[str, int]) -> Dict[str, Any]:
		return {
			"handlerVersion": HANDLER_VERSION,
			"rulesetVersion": self.rules.version,
			"scores": dict(scores),
		}

	def is_healthy(self) -> bool:
		return all((
			self.entity_extractor,
			self.intent_classifier,
			self.confidence_calculator,
			self.action_suggester,
		))

	def get_version(self) -> str:
		return HANDLER_VERSION

	def get_stats(self) -> Dict[str, Any]:
		"""Component and rule-table summary for health endpoints."""
		return {
			"version": self.get_version(),
			"rulesetVersion": self.rules.version,
			"intents": list(self.rules.intents),
			"components": {
				"entityExtractor": self.entity_extractor is not None,
				"intentClassifier": self.intent_classifier is not None,
				"confidenceCalculator": self.confidence_calculator is not None,
				"actionSuggester": self.action_suggester is not None,
			},
			"registeredActions": len(self.action_suggester.registry),
			"clarificationThreshold": self.config.confidence.clarification_threshold,
			"healthy": self.is_healthy(),
		}


__all__ = ["IntentHandler", "HANDLER_VERSION"]
