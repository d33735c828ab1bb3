"""Intent classification for photo queries.

Scores a query against the declared intent tables and picks the best:
- filter: narrow the visible photos by criteria ("photos with sunset")
- search: look for photos ("find pictures of vacation")
- navigate: open an album ("open vacation album")
- manage: change the collection ("delete this photo")

Scoring is additive and explainable: +1 per keyword contained in the
normalised query, +2 per matching context pattern, plus phrase boosts for
known ambiguous combinations. Ties go to the intent declared first.
"""

import logging
import re
from typing import Any, Dict, List, Optional

from ..config.rules import UNKNOWN_INTENT, RuleSet, default_ruleset
from .types import IntentClassification

logger = logging.getLogger("LUMEN.Intent")

_WHITESPACE = re.compile(r"\s+")


class IntentClassifier:
	"""Rule-based, deterministic intent classifier."""

	def __init__(self, rules: Optional[RuleSet] = None):
		"""Initialize classifier with compiled rule tables."""
		self.rules = rules or default_ruleset()

	def normalize(self, query: Any) -> str:
		"""Trim, collapse whitespace, lower-case and drop filler words."""
		if not isinstance(query, str):
			return ""
		text = _WHITESPACE.sub(" ", query.strip()).lower()
		text = self.rules.filler_pattern.sub(" ", text)
		return _WHITESPACE.sub(" ", text).strip()

	def classify(self, query: Any) -> IntentClassification:
		"""Score every intent and return the full breakdown.

		Returns:
			IntentClassification with:
			- intent: winning intent, or "unknown" when nothing scored
			- scores: per-intent score in declaration order
			- matched_rules: keywords/patterns/boosts that fired, per intent
		"""
		normalized = self.normalize(query)
		scores: Dict[str, int] = {intent: 0 for intent in self.rules.intents}
		matched: Dict[str, List[str]] = {}

		if normalized:
			for rule in self.rules.intent_keywords:
				if rule.keyword in normalized:
					scores[rule.intent] += rule.weight
					matched.setdefault(rule.intent, []).append(f"keyword:{rule.keyword}")

			for rule in self.rules.intent_patterns:
				if rule.pattern.search(normalized):
					scores[rule.intent] += rule.weight
					matched.setdefault(rule.intent, []).append(f"pattern:{rule.pattern.pattern}")

			for boost in self.rules.phrase_boosts:
				if boost.applies(normalized):
					scores[boost.intent] += boost.weight
					matched.setdefault(boost.intent, []).append(f"boost:{boost.label}")

		intent = self._pick(scores)
		logger.debug(f"Intent scores {scores} -> {intent}")
		return IntentClassification(
			intent=intent,
			scores=scores,
			normalized_query=normalized,
			matched_rules=matched,
		)

	def classify_intent(self, query: Any) -> str:
		"""Return only the winning intent name."""
		return self.classify(query).intent

	def _pick(self, scores: Dict[str, int]) -> str:
		best_intent = UNKNOWN_INTENT
		best_score = 0
		# strict comparison keeps the first-declared intent on ties
		for intent in self.rules.intents:
			if scores[intent] > best_score:
				best_intent = intent
				best_score = scores[intent]
		return best_intent


__all__ = ["IntentClassifier"]
