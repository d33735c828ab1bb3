"""Entity extraction for photo queries.

Four independent extractors run over the raw query (keywords, dates,
locations, album names). A token may be captured by more than one of them;
that overlap is kept. Spans always index the caller's original string.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, List, Optional

from ..config.rules import RuleSet, default_ruleset
from ..core.types import Entity, EntityType, Span

logger = logging.getLogger("LUMEN.Extraction")

_WORD = re.compile(r"[\w'\-]+")


class EntityExtractor:
	"""Pattern-table driven entity extractor."""

	def __init__(self, rules: Optional[RuleSet] = None):
		self.rules = rules or default_ruleset()

	def extract_entities(self, query: Any) -> List[Entity]:
		"""Return entities in extractor order: keywords, dates, locations, albums."""
		text = query if isinstance(query, str) else ""
		if not text.strip():
			return []

		entities: List[Entity] = []
		entities.extend(self._extract_keywords(text))
		entities.extend(self._extract_dates(text))
		entities.extend(self._extract_locations(text))
		entities.extend(self._extract_albums(text))

		logger.debug(f"Extracted {len(entities)} entities from {len(text)} chars")
		return entities

	def _extract_keywords(self, text: str) -> List[Entity]:
		rules = self.rules
		entities: List[Entity] = []
		previous_end: Optional[int] = None
		position = 0

		for match in rules.keyword_pattern.finditer(text):
			# "sunset and beach and mountain": later conjuncts get less certain
			if previous_end is not None:
				between = text[previous_end:match.start()]
				if between.strip() and rules.conjunction_pattern.match(between):
					position += 1
				else:
					position = 0
			confidence = rules.keyword_confidence - position * rules.keyword_decay
			confidence = max(min(rules.keyword_min_confidence, rules.keyword_confidence), confidence)
			entities.append(Entity(
				type=EntityType.KEYWORD,
				value=match.group(0).lower(),
				confidence=round(confidence, 4),
				span=Span(match.start(), match.end()),
				source="vocabulary",
			))
			previous_end = match.end()

		return entities

	def _extract_dates(self, text: str) -> List[Entity]:
		entities: List[Entity] = []
		accepted: List[str] = []

		for rule in self.rules.date_patterns:
			for match in rule.pattern.finditer(text):
				value = match.group(0).strip()
				if not value:
					continue
				lowered = value.lower()
				if any(lowered in seen or seen in lowered for seen in accepted):
					continue
				accepted.append(lowered)
				start = match.start() + match.group(0).index(value)
				entities.append(Entity(
					type=EntityType.DATE,
					value=value,
					confidence=rule.confidence,
					span=Span(start, start + len(value)),
					source=rule.name,
				))

		return entities

	def _extract_locations(self, text: str) -> List[Entity]:
		rules = self.rules
		entities: List[Entity] = []

		for match in rules.location_pattern.finditer(text):
			kept = []
			for word in _WORD.finditer(text, match.start("name"), match.end("name")):
				word_text = word.group(0)
				if not word_text[0].isupper() or word_text.lower() in rules.location_stop_words:
					break
				kept.append(word)
			if not kept:
				continue
			start, end = kept[0].start(), kept[-1].end()
			entities.append(Entity(
				type=EntityType.LOCATION,
				value=text[start:end],
				confidence=rules.location_confidence,
				span=Span(start, end),
				source="location",
			))

		return entities

	def _extract_albums(self, text: str) -> List[Entity]:
		rules = self.rules
		entities: List[Entity] = []
		seen = set()

		# prefix form reads the name backwards from "album", suffix form forwards
		for pattern, backwards, source in (
			(rules.album_prefix_pattern, True, "album_prefix"),
			(rules.album_suffix_pattern, False, "album_suffix"),
		):
			for match in pattern.finditer(text):
				words = list(_WORD.finditer(text, match.start("name"), match.end("name")))
				kept = self._trim_album_words(words, backwards)
				if not kept:
					continue
				start, end = kept[0].start(), kept[-1].end()
				value = text[start:end]
				if value.lower() in seen:
					continue
				seen.add(value.lower())
				entities.append(Entity(
					type=EntityType.ALBUM,
					value=value,
					confidence=rules.album_confidence,
					span=Span(start, end),
					source=source,
				))

		return entities

	def _trim_album_words(self, words: List["re.Match[str]"], backwards: bool) -> List["re.Match[str]"]:
		"""Keep the run of name words adjacent to "album", dropping fillers like "open"."""
		fillers = self.rules.album_filler_words
		ordered = reversed(words) if backwards else iter(words)
		kept = []
		for word in ordered:
			if word.group(0).lower() in fillers:
				break
			kept.append(word)
		if backwards:
			kept.reverse()
		return kept


def extract_parameters(entities: List[Entity]) -> Dict[str, List[str]]:
	"""Group entity values by type (KEYWORD -> keywords, ...), keeping insertion order."""
	parameters: Dict[str, List[str]] = {}
	for entity in entities:
		parameters.setdefault(entity.type.parameter_group, []).append(entity.value)
	return parameters


def extract_entities(query: Any) -> List[Entity]:
	"""Extract entities with the built-in rule set."""
	return EntityExtractor().extract_entities(query)


__all__ = ["EntityExtractor", "extract_entities", "extract_parameters"]
