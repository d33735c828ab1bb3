"""Declared rule tables for intent classification and entity extraction.

Every keyword list, regular expression and per-entity base confidence the
pipeline uses lives in ``DEFAULT_RULES``. The tables are plain data so they
can be reviewed, versioned and replaced from a JSON file without touching
control flow. ``RuleSet.from_dict`` validates and compiles them once.

Patterns carry their own flags inline (``(?i)``). Compiled ``re.Pattern``
objects hold no match cursor, so a compiled table is safe to share between
calls and threads.
"""

from __future__ import annotations

import copy
import functools
import json
import logging
import os
import re
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Optional, Pattern, Tuple

from ..utils.errors import RuleSetError, with_error_context

logger = logging.getLogger("LUMEN.Rules")

RULESET_VERSION = "1.0.0"

UNKNOWN_INTENT = "unknown"

# Declaration order is the tie-break order.
INTENT_ORDER = ("filter", "search", "navigate", "manage")

_MONTHS = r"january|february|march|april|may|june|july|august|september|october|november|december"
_PHOTO_NOUN = r"(?:photo|picture|image|pic)s?"

DEFAULT_RULES: Dict[str, Any] = {
    "version": RULESET_VERSION,
    "intents": list(INTENT_ORDER),
    "filler_words": ["you know", "um", "uh", "er", "ah", "like", "please", "hey", "can", "could", "would"],
    "intent_keywords": {
        "weight": 1,
        "filter": ["filter", "where", "with", "containing", "tagged", "display", "photographs", "imagery", "sunset"],
        "search": ["show", "pics", "pictures", "images", "find", "look", "locate", "search", "trip"],
        "navigate": ["open", "go to", "navigate", "album"],
        "manage": ["delete", "remove", "edit", "modify", "rename", "upload", "add", "create", "move"],
    },
    "intent_patterns": {
        "weight": 2,
        "filter": [
            r"(?i)\b(?:filter|where|with|having|containing|tagged)\b",
            r"(?i)\b" + _PHOTO_NOUN + r"\b.*\b(?:from|taken|with|containing|of|tagged|in|at)\b",
            r"(?i)\bfilter\b.*\bby\b",
        ],
        "search": [
            r"(?i)\b(?:search|find|look\s+for|locate|discover)\b",
            r"(?i)\bshow\s+me\b",
            r"(?i)\bget\s+(?:all\s+|some\s+|these\s+|those\s+|my\s+)?" + _PHOTO_NOUN + r"\b",
        ],
        "navigate": [
            r"(?i)\b(?:open|go\s+to|navigate\s+to|show)\b.*\balbum\b",
            r"(?i)\balbum\b.*\b(?:open|view|show)\b",
            r"(?i)\balbum\s+(?:called|named|titled)\b",
        ],
        "manage": [
            r"(?i)\b(?:delete|remove|edit|modify|rename|move)\b.*\b(?:photo|picture|image|pic|album)s?\b",
            r"(?i)\b(?:upload|add|create)\b.*\b(?:photo|picture|image|pic|album)s?\b",
        ],
    },
    "phrase_boosts": [
        {"intent": "search", "all_of": ["show"], "any_of": ["pics", "photos"], "weight": 2},
        {"intent": "filter", "all_of": ["display", "containing"], "any_of": [], "weight": 2},
        {"intent": "navigate", "all_of": ["show", "album"], "any_of": [], "weight": 2},
    ],
    "entities": {
        "KEYWORD": {
            "confidence": 0.8,
            "conjunct_decay": 0.05,
            "min_confidence": 0.5,
            "vocabulary": [
                "sunset", "sunrise", "beach", "mountain", "nature", "landscape", "portrait", "wildlife",
                "flower", "city", "ocean", "forest", "snow", "rain", "cloud", "sky", "water", "animal",
                "person", "people", "building", "car", "tree", "field", "garden", "park", "street",
                "road", "bridge", "lake", "river", "night", "morning", "evening", "vacation", "travel",
                "family", "wedding", "party", "celebration", "food", "indoor", "outdoor", "summer",
                "winter", "spring", "autumn",
            ],
            "conjunction": r"^\s*(?:,\s*)?(?:and\s+|&\s+)?$",
        },
        "DATE": {
            # Priority order: earlier patterns suppress later ones they overlap.
            "patterns": [
                {"name": "iso", "pattern": r"\b\d{4}-\d{2}-\d{2}\b", "confidence": 0.9},
                {"name": "us", "pattern": r"\b\d{1,2}/\d{1,2}/\d{4}\b", "confidence": 0.9},
                {
                    "name": "month_day_year",
                    "pattern": r"(?i)\b(?:" + _MONTHS + r")\s+\d{1,2}(?:st|nd|rd|th)?,?\s+\d{4}\b",
                    "confidence": 0.9,
                },
                {"name": "month_year", "pattern": r"(?i)\b(?:" + _MONTHS + r")\s+\d{4}\b", "confidence": 0.9},
                {"name": "year", "pattern": r"\b(?:19|20)\d{2}\b", "confidence": 0.9},
                {
                    "name": "relative",
                    "pattern": (
                        r"(?i)\b(?:(?:last|this|next|past)\s+"
                        r"(?:year|month|week|weekend|summer|winter|spring|fall|autumn)|today|yesterday)\b"
                    ),
                    "confidence": 0.8,
                },
            ],
        },
        "LOCATION": {
            "confidence": 0.7,
            "pattern": (
                r"\b(?i:taken\s+in|in|from|at|near)\s+"
                r"(?P<name>(?![a-z])[^\W\d_][\w'\-]*(?:,?\s+(?![a-z])[^\W\d_][\w'\-]*)*)"
            ),
            "stop_words": [
                "photo", "photos", "picture", "pictures", "image", "images", "pic", "pics", "album",
                "january", "february", "march", "april", "may", "june", "july", "august", "september",
                "october", "november", "december", "monday", "tuesday", "wednesday", "thursday",
                "friday", "saturday", "sunday", "last", "this", "next", "the", "my",
            ],
        },
        "ALBUM": {
            "confidence": 0.85,
            "prefix_pattern": r"(?i)\b(?P<name>(?:[a-z0-9][\w'\-]*\s+){1,4})album\b",
            "suffix_pattern": r"(?i)\balbum\s+(?:(?:called|named|titled)\s+)?(?P<name>[\w'\-]+(?:\s+[\w'\-]+){0,3})",
            "filler_words": [
                "open", "show", "view", "display", "go", "to", "navigate", "into", "see", "find",
                "search", "get", "the", "my", "our", "a", "an", "this", "that", "me", "please",
                "photo", "photos", "picture", "pictures", "pic", "pics", "image", "images", "from",
                "in", "of", "at", "for", "with", "and", "called", "named", "titled", "new", "create",
                "delete", "remove", "rename", "add", "upload", "edit", "move", "all", "entire", "whole",
            ],
        },
    },
    "confidence_terms": {
        "vague": ["stuff", "things"],
        "specific": ["filter", "search", "find", "show", "open", "delete", "upload"],
    },
}


@dataclass(frozen=True)
class IntentKeyword:
    """Bag-of-words hit for an intent."""
    intent: str
    keyword: str
    weight: int


@dataclass(frozen=True)
class IntentPattern:
    """Context pattern for an intent."""
    intent: str
    pattern: Pattern[str]
    weight: int


@dataclass(frozen=True)
class PhraseBoost:
    """Hand-coded boost for a known ambiguous word combination."""
    intent: str
    all_of: Tuple[str, ...]
    any_of: Tuple[str, ...]
    weight: int

    def applies(self, text: str) -> bool:
        if not all(term in text for term in self.all_of):
            return False
        return not self.any_of or any(term in text for term in self.any_of)

    @property
    def label(self) -> str:
        parts = list(self.all_of)
        if self.any_of:
            parts.append("|".join(self.any_of))
        return "+".join(parts)


@dataclass(frozen=True)
class DatePattern:
    """One date sub-pattern; position in the table is its priority."""
    name: str
    pattern: Pattern[str]
    confidence: float


@dataclass(frozen=True)
class RuleSet:
    """Compiled, read-only rule tables."""
    version: str
    intents: Tuple[str, ...]
    filler_pattern: Pattern[str]
    intent_keywords: Tuple[IntentKeyword, ...]
    intent_patterns: Tuple[IntentPattern, ...]
    phrase_boosts: Tuple[PhraseBoost, ...]
    keyword_pattern: Pattern[str]
    keyword_confidence: float
    keyword_decay: float
    keyword_min_confidence: float
    conjunction_pattern: Pattern[str]
    date_patterns: Tuple[DatePattern, ...]
    location_pattern: Pattern[str]
    location_confidence: float
    location_stop_words: FrozenSet[str]
    album_prefix_pattern: Pattern[str]
    album_suffix_pattern: Pattern[str]
    album_confidence: float
    album_filler_words: FrozenSet[str]
    vague_terms: Tuple[str, ...]
    specific_keywords: Tuple[str, ...]
    source: Dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> RuleSet:
        """Validate and compile a rule table dictionary."""
        intents = tuple(data.get("intents") or INTENT_ORDER)
        if UNKNOWN_INTENT in intents:
            raise RuleSetError(f"'{UNKNOWN_INTENT}' is reserved and cannot be scored", {"intents": list(intents)})

        keyword_table = data.get("intent_keywords", {})
        keyword_weight = _positive(keyword_table.get("weight", 1), "intent_keywords.weight")
        intent_keywords = []
        for intent in intents:
            for keyword in keyword_table.get(intent, []):
                intent_keywords.append(IntentKeyword(intent, str(keyword).lower(), keyword_weight))

        pattern_table = data.get("intent_patterns", {})
        pattern_weight = _positive(pattern_table.get("weight", 2), "intent_patterns.weight")
        intent_patterns = []
        for intent in intents:
            for raw in pattern_table.get(intent, []):
                intent_patterns.append(IntentPattern(intent, _compile(raw, f"intent_patterns.{intent}"), pattern_weight))

        for name in set(keyword_table) | set(pattern_table):
            if name != "weight" and name not in intents:
                raise RuleSetError(f"Rules reference undeclared intent '{name}'")

        boosts = []
        for boost in data.get("phrase_boosts", []):
            if boost.get("intent") not in intents:
                raise RuleSetError(f"Phrase boost targets undeclared intent '{boost.get('intent')}'")
            boosts.append(PhraseBoost(
                intent=boost["intent"],
                all_of=tuple(boost.get("all_of", [])),
                any_of=tuple(boost.get("any_of", [])),
                weight=_positive(boost.get("weight", 2), "phrase_boosts.weight"),
            ))

        entities = data.get("entities", {})
        unknown_types = set(entities) - {"KEYWORD", "DATE", "LOCATION", "ALBUM"}
        if unknown_types:
            raise RuleSetError(f"Unknown entity types in rules: {sorted(unknown_types)}")

        kw = entities.get("KEYWORD", {})
        vocabulary = [re.escape(str(w)) for w in kw.get("vocabulary", [])]
        if not vocabulary:
            raise RuleSetError("KEYWORD vocabulary cannot be empty")
        keyword_pattern = re.compile(r"\b(?:" + "|".join(vocabulary) + r")\b", re.IGNORECASE)

        date_patterns = tuple(
            DatePattern(
                name=entry.get("name", f"date_{i}"),
                pattern=_compile(entry["pattern"], f"DATE.{entry.get('name', i)}"),
                confidence=_confidence(entry.get("confidence", 0.9), "DATE.confidence"),
            )
            for i, entry in enumerate(entities.get("DATE", {}).get("patterns", []))
        )

        loc = entities.get("LOCATION", {})
        album = entities.get("ALBUM", {})
        location_pattern = _compile(loc.get("pattern", ""), "LOCATION.pattern", named_group="name")
        album_prefix = _compile(album.get("prefix_pattern", ""), "ALBUM.prefix_pattern", named_group="name")
        album_suffix = _compile(album.get("suffix_pattern", ""), "ALBUM.suffix_pattern", named_group="name")

        fillers = [re.escape(w) for w in data.get("filler_words", [])]
        filler_pattern = re.compile(r"\b(?:" + "|".join(fillers) + r")\b" if fillers else r"(?!x)x")

        terms = data.get("confidence_terms", {})
        return cls(
            version=str(data.get("version", RULESET_VERSION)),
            intents=intents,
            filler_pattern=filler_pattern,
            intent_keywords=tuple(intent_keywords),
            intent_patterns=tuple(intent_patterns),
            phrase_boosts=tuple(boosts),
            keyword_pattern=keyword_pattern,
            keyword_confidence=_confidence(kw.get("confidence", 0.8), "KEYWORD.confidence"),
            keyword_decay=max(0.0, float(kw.get("conjunct_decay", 0.05))),
            keyword_min_confidence=_confidence(kw.get("min_confidence", 0.5), "KEYWORD.min_confidence"),
            conjunction_pattern=_compile(kw.get("conjunction", r"^\s*and\s*$"), "KEYWORD.conjunction"),
            date_patterns=date_patterns,
            location_pattern=location_pattern,
            location_confidence=_confidence(loc.get("confidence", 0.7), "LOCATION.confidence"),
            location_stop_words=frozenset(w.lower() for w in loc.get("stop_words", [])),
            album_prefix_pattern=album_prefix,
            album_suffix_pattern=album_suffix,
            album_confidence=_confidence(album.get("confidence", 0.85), "ALBUM.confidence"),
            album_filler_words=frozenset(w.lower() for w in album.get("filler_words", [])),
            vague_terms=tuple(t.lower() for t in terms.get("vague", [])),
            specific_keywords=tuple(t.lower() for t in terms.get("specific", [])),
            source=copy.deepcopy(data),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Return the uncompiled tables this rule set was built from."""
        return copy.deepcopy(self.source)


def _compile(raw: str, where: str, named_group: Optional[str] = None) -> Pattern[str]:
    if not raw:
        raise RuleSetError(f"Missing pattern for {where}")
    try:
        compiled = re.compile(raw)
    except re.error as e:
        raise RuleSetError(f"Invalid regex for {where}: {e}", {"pattern": raw}) from e
    if named_group and named_group not in compiled.groupindex:
        raise RuleSetError(f"Pattern for {where} must define a (?P<{named_group}>...) group", {"pattern": raw})
    return compiled


def _positive(value: Any, where: str) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError) as e:
        raise RuleSetError(f"{where} must be an integer, got {value!r}") from e
    if number <= 0:
        raise RuleSetError(f"{where} must be positive, got {number}")
    return number


def _confidence(value: Any, where: str) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError) as e:
        raise RuleSetError(f"{where} must be a number, got {value!r}") from e
    if not 0.0 < number <= 1.0:
        raise RuleSetError(f"{where} must be in (0, 1], got {number}")
    return number


@functools.lru_cache(maxsize=1)
def default_ruleset() -> RuleSet:
    """Built-in rule set, compiled once per process."""
    return RuleSet.from_dict(DEFAULT_RULES)


@with_error_context("rules", "load")
def load_ruleset(path: Optional[str] = None) -> RuleSet:
    """Load rules from a JSON file, falling back to the built-in tables.

    Top-level sections present in the file replace the corresponding
    built-in section; absent sections keep their defaults.
    """
    if not path:
        return default_ruleset()
    if not os.path.exists(path):
        raise RuleSetError(f"Rule file not found: {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            overrides = json.load(f)
    except json.JSONDecodeError as e:
        raise RuleSetError(f"Rule file is not valid JSON: {path}", {"error": str(e)}) from e
    if not isinstance(overrides, dict):
        raise RuleSetError(f"Rule file must contain a JSON object: {path}")

    merged = copy.deepcopy(DEFAULT_RULES)
    merged.update(overrides)
    ruleset = RuleSet.from_dict(merged)
    logger.info(f"Rules loaded from {path} (version {ruleset.version})")
    return ruleset


__all__ = [
    "RULESET_VERSION",
    "UNKNOWN_INTENT",
    "INTENT_ORDER",
    "DEFAULT_RULES",
    "IntentKeyword",
    "IntentPattern",
    "PhraseBoost",
    "DatePattern",
    "RuleSet",
    "default_ruleset",
    "load_ruleset",
]
