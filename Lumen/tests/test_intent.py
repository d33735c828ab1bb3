"""Tests for intent classification."""

import pytest

from Lumen.config.rules import UNKNOWN_INTENT
from Lumen.core.intent import IntentClassifier


class TestNormalization:
    """Test query normalisation."""

    def setup_method(self):
        self.classifier = IntentClassifier()

    def test_collapses_whitespace_and_lowercases(self):
        """Test whitespace runs collapse and case folds."""
        assert self.classifier.normalize("  Show   ME\tPhotos ") == "show me photos"

    def test_removes_filler_words(self):
        """Test filler words are dropped."""
        assert self.classifier.normalize("Um, please show me photos") == ", show me photos"

    def test_non_string_is_empty(self):
        """Test non-string input normalises to empty."""
        assert self.classifier.normalize(None) == ""
        assert self.classifier.normalize(123) == ""


class TestIntentClassification:
    """Test the winning intent for representative queries."""

    def setup_method(self):
        self.classifier = IntentClassifier()

    @pytest.mark.parametrize("query,expected", [
        ("show me photos with sunset", "filter"),
        ("filter by sunset and beach", "filter"),
        ("Please display photographs containing sunset imagery from the year 2023", "filter"),
        ("find pictures of vacation", "search"),
        ("show sunset photos", "search"),
        ("hey can u show me pics from last year's trip?", "search"),
        ("open album vacation 2023", "navigate"),
        ("open vacation album", "navigate"),
        ("show me the album", "navigate"),
        ("album called Summer Trip", "navigate"),
        ("delete this photo", "manage"),
        ("upload new pictures", "manage"),
    ])
    def test_classify_intent(self, query, expected):
        """Test representative queries."""
        assert self.classifier.classify_intent(query) == expected

    @pytest.mark.parametrize("query", ["asdf qwerty", "", "   ", None])
    def test_unknown(self, query):
        """Test nothing scoring yields unknown."""
        assert self.classifier.classify_intent(query) == UNKNOWN_INTENT


class TestClassificationBreakdown:
    """Test the explainable breakdown."""

    def setup_method(self):
        self.classifier = IntentClassifier()

    def test_scores_for_every_intent(self):
        """Test every declared intent is scored in order."""
        result = self.classifier.classify("show me photos with sunset")
        assert list(result.scores) == ["filter", "search", "navigate", "manage"]
        assert result.scores["filter"] == 6
        assert result.scores["search"] == 5

    def test_matched_rules_recorded(self):
        """Test fired keywords, patterns and boosts are reported."""
        result = self.classifier.classify("show me photos with sunset")
        assert "keyword:sunset" in result.matched_rules["filter"]
        assert "boost:show+pics|photos" in result.matched_rules["search"]

    def test_alternatives_exclude_winner(self):
        """Test alternatives list other positive intents, best first."""
        result = self.classifier.classify("show me photos with sunset")
        assert result.alternatives == [{"intent": "search", "score": 5}]

    def test_to_dict_keys(self):
        """Test serialised breakdown keys."""
        data = self.classifier.classify("open vacation album").to_dict()
        assert data["intent"] == "navigate"
        assert data["normalizedQuery"] == "open vacation album"
        assert set(data) == {"intent", "scores", "normalizedQuery", "matchedRules", "alternatives"}

    def test_tie_goes_to_first_declared_intent(self):
        """Test equal scores resolve in declaration order."""
        result = self.classifier.classify("sunset trip")
        assert result.scores["filter"] == result.scores["search"] == 1
        assert result.intent == "filter"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
