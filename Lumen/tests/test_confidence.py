"""Tests for confidence scoring and clarification."""

import pytest

from Lumen.config.settings import ConfidenceConfig
from Lumen.core.confidence import (
    FILTER_QUESTION,
    GENERIC_QUESTION,
    NAVIGATE_QUESTION,
    SEARCH_QUESTION,
    UNKNOWN_QUESTION,
    ConfidenceCalculator,
)
from Lumen.core.types import Entity, EntityType, Span


def _entity(entity_type=EntityType.KEYWORD, value="sunset", confidence=0.8):
    return Entity(type=entity_type, value=value, confidence=confidence, span=Span(0, len(value)))


class TestCalculateConfidence:
    """Test the heuristic confidence score."""

    def setup_method(self):
        self.calculator = ConfidenceCalculator()

    def test_unknown_is_zero(self):
        """Test unknown intent always scores zero."""
        assert self.calculator.calculate_confidence("unknown", [_entity()], "show sunset") == 0.0

    def test_specific_keyword_boost(self):
        """Test a specific verb adds the boost to the base."""
        assert self.calculator.calculate_confidence("manage", [], "delete this photo") == pytest.approx(0.75)

    def test_vague_query_replaces_running_value(self):
        """Test vague terms set the value instead of adjusting it."""
        assert self.calculator.calculate_confidence("search", [], "show me stuff") == pytest.approx(0.5)

    def test_entities_add_weighted_mean(self):
        """Test mean entity confidence is weighted in."""
        entities = [_entity(confidence=0.8), _entity(EntityType.DATE, "2023", 0.9)]
        value = self.calculator.calculate_confidence("filter", entities, "sunset photos 2023")
        assert value == pytest.approx(0.6 + 0.85 * 0.3)

    def test_short_query_penalty(self):
        """Test queries under five characters are penalised."""
        assert self.calculator.calculate_confidence("search", [], "pics") == pytest.approx(0.4)

    def test_long_query_penalty(self):
        """Test queries over two hundred characters are penalised."""
        query = "photos " * 40
        assert self.calculator.calculate_confidence("search", [], query) == pytest.approx(0.5)

    def test_floor_applies_below_trigger(self):
        """Test very low scores are lifted to the floor value."""
        config = ConfidenceConfig(base_confidence=0.2)
        calculator = ConfidenceCalculator(config)
        assert calculator.calculate_confidence("search", [], "pics") == pytest.approx(0.4)

    def test_clamped_to_one(self):
        """Test the score never exceeds one."""
        config = ConfidenceConfig(base_confidence=1.0)
        calculator = ConfidenceCalculator(config)
        assert calculator.calculate_confidence("filter", [_entity(confidence=1.0)], "filter sunset") == 1.0

    def test_recognised_intent_is_positive(self):
        """Test any recognised intent scores above zero."""
        assert self.calculator.calculate_confidence("navigate", [], "a") > 0.0


class TestClarification:
    """Test clarification decisions and questions."""

    def setup_method(self):
        self.calculator = ConfidenceCalculator()

    def test_low_confidence_needs_clarification(self):
        """Test scores under the threshold ask for clarification."""
        assert self.calculator.check_needs_clarification("manage", [], 0.49) is True

    def test_threshold_is_inclusive(self):
        """Test a score at the threshold is enough."""
        assert self.calculator.check_needs_clarification("manage", [], 0.5) is False

    def test_search_without_entities(self):
        """Test search and filter need at least one entity."""
        assert self.calculator.check_needs_clarification("search", [], 0.9) is True
        assert self.calculator.check_needs_clarification("filter", [], 0.9) is True
        assert self.calculator.check_needs_clarification("filter", [_entity()], 0.9) is False

    def test_questions_per_intent(self):
        """Test canned prompts."""
        assert self.calculator.generate_clarification_questions("unknown", []) == [UNKNOWN_QUESTION]
        assert self.calculator.generate_clarification_questions("search", []) == [SEARCH_QUESTION]
        assert self.calculator.generate_clarification_questions("filter", []) == [FILTER_QUESTION]
        assert self.calculator.generate_clarification_questions("navigate", []) == [NAVIGATE_QUESTION]

    def test_navigate_with_album_needs_no_question(self):
        """Test an album entity satisfies navigate."""
        album = _entity(EntityType.ALBUM, "vacation", 0.85)
        assert self.calculator.generate_clarification_questions("navigate", [album]) == []

    def test_clarify_falls_back_to_generic_question(self):
        """Test low-confidence queries with no canned prompt still get a question."""
        assert self.calculator.clarify("manage", [], 0.4) == [GENERIC_QUESTION]

    def test_clarify_empty_when_actionable(self):
        """Test confident, complete queries get no questions."""
        assert self.calculator.clarify("filter", [_entity()], 0.9) == []

    def test_configurable_threshold(self):
        """Test the threshold comes from configuration."""
        calculator = ConfidenceCalculator(ConfidenceConfig(clarification_threshold=0.8))
        assert calculator.check_needs_clarification("manage", [], 0.75) is True


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
