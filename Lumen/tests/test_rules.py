"""Tests for rule table validation and loading."""

import copy
import json

import pytest

from Lumen.config.rules import DEFAULT_RULES, RULESET_VERSION, RuleSet, default_ruleset, load_ruleset
from Lumen.core.handler import IntentHandler
from Lumen.utils.errors import RuleSetError


def _rules(**changes):
    data = copy.deepcopy(DEFAULT_RULES)
    data.update(changes)
    return data


class TestRuleSetValidation:
    """Test RuleSet.from_dict validation."""

    def test_default_rules_compile(self):
        """Test the built-in tables compile."""
        ruleset = default_ruleset()
        assert ruleset.version == RULESET_VERSION
        assert ruleset.intents == ("filter", "search", "navigate", "manage")

    def test_default_ruleset_is_cached(self):
        """Test the built-in rule set is compiled once."""
        assert default_ruleset() is default_ruleset()

    def test_to_dict_round_trips_source(self):
        """Test the uncompiled tables are kept."""
        assert default_ruleset().to_dict() == DEFAULT_RULES

    def test_invalid_regex(self):
        """Test a broken pattern is reported."""
        data = _rules()
        data["intent_patterns"]["search"] = [r"(unclosed"]
        with pytest.raises(RuleSetError):
            RuleSet.from_dict(data)

    def test_undeclared_intent(self):
        """Test keyword tables cannot name undeclared intents."""
        data = _rules()
        data["intent_keywords"]["share"] = ["share"]
        with pytest.raises(RuleSetError):
            RuleSet.from_dict(data)

    def test_unknown_is_reserved(self):
        """Test 'unknown' cannot be declared as an intent."""
        with pytest.raises(RuleSetError):
            RuleSet.from_dict(_rules(intents=["filter", "unknown"]))

    def test_non_positive_weight(self):
        """Test weights must be positive."""
        data = _rules()
        data["intent_keywords"]["weight"] = 0
        with pytest.raises(RuleSetError):
            RuleSet.from_dict(data)

    def test_unknown_entity_type(self):
        """Test entity tables are restricted to the known types."""
        data = _rules()
        data["entities"]["PERSON"] = {}
        with pytest.raises(RuleSetError):
            RuleSet.from_dict(data)

    def test_location_pattern_needs_name_group(self):
        """Test location patterns must capture a name."""
        data = _rules()
        data["entities"]["LOCATION"]["pattern"] = r"\bin\s+[A-Z]\w+"
        with pytest.raises(RuleSetError):
            RuleSet.from_dict(data)

    def test_confidence_out_of_range(self):
        """Test base confidences must lie in (0, 1]."""
        data = _rules()
        data["entities"]["ALBUM"]["confidence"] = 1.5
        with pytest.raises(RuleSetError):
            RuleSet.from_dict(data)


class TestLoadRuleset:
    """Test loading rule overrides from JSON."""

    def test_no_path_gives_defaults(self):
        """Test no path returns the built-in set."""
        assert load_ruleset(None) is default_ruleset()

    def test_override_section(self, tmp_path):
        """Test a file replaces only the sections it names."""
        path = tmp_path / "rules.json"
        path.write_text(json.dumps({
            "version": "2.0.0",
            "confidence_terms": {"vague": ["whatever"], "specific": []},
        }))
        ruleset = load_ruleset(str(path))
        assert ruleset.version == "2.0.0"
        assert ruleset.vague_terms == ("whatever",)
        assert ruleset.intents == default_ruleset().intents

    def test_missing_file(self, tmp_path):
        """Test a missing file is an error."""
        with pytest.raises(RuleSetError):
            load_ruleset(str(tmp_path / "missing.json"))

    def test_invalid_json(self, tmp_path):
        """Test malformed JSON is an error."""
        path = tmp_path / "rules.json"
        path.write_text("{not json")
        with pytest.raises(RuleSetError):
            load_ruleset(str(path))

    def test_handler_uses_custom_rules(self, tmp_path):
        """Test a handler built on custom rules classifies with them."""
        data = _rules()
        data["intent_keywords"]["manage"] = data["intent_keywords"]["manage"] + ["share"]
        handler = IntentHandler(rules=RuleSet.from_dict(data))
        assert handler.explain("share").intent == "manage"
        assert IntentHandler().explain("share").intent == "unknown"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
