"""
Conflict & Quality Evals -- are contradictory and suspicious rules caught early?

CODE-BASED graders for the conflict detector and the rule-text quality checker.
"""

import pytest

from rulecheck.rules import check_quality, classify_rule, detect_conflicts, significant_words
from rulecheck.rules.conflicts import (
    CONFLICT_PREFIX,
    DIRECT_CONTRADICTION,
    MUST_BE_CAPITALIZED,
    MUST_CONTAIN,
    MUST_HAVE,
    MUST_NOT_CONTAIN,
    UNKNOWN,
    conflict_explanations,
)
from rulecheck.rules.quality import UNSAFE_MESSAGE


class TestRuleClassification:
    """Eval: Is each rule's requirement type identified?"""

    @pytest.mark.parametrize("rule,expected", [
        ("Document must contain the word secret", MUST_CONTAIN),
        ("Document must not contain the word secret", MUST_NOT_CONTAIN),
        ("Document cannot contain profanity", MUST_NOT_CONTAIN),
        ("Reports should not contain drafts", MUST_NOT_CONTAIN),
        ("Names must be capitalized", MUST_BE_CAPITALIZED),
        ("Every page must have a footer", MUST_HAVE),
        ("Be nice to readers", UNKNOWN),
    ])
    def test_classification(self, rule, expected):
        assert classify_rule(rule) == expected

    def test_significant_words_drop_filler_and_repeats(self):
        words = significant_words("The document must contain the word Mustard and MUSTARD")
        assert words == ["mustard"]

    def test_significant_words_ignore_short_tokens(self):
        assert significant_words("Must contain an ID or OK") == []


class TestConflictDetection:
    """Eval: Are must/must-not pairs over the same word reported?"""

    def test_direct_contradiction(self):
        rules = [
            "Document must contain the word secret",
            "Document must not contain the word secret",
        ]
        conflicts = detect_conflicts(rules)
        assert len(conflicts) == 1
        assert conflicts[0].word == "secret"
        assert conflicts[0].conflicting_rules == (rules[0], rules[1])
        assert conflicts[0].conflict_type == DIRECT_CONTRADICTION

    def test_one_record_per_shared_word(self):
        conflicts = detect_conflicts([
            "Document must contain red apples",
            "Document cannot contain red apples",
        ])
        assert [c.word for c in conflicts] == ["red", "apples"]

    def test_same_direction_is_not_a_conflict(self):
        assert detect_conflicts([
            "Document must contain the word secret",
            "Document must contain secret codes",
        ]) == []

    def test_other_types_never_pair(self):
        assert detect_conflicts([
            "Names must be capitalized",
            "Document must not contain names",
        ]) == []

    def test_single_rule_has_no_conflicts(self):
        assert detect_conflicts(["Document must contain the word secret"]) == []

    def test_explanations_cover_both_rules(self):
        rules = ["Document must contain red apples", "Document must not contain red apples"]
        explanations = conflict_explanations(detect_conflicts(rules))
        assert set(explanations) == set(rules)
        assert explanations[rules[0]] == (
            CONFLICT_PREFIX
            + f'Conflict with word "red": {DIRECT_CONTRADICTION}; '
            + f'Conflict with word "apples": {DIRECT_CONTRADICTION}'
        )


class TestRuleQuality:
    """Eval: Is unsafe or oddly capitalized rule text flagged?"""

    @pytest.mark.parametrize("rule", [
        "<script>alert('x')</script> must contain data",
        'Document must contain <img onerror="x">',
        "Document must contain <body onload=run()>",
        "Click javascript:alert(1)",
    ])
    def test_unsafe_content_is_an_error(self, rule):
        feedback = check_quality(rule)
        assert feedback.error == UNSAFE_MESSAGE
        assert feedback.warning is None

    def test_all_caps_warning(self):
        feedback = check_quality("MUST CONTAIN SECRET")
        assert feedback.warning.startswith("This rule is in ALL CAPS. Is this intended?")
        assert "(Content: 'MUST CONTAIN SECRET')" in feedback.warning

    def test_short_rules_skip_case_checks(self):
        assert check_quality("MAX").ok

    def test_unusual_capitalization_warning(self):
        feedback = check_quality("nAmEs MuSt bE cApItAlIzEd")
        assert "unusual capitalization" in feedback.warning

    def test_caps_keyword_rule_needs_confirmation(self):
        feedback = check_quality("Document must contain the word CONFIDENTIAL")
        assert feedback.warning is not None
        assert feedback.error is None

    def test_normal_rule_is_clean(self):
        assert check_quality("Names must be capitalized.").ok

    def test_long_rule_excerpt_truncated(self):
        feedback = check_quality("X" * 80)
        assert f"(Content: '{'X' * 50}...')" in feedback.warning


class TestReferenceExamples:
    """Eval: Do the reference rule/document pairs produce the documented verdicts?"""

    def test_redacted_pair_conflicts_once(self):
        conflicts = detect_conflicts([
            "Document must contain REDACTED",
            "Document must not contain REDACTED",
        ])
        assert [c.word for c in conflicts] == ["redacted"]
        assert "contradiction" in conflicts[0].conflict_type.lower()

    def test_loud_rule_warns(self):
        assert "ALL CAPS" in check_quality("MAKE IT LOUD").warning

    def test_script_rule_is_unsafe(self):
        assert "unsafe content" in check_quality("<script>alert(1)</script>").error
