"""
Validation Evals -- does the heuristic validator reach the right verdict?

CODE-BASED graders. Each rule shape gets a passing and a failing document;
details strings are checked where callers depend on their wording.
"""

import pytest

from rulecheck.models import DEFAULT_RULES, FORBIDDEN_WORDS_RULE
from rulecheck.rules import interpret, validate
from rulecheck.rules.validator import UNRECOGNIZED_DETAILS, mask_digits


class TestDocumentPatterns:
    """Eval: Are names, SSNs, emails, and phone numbers found in documents?"""

    def test_capitalized_names_found(self):
        result = validate("Names must be capitalized", "signed by John Doe today")
        assert result.passed
        assert result.details == "Found capitalized names: John Doe"

    def test_capitalized_names_missing(self):
        result = validate("Names must be capitalized", "signed by nobody today")
        assert not result.passed
        assert result.details == "No capitalized names found in document"

    def test_name_examples_capped_at_three(self):
        result = validate("Names must be capitalized", "Alice met. Bob met. Carol met. Dave met.")
        assert result.details == "Found capitalized names: Alice, Bob, Carol..."

    def test_ssn_is_masked_in_details(self):
        result = validate("SSN cannot be blank", "Employee SSN: 123-45-6789")
        assert result.passed
        assert result.details == "Found SSN(s): ***-**-****"
        assert "6789" not in result.details

    def test_ssn_missing(self):
        result = validate("SSN cannot be blank", "No identifiers here")
        assert not result.passed
        assert result.details == "No SSN found in document"

    def test_email_found(self):
        result = validate("Email addresses must be in valid format", "Write to jane.doe@example.com")
        assert result.passed
        assert result.details == "Found valid email(s): jane.doe@example.com"

    def test_email_missing(self):
        result = validate("Email addresses must be in valid format", "Write to jane at example")
        assert not result.passed

    @pytest.mark.parametrize("phone", ["(555) 123-4567", "555-123-4567", "555.123.4567", "+1 555 123 4567"])
    def test_phone_formats(self, phone):
        result = validate("Phone numbers must be in valid format", f"Call {phone} now")
        assert result.passed
        assert phone in result.details

    def test_phone_missing(self):
        assert not validate("Phone numbers must be in valid format", "Call us maybe").passed

    def test_mask_digits(self):
        assert mask_digits("123-45-6789") == "***-**-****"


class TestWordRules:
    """Eval: Are required and forbidden words checked case-insensitively?"""

    def test_contains_word_case_insensitive(self):
        result = validate("Document must contain the word CONFIDENTIAL", "this is confidential")
        assert result.passed
        assert result.details == "Found required word: CONFIDENTIAL"

    def test_contains_word_missing(self):
        result = validate("Document must contain the word CONFIDENTIAL", "public notice")
        assert not result.passed
        assert result.details == "Required word not found: CONFIDENTIAL"

    def test_not_contains_word(self):
        rule = "Document must not contain the word DRAFT"
        assert validate(rule, "final version").passed
        failed = validate(rule, "draft version")
        assert not failed.passed
        assert failed.details == "Forbidden word/phrase found: DRAFT"

    def test_and_but_not_pass_details(self):
        result = validate(
            "Document must contain MUSTARD and MAYO but not KETCHUP", "mustard and mayo only"
        )
        assert result.passed
        assert result.details == "Required: MUSTARD (✓), MAYO (✓), Forbidden: KETCHUP (not found - ✓)"

    def test_and_but_not_fails_on_forbidden(self):
        result = validate(
            "Document must contain MUSTARD and MAYO but not KETCHUP", "mustard, mayo and ketchup"
        )
        assert not result.passed
        assert "Forbidden: KETCHUP (found - ✗)" in result.details

    def test_and_but_not_fails_on_missing_required(self):
        result = validate("Document must contain MUSTARD and MAYO but not KETCHUP", "mustard only")
        assert not result.passed
        assert "MAYO (✗)" in result.details

    def test_caps_words_all_required(self):
        result = validate("Document must contain APPROVED and SIGNED", "approved and signed")
        assert result.passed is True
        result = validate("Document must contain APPROVED and SIGNED", "approved only")
        assert not result.passed
        assert result.details == "Required words: APPROVED, SIGNED - Found: APPROVED (1/2)"

    def test_quoted_phrase_required(self):
        result = validate('Document must contain "terms of service"', "See the Terms of Service")
        assert result.passed
        assert result.details == "Required words: terms of service - Found: terms of service (1/1)"


class TestForbiddenWordsRule:
    """Eval: Is the uploaded forbidden-words list enforced?"""

    def test_found_words_listed_in_upload_order(self):
        result = validate(
            FORBIDDEN_WORDS_RULE, "A Secret draft plan", ["draft", "secret", "budget"]
        )
        assert not result.passed
        assert result.details == "Forbidden words found: draft, secret"

    def test_clean_document_passes(self):
        result = validate(FORBIDDEN_WORDS_RULE, "Quarterly summary", ["secret"])
        assert result.passed

    @pytest.mark.parametrize("words", [None, []])
    def test_missing_or_empty_list_passes(self, words):
        result = validate(FORBIDDEN_WORDS_RULE, "Anything at all", words)
        assert result.passed
        assert result.details == "No forbidden words list provided or list is empty."


class TestValidatorProperties:
    """Eval: Does the validator behave safely on anything it is given?"""

    def test_unrecognized_rule_fails_never_passes(self):
        result = validate("Be nice to readers", "Nice document")
        assert not result.passed
        assert result.details == UNRECOGNIZED_DETAILS

    def test_generic_contains_is_not_validated(self):
        result = validate("The document must contain a signature", "signature")
        assert not result.passed
        assert result.details == UNRECOGNIZED_DETAILS

    def test_empty_document_does_not_raise(self):
        for rule in DEFAULT_RULES:
            assert validate(rule, "").passed is False

    def test_verdict_is_deterministic(self, compliant_document):
        for rule in DEFAULT_RULES:
            assert validate(rule, compliant_document) == validate(rule, compliant_document)

    def test_result_keeps_rule_text(self):
        rule = "Document must contain the word Alpha"
        assert validate(rule, "alpha").rule == rule


class TestReferenceExamples:
    """Eval: Do the reference rule/document pairs produce the documented verdicts?"""

    def test_forbidden_secret(self):
        result = validate(FORBIDDEN_WORDS_RULE, "this is Secret info", ["secret"])
        assert not result.passed
        assert "secret" in result.details
        assert validate(FORBIDDEN_WORDS_RULE, "this is Secret info", []).passed

    def test_confidential_present(self):
        assert validate(
            "Document must contain the word CONFIDENTIAL", "This file is CONFIDENTIAL."
        ).passed

    def test_unknown_rule(self):
        assert interpret("Frobnicate the widget").status == "unrecognized"
        result = validate("Frobnicate the widget", "any widget")
        assert not result.passed
        assert result.details == UNRECOGNIZED_DETAILS
