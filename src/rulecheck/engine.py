"""
ComplianceEngine -- runs preview and validation requests end to end.

Request flow (both paths):
  1. Boundary checks  -- empty input, rule ceilings, unsafe rule text (whole request aborts)
  2. Conflict pass    -- partitions rules into conflicting vs normal before any evaluation
  3. Per-rule work    -- interpreter or validator, optionally via the oracle,
                         run concurrently with asyncio.gather
  4. Aggregation      -- results keep input order regardless of completion order

Oracle failures and conflicts are scoped to the rule they affect; siblings
are always evaluated.
"""

import asyncio
import logging

from .config import EngineConfig
from .errors import ConfirmationRequired, InputError, UnsafeContentError
from .extraction import contains_html, extract_text, parse_forbidden_words
from .models import (
    DEFAULT_RULES,
    FORBIDDEN_WORDS_RULE,
    STATUS_CONFLICT,
    PreviewResult,
    RuleInterpretation,
    ValidationReport,
    ValidationResult,
)
from .rules.conflicts import conflict_explanations, detect_conflicts
from .rules.interpreter import interpret_with_oracle
from .rules.quality import check_quality
from .rules.validator import judge_with_oracle, validate
from .security.validators import (
    split_rules,
    validate_document_upload,
    validate_forbidden_upload,
    validate_length,
    validate_list_size,
    validate_not_empty,
)

logger = logging.getLogger(__name__)

MAX_RULES_TEXT_LENGTH = 20_000
MAX_RULE_LENGTH = 2_000


class ComplianceEngine:
    """Rule interpretation and validation engine.

    Usage:
        engine = ComplianceEngine(EngineConfig(oracle_enabled=False))
        preview = await engine.preview("Document must contain the word DRAFT")
        report = await engine.validate(text, rules=["SSN cannot be blank"])
    """

    def __init__(self, config: EngineConfig | None = None, oracle=None):
        self._config = config or EngineConfig()
        self._oracle = oracle if self._config.oracle_enabled else None
        if self._config.oracle_enabled and oracle is None:
            logger.warning("[Engine] Oracle enabled but none supplied; using heuristics only")
        logger.info(
            f"[Engine] Initialized (oracle={'on' if self._oracle else 'off'}, "
            f"max_preview_rules={self._config.max_preview_rules})"
        )

    @property
    def config(self) -> EngineConfig:
        return self._config

    @property
    def oracle_active(self) -> bool:
        return self._oracle is not None

    # =========================================================================
    # PREVIEW
    # =========================================================================

    async def preview(
        self, rules_text: str | None, confirm_warnings: bool = False
    ) -> PreviewResult:
        """
        Interpret newline-separated rules without a document.

        Raises:
            InputError: Empty input or more rules than max_preview_rules.
            UnsafeContentError: A rule contains unsafe content.
            ConfirmationRequired: A rule has capitalization warnings and
                confirm_warnings is False.
        """
        rules_text = validate_not_empty(rules_text, "No custom rules text provided")
        validate_length(rules_text, "Rules text", max_length=MAX_RULES_TEXT_LENGTH)
        rules = split_rules(rules_text)
        validate_list_size(rules, self._config.max_preview_rules)
        for rule in rules:
            validate_length(rule, "Each rule", max_length=MAX_RULE_LENGTH)
        self._check_rule_quality(rules, confirm_warnings)

        conflicts = detect_conflicts(rules)
        explanations = conflict_explanations(conflicts)

        feedback = await asyncio.gather(
            *(self._interpret_one(rule, explanations) for rule in rules)
        )
        logger.info(
            f"[Engine] Previewed {len(rules)} rule(s), {len(conflicts)} conflict(s)"
        )
        return PreviewResult(feedback=list(feedback), conflicts=conflicts)

    async def _interpret_one(
        self, rule: str, explanations: dict[str, str]
    ) -> RuleInterpretation:
        if rule in explanations:
            return RuleInterpretation(
                original_rule=rule,
                interpretation=explanations[rule],
                status=STATUS_CONFLICT,
            )
        return await interpret_with_oracle(rule, self._oracle)

    # =========================================================================
    # VALIDATE
    # =========================================================================

    async def validate(
        self,
        document_text: str | None,
        rules: list[str] | None = None,
        forbidden_words: list[str] | None = None,
        confirm_warnings: bool = False,
    ) -> ValidationReport:
        """
        Validate document text against rules.

        Args:
            document_text: Extracted, cleaned document text.
            rules: Custom rules. Empty or None uses DEFAULT_RULES. Supplying
                custom rules switches on natural-language mode, which routes
                every rule through the oracle when one is active.
            forbidden_words: Parsed forbidden-word list. None means no list
                was uploaded; an empty list still activates the built-in rule.
            confirm_warnings: Accept rules with capitalization warnings.

        Raises:
            InputError: Empty or HTML-looking document, too many rules, or a
                rule longer than MAX_RULE_LENGTH.
            UnsafeContentError / ConfirmationRequired: see preview().
        """
        document_text = validate_not_empty(document_text, "No text found in the document")
        if contains_html(document_text):
            raise InputError(
                "Document appears to contain HTML/JavaScript. Please upload clean text or PDF."
            )

        custom_rules = [_canonical_rule(r.strip()) for r in rules or [] if r and r.strip()]
        natural_language = bool(custom_rules)
        if natural_language:
            validate_list_size(custom_rules, self._config.max_validation_rules)
            for rule in custom_rules:
                validate_length(rule, "Each rule", max_length=MAX_RULE_LENGTH)
            self._check_rule_quality(custom_rules, confirm_warnings)
            active_rules = list(custom_rules)
        else:
            logger.info("[Engine] No custom rules provided, using default rule set")
            active_rules = list(DEFAULT_RULES)

        if forbidden_words is not None and FORBIDDEN_WORDS_RULE not in active_rules:
            active_rules.insert(0, FORBIDDEN_WORDS_RULE)

        conflicts = detect_conflicts(active_rules)
        explanations = conflict_explanations(conflicts)
        use_oracle = natural_language and self._oracle is not None
        words = list(forbidden_words or [])

        logger.info(
            f"[Engine] Validating {len(active_rules)} rule(s) "
            f"({'oracle' if use_oracle else 'heuristic'}), {len(conflicts)} conflict(s)"
        )
        results = await asyncio.gather(
            *(
                self._validate_one(rule, document_text, words, explanations, use_oracle)
                for rule in active_rules
            )
        )
        return ValidationReport(
            results=list(results),
            document_text=self._truncate(document_text),
        )

    async def _validate_one(
        self,
        rule: str,
        document_text: str,
        forbidden_words: list[str],
        explanations: dict[str, str],
        use_oracle: bool,
    ) -> ValidationResult:
        if rule in explanations:
            return ValidationResult(rule, False, explanations[rule])
        if not use_oracle:
            return validate(rule, document_text, forbidden_words)

        excerpt = document_text[: self._config.oracle_document_chars]
        if rule == FORBIDDEN_WORDS_RULE:
            if not forbidden_words:
                return validate(rule, document_text, forbidden_words)
            listed = ", ".join(f'"{w}"' for w in forbidden_words)
            return await judge_with_oracle(
                rule,
                excerpt,
                self._oracle,
                prompt_rule=f"The document must not contain any of these words or phrases: {listed}",
            )
        return await judge_with_oracle(rule, excerpt, self._oracle)

    def _truncate(self, text: str) -> str:
        limit = self._config.report_preview_chars
        return text[:limit] + ("..." if len(text) > limit else "")

    # =========================================================================
    # INPUT LOADING
    # =========================================================================

    def read_document(self, data: bytes, mime_type: str, filename: str = "") -> str:
        """Check an uploaded document against limits and extract its text."""
        validate_document_upload(filename, mime_type, len(data), self._config.max_document_bytes)
        text = extract_text(data, mime_type, filename)
        logger.info(f"[Engine] Extracted {len(text)} chars from {filename or 'document'}")
        return text

    def read_forbidden_words(
        self, data: bytes, mime_type: str, filename: str = ""
    ) -> list[str]:
        """Check an uploaded forbidden-words list against limits and parse it."""
        validate_forbidden_upload(
            filename, mime_type, len(data), self._config.max_forbidden_bytes
        )
        return parse_forbidden_words(data)

    # =========================================================================
    # QUALITY GATE
    # =========================================================================

    def _check_rule_quality(self, rules: list[str], confirm_warnings: bool) -> None:
        warnings: list[tuple[str, str]] = []
        for rule in rules:
            feedback = check_quality(rule)
            if feedback.error:
                logger.warning(f"[Engine] Rejected unsafe rule ({len(rule)} chars)")
                raise UnsafeContentError(feedback.error, rule=rule)
            if feedback.warning:
                warnings.append((rule, feedback.warning))
        if warnings and not confirm_warnings:
            raise ConfirmationRequired(warnings)


def _canonical_rule(rule: str) -> str:
    """Any casing of the built-in forbidden-words rule refers to the built-in rule."""
    return FORBIDDEN_WORDS_RULE if rule.lower() == FORBIDDEN_WORDS_RULE.lower() else rule
