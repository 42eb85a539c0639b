"""
RuleValidator -- decides whether a document satisfies a rule.

Heuristic path: walk VALIDATOR_CHAIN (same matchers and priority as the
interpreter, but each handler evaluates the document instead of describing
intent). Keyword search is case-insensitive; the capitalized-name and SSN
patterns run against the original text. A rule no matcher recognizes fails
with UNRECOGNIZED_DETAILS, so unknown rules are never silently passed.

Oracle path: the oracle is asked to return {"passed": bool, "details": str}.
Every malformed or failed response becomes a failed result with a diagnostic
string; nothing here raises.
"""

import json
import logging
import re
from dataclasses import dataclass

from ..errors import OracleError
from ..models import ValidationResult
from . import matchers as m

logger = logging.getLogger(__name__)

UNRECOGNIZED_DETAILS = "Rule pattern not recognized or not applicable"
ORACLE_ERROR_DETAILS = "Error contacting AI for validation."
ORACLE_EMPTY_DETAILS = "Error: No response content from AI."
ORACLE_BAD_DETAILS = "Invalid response content (details missing or not string)."
RAW_EXCERPT_CHARS = 100
MAX_EXAMPLES = 3

_FENCE_RE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)


@dataclass(frozen=True)
class _Document:
    text: str
    lowered: str
    forbidden_words: tuple[str, ...]

    def has(self, word: str) -> bool:
        return word.lower() in self.lowered


def _tick(ok: bool) -> str:
    return "✓" if ok else "✗"


def _examples(found: list[str]) -> str:
    shown = ", ".join(found[:MAX_EXAMPLES])
    return shown + ("..." if len(found) > MAX_EXAMPLES else "")


def mask_digits(value: str) -> str:
    return re.sub(r"\d", "*", value)


# =============================================================================
# HANDLERS
# =============================================================================


def _forbidden_words(rule: str, words: m.Captures, doc: _Document) -> ValidationResult:
    if not doc.forbidden_words:
        return ValidationResult(
            rule, True, "No forbidden words list provided or list is empty."
        )
    found = [w for w in doc.forbidden_words if doc.has(w)]
    if found:
        return ValidationResult(rule, False, f"Forbidden words found: {', '.join(found)}")
    return ValidationResult(rule, True, "No uploaded forbidden words found in the document.")


def _capitalized_names(rule: str, words: m.Captures, doc: _Document) -> ValidationResult:
    names = m.CAPITALIZED_NAME_RE.findall(doc.text)
    if names:
        return ValidationResult(rule, True, f"Found capitalized names: {_examples(names)}")
    return ValidationResult(rule, False, "No capitalized names found in document")


def _ssn_present(rule: str, words: m.Captures, doc: _Document) -> ValidationResult:
    ssns = m.SSN_RE.findall(doc.text)
    if ssns:
        masked = ", ".join(mask_digits(s) for s in ssns)
        return ValidationResult(rule, True, f"Found SSN(s): {masked}")
    return ValidationResult(rule, False, "No SSN found in document")


def _email_format(rule: str, words: m.Captures, doc: _Document) -> ValidationResult:
    emails = m.EMAIL_RE.findall(doc.text)
    if emails:
        return ValidationResult(rule, True, f"Found valid email(s): {_examples(emails)}")
    return ValidationResult(rule, False, "No valid email addresses found")


def _phone_format(rule: str, words: m.Captures, doc: _Document) -> ValidationResult:
    phones = m.PHONE_RE.findall(doc.text)
    if phones:
        return ValidationResult(rule, True, f"Found phone number(s): {_examples(phones)}")
    return ValidationResult(rule, False, "No valid phone numbers found")


def _and_but_not(rule: str, words: m.Captures, doc: _Document) -> ValidationResult:
    first, second, forbidden = words
    has_first = doc.has(first)
    has_second = doc.has(second)
    has_forbidden = doc.has(forbidden)
    passed = has_first and has_second and not has_forbidden

    details = (
        f"Required: {first} ({_tick(has_first)}), {second} ({_tick(has_second)}), "
        f"Forbidden: {forbidden} "
        f"({'found - ✗' if has_forbidden else 'not found - ✓'})"
    )
    return ValidationResult(rule, passed, details)


def _contains_word(rule: str, words: m.Captures, doc: _Document) -> ValidationResult:
    word = words[0]
    if doc.has(word):
        return ValidationResult(rule, True, f"Found required word: {word}")
    return ValidationResult(rule, False, f"Required word not found: {word}")


def _not_contains_word(rule: str, words: m.Captures, doc: _Document) -> ValidationResult:
    word = words[0]
    if doc.has(word):
        return ValidationResult(rule, False, f"Forbidden word/phrase found: {word}")
    return ValidationResult(rule, True, f"Forbidden word/phrase not found: {word}")


def _contains_all(rule: str, words: m.Captures, doc: _Document) -> ValidationResult:
    found = [w for w in words if doc.has(w)]
    return ValidationResult(
        rule,
        len(found) == len(words),
        f"Required words: {', '.join(words)} - Found: {', '.join(found)} "
        f"({len(found)}/{len(words)})",
    )


VALIDATOR_CHAIN = [
    (m.FORBIDDEN_WORDS, _forbidden_words),
    (m.CAPITALIZED_NAMES, _capitalized_names),
    (m.SSN_PRESENT, _ssn_present),
    (m.EMAIL_FORMAT, _email_format),
    (m.PHONE_FORMAT, _phone_format),
    (m.AND_BUT_NOT, _and_but_not),
    (m.CONTAINS_WORD, _contains_word),
    (m.NOT_CONTAINS_WORD, _not_contains_word),
    (m.CONTAINS_CAPS, _contains_all),
    (m.CONTAINS_QUOTED, _contains_all),
]


def validate(
    rule: str,
    document_text: str,
    forbidden_words: list[str] | tuple[str, ...] | None = None,
) -> ValidationResult:
    """Validate one rule against document text with the heuristic chain."""
    doc = _Document(
        text=document_text,
        lowered=document_text.lower(),
        forbidden_words=tuple(forbidden_words or ()),
    )
    hit = m.first_match(VALIDATOR_CHAIN, rule)
    if hit is None:
        return ValidationResult(rule, False, UNRECOGNIZED_DETAILS)
    matcher, handler, words = hit
    result = handler(rule, words, doc)
    logger.debug(
        f"[Validator] {matcher.kind}: {'PASS' if result.passed else 'FAIL'} {rule[:60]!r}"
    )
    return result


# =============================================================================
# ORACLE VERDICTS
# =============================================================================


def strip_code_fence(raw: str) -> str:
    """Remove a ```json ... ``` (or bare ```) wrapper around a response."""
    return _FENCE_RE.sub("", raw.strip()).strip()


def parse_verdict(rule: str, raw: str | None) -> ValidationResult:
    """Map a raw oracle response to a ValidationResult. Never raises."""
    raw = (raw or "").strip()
    if not raw:
        logger.warning(f"[Validator] No response content from oracle for {rule[:60]!r}")
        return ValidationResult(rule, False, ORACLE_EMPTY_DETAILS)

    try:
        parsed = json.loads(strip_code_fence(raw))
    except json.JSONDecodeError:
        parsed = None

    if not isinstance(parsed, dict):
        logger.error(f"[Validator] Oracle response was not a JSON object for {rule[:60]!r}")
        return ValidationResult(
            rule,
            False,
            f"Error: AI response was not valid JSON. Raw: {raw[:RAW_EXCERPT_CHARS]}...",
        )

    passed = parsed.get("passed")
    if not isinstance(passed, bool):
        logger.error(f"[Validator] Oracle verdict had no boolean 'passed' for {rule[:60]!r}")
        return ValidationResult(
            rule,
            False,
            f"Error: AI response missing 'passed' boolean. Raw: {raw[:RAW_EXCERPT_CHARS]}...",
        )

    details = parsed.get("details")
    return ValidationResult(
        rule, passed, details if isinstance(details, str) else ORACLE_BAD_DETAILS
    )


async def judge_with_oracle(
    rule: str,
    document_text: str,
    oracle,
    prompt_rule: str | None = None,
) -> ValidationResult:
    """
    Ask the oracle to judge a rule against document text.

    Args:
        rule: Rule text reported in the result.
        document_text: Text to judge (the caller truncates it).
        oracle: A TextOracle.
        prompt_rule: Rule text sent to the oracle, if it differs from `rule`.
    """
    try:
        raw = await oracle.judge_rule(prompt_rule or rule, document_text)
    except OracleError as e:
        logger.error(f"[Validator] Oracle failed for rule {rule[:60]!r}: {e}")
        return ValidationResult(rule, False, ORACLE_ERROR_DETAILS)
    logger.debug(f"[Validator] Raw oracle response for {rule[:60]!r}: {raw!r}")
    return parse_verdict(rule, raw)
