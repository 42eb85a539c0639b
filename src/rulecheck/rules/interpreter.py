"""
RuleInterpreter -- explains what a rule means, independent of any document.

Heuristic path: walk INTERPRETER_CHAIN, first match wins. Deterministic and
idempotent; an unmatched rule is reported as "unrecognized", never guessed.

Oracle path: when an oracle is configured it is asked first. Ambiguity in its
answer maps to "unrecognized", an empty answer falls back to the heuristic
chain, and an OracleError maps to "error" for that rule only.
"""

import logging

from ..errors import OracleError
from ..models import (
    STATUS_ERROR,
    STATUS_RECOGNIZED,
    STATUS_UNRECOGNIZED,
    RuleInterpretation,
)
from . import matchers as m

logger = logging.getLogger(__name__)

UNRECOGNIZED_INTERPRETATION = (
    "This rule does not match any known patterns. It may be evaluated by future "
    "NLP capabilities or will be marked as unrecognized by current logic."
)
ORACLE_ERROR_INTERPRETATION = "Error contacting AI for interpretation."
AMBIGUITY_MARKERS = ("ambiguous", "not directly verifiable")


def _forbidden_words(words: m.Captures) -> str:
    return "Checks against the uploaded forbidden words list."


def _capitalized_names(words: m.Captures) -> str:
    return "Checks for capitalized names (e.g., John Doe)."


def _ssn_present(words: m.Captures) -> str:
    return "Checks for the presence of Social Security Numbers (XXX-XX-XXXX)."


def _email_format(words: m.Captures) -> str:
    return "Checks for valid email address formats."


def _phone_format(words: m.Captures) -> str:
    return "Checks for valid US-style phone number formats."


def _and_but_not(words: m.Captures) -> str:
    first, second, forbidden = words
    return f'Requires presence of "{first}" AND "{second}", AND absence of "{forbidden}".'


def _contains_word(words: m.Captures) -> str:
    return f'Requires the document to contain the word: "{words[0]}".'


def _not_contains_word(words: m.Captures) -> str:
    return f'Ensures the document does NOT contain the word/phrase: "{words[0]}".'


def _contains_caps(words: m.Captures) -> str:
    return f"Checks for the presence of the ALL CAPS words: {', '.join(words)}."


def _contains_quoted(words: m.Captures) -> str:
    quoted = ", ".join(f'"{w}"' for w in words)
    return f"Checks for the presence of the quoted phrases: {quoted}."


def _contains_generic(words: m.Captures) -> str:
    return "General check for required words/phrases."


INTERPRETER_CHAIN = [
    (m.FORBIDDEN_WORDS, _forbidden_words),
    (m.CAPITALIZED_NAMES, _capitalized_names),
    (m.SSN_PRESENT, _ssn_present),
    (m.EMAIL_FORMAT, _email_format),
    (m.PHONE_FORMAT, _phone_format),
    (m.AND_BUT_NOT, _and_but_not),
    (m.CONTAINS_WORD, _contains_word),
    (m.NOT_CONTAINS_WORD, _not_contains_word),
    (m.CONTAINS_CAPS, _contains_caps),
    (m.CONTAINS_QUOTED, _contains_quoted),
    (m.CONTAINS_GENERIC, _contains_generic),
]


def interpret(rule: str) -> RuleInterpretation:
    """Interpret a rule with the heuristic chain only."""
    hit = m.first_match(INTERPRETER_CHAIN, rule)
    if hit is None:
        return RuleInterpretation(
            original_rule=rule,
            interpretation=UNRECOGNIZED_INTERPRETATION,
            status=STATUS_UNRECOGNIZED,
        )
    matcher, handler, words = hit
    logger.debug(f"[Interpreter] {matcher.kind} matched: {rule[:60]!r}")
    return RuleInterpretation(
        original_rule=rule,
        interpretation=handler(words),
        status=STATUS_RECOGNIZED,
    )


async def interpret_with_oracle(rule: str, oracle) -> RuleInterpretation:
    """
    Interpret a rule, asking the oracle first.

    Args:
        rule: Rule text as submitted.
        oracle: A TextOracle. None means heuristic only.
    """
    if oracle is None:
        return interpret(rule)

    try:
        answer = (await oracle.summarize_intent(rule) or "").strip()
    except OracleError as e:
        logger.error(f"[Interpreter] Oracle failed for rule {rule[:60]!r}: {e}")
        return RuleInterpretation(
            original_rule=rule,
            interpretation=ORACLE_ERROR_INTERPRETATION,
            status=STATUS_ERROR,
        )

    if not answer:
        logger.info("[Interpreter] Oracle returned nothing, using heuristic chain")
        return interpret(rule)

    lowered = answer.lower()
    status = (
        STATUS_UNRECOGNIZED
        if any(marker in lowered for marker in AMBIGUITY_MARKERS)
        else STATUS_RECOGNIZED
    )
    return RuleInterpretation(original_rule=rule, interpretation=answer, status=status)
