"""
Conflict detection -- finds rule pairs that demand and forbid the same word.

Each rule is reduced to its significant words (lowercase alphabetic tokens of
3+ letters minus stopwords and rule filler) and classified by requirement type.
Only must_contain vs must_not_contain pairs are contradictions; the other
types are computed for completeness but never paired.
"""

import logging
import re

from ..models import ConflictRecord

logger = logging.getLogger(__name__)

MUST_NOT_CONTAIN = "must_not_contain"
MUST_CONTAIN = "must_contain"
MUST_BE_CAPITALIZED = "must_be_capitalized"
MUST_HAVE = "must_have"
UNKNOWN = "unknown"

OPPOSING_TYPES = {MUST_CONTAIN, MUST_NOT_CONTAIN}

DIRECT_CONTRADICTION = (
    "Direct contradiction: one rule requires the word while another forbids it"
)
CONFLICT_PREFIX = "⚠️ CONFLICT DETECTED: "

STOPWORDS = frozenset({
    "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for", "of",
    "with", "by", "from", "up", "about", "into", "through", "during", "before",
    "after", "above", "below", "between", "among", "is", "are", "was", "were",
    "be", "been", "being", "have", "has", "had", "do", "does", "did", "will",
    "would", "could", "should", "may", "might", "can", "must", "shall", "this",
    "that", "these", "those", "i", "you", "he", "she", "it", "we", "they", "me",
    "him", "her", "us", "them", "my", "your", "his", "its", "our", "their",
    "mine", "yours", "hers", "ours", "theirs",
})
RULE_FILLER = frozenset({"contain", "contains", "word", "document", "not"})

_TOKEN_RE = re.compile(r"\b[a-z]{3,}\b")


def significant_words(rule: str) -> list[str]:
    """Lowercase 3+ letter tokens that are neither stopwords nor rule filler, deduplicated."""
    words: list[str] = []
    for token in _TOKEN_RE.findall(rule.lower()):
        if token in STOPWORDS or token in RULE_FILLER or token in words:
            continue
        words.append(token)
    return words


def classify_rule(rule: str) -> str:
    """Categorize a rule's requirement. Negated forms are checked first."""
    lowered = rule.lower()
    if (
        "must not contain" in lowered
        or "cannot contain" in lowered
        or "should not contain" in lowered
    ):
        return MUST_NOT_CONTAIN
    if "must contain" in lowered:
        return MUST_CONTAIN
    if "must be" in lowered and "capitalized" in lowered:
        return MUST_BE_CAPITALIZED
    if "must have" in lowered:
        return MUST_HAVE
    return UNKNOWN


def detect_conflicts(rules: list[str]) -> list[ConflictRecord]:
    """Return one ConflictRecord per shared word for every contradictory rule pair."""
    analysed = [(rule, classify_rule(rule), significant_words(rule)) for rule in rules]
    conflicts: list[ConflictRecord] = []

    for i, (rule1, type1, words1) in enumerate(analysed):
        for rule2, type2, words2 in analysed[i + 1:]:
            if {type1, type2} != OPPOSING_TYPES:
                continue
            shared = [w for w in words1 if w in words2]
            for word in shared:
                conflicts.append(ConflictRecord(
                    word=word,
                    conflicting_rules=(rule1, rule2),
                    conflict_type=DIRECT_CONTRADICTION,
                ))

    if conflicts:
        logger.info(f"[Conflicts] {len(conflicts)} conflict(s) across {len(rules)} rules")
    return conflicts


def conflict_explanations(conflicts: list[ConflictRecord]) -> dict[str, str]:
    """Map each conflicting rule to the joined description of all its conflicts."""
    per_rule: dict[str, list[str]] = {}
    for conflict in conflicts:
        description = f'Conflict with word "{conflict.word}": {conflict.conflict_type}'
        for rule in conflict.conflicting_rules:
            per_rule.setdefault(rule, []).append(description)
    return {rule: CONFLICT_PREFIX + "; ".join(parts) for rule, parts in per_rule.items()}
