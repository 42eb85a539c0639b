"""
Rule-text quality checks run before a rule is accepted.

Errors (unsafe content) reject the rule outright. Warnings (ALL CAPS, odd
capitalization) let it through only after the caller confirms.
"""

import re

from ..models import QualityFeedback

UNSAFE_PATTERNS = [
    re.compile(r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>", re.IGNORECASE),
    re.compile(r"onerror\s*=", re.IGNORECASE),
    re.compile(r"onload\s*=", re.IGNORECASE),
    re.compile(r"javascript:", re.IGNORECASE),
]

UNSAFE_MESSAGE = (
    "Rule appears to contain potentially unsafe content (e.g., script tags, JS events). "
    "Please revise."
)
MIN_LENGTH_FOR_CASE_CHECKS = 3
UNUSUAL_CAPS_LIMIT = 2
EXCERPT_CHARS = 50


def _excerpt(rule: str) -> str:
    return rule[:EXCERPT_CHARS] + ("..." if len(rule) > EXCERPT_CHARS else "")


def _unusual_caps_count(rule: str) -> int:
    """Uppercase letters after the first character of words longer than one letter."""
    count = 0
    for word in rule.split():
        if len(word) > 1:
            count += sum(1 for ch in word[1:] if "A" <= ch <= "Z")
        if count > UNUSUAL_CAPS_LIMIT:
            break
    return count


def check_quality(rule: str) -> QualityFeedback:
    """Check one rule for unsafe content, then for suspicious capitalization."""
    if any(pattern.search(rule) for pattern in UNSAFE_PATTERNS):
        return QualityFeedback(error=UNSAFE_MESSAGE)

    if len(rule) <= MIN_LENGTH_FOR_CASE_CHECKS:
        return QualityFeedback()

    if rule == rule.upper() and rule != rule.lower():
        return QualityFeedback(
            warning=f"This rule is in ALL CAPS. Is this intended? (Content: '{_excerpt(rule)}')"
        )

    if _unusual_caps_count(rule) > UNUSUAL_CAPS_LIMIT:
        return QualityFeedback(
            warning=(
                f"This rule has unusual capitalization. Is this intended? "
                f"(Content: '{_excerpt(rule)}')"
            )
        )

    return QualityFeedback()
