"""
Rule matchers -- the ordered, first-match-wins recognition table.

Each RuleMatcher pairs a kind with a match function. The match function
returns the words it captured from the rule (an empty tuple for pure keyword
matchers) or None when the rule does not fit. The interpreter and validator
each attach a handler to these matchers; the order they list them in is the
priority order.

Keyword checks run on the lowercased rule. Word capture runs
case-insensitively on the original text so required words keep their casing.
"""

import re
from dataclasses import dataclass
from typing import Callable

from ..models import FORBIDDEN_WORDS_RULE

# A rule word is either a double-quoted phrase or a bare run of non-space characters.
_WORD = r'(?:"([^"]+)"|([^"\s]+))'
_PUNCTUATION = ".,;:!?'"

AND_BUT_NOT_RE = re.compile(
    rf"must contain\s+(?:.*?\s+)?{_WORD}\s+and\s+{_WORD}\s+but\s+not\s+{_WORD}",
    re.IGNORECASE,
)
CONTAINS_WORD_RE = re.compile(rf"must contain the word\s+{_WORD}", re.IGNORECASE)
NOT_CONTAINS_WORD_RE = re.compile(
    rf"(?:must not|cannot|should not) contain(?: the word)?\s+{_WORD}",
    re.IGNORECASE,
)
CAPS_TOKEN_RE = re.compile(r"\b[A-Z]{2,}\b")
QUOTED_PHRASE_RE = re.compile(r'"([^"]+)"')

# Document patterns used by the validator.
CAPITALIZED_NAME_RE = re.compile(r"\b[A-Z][a-z]+(?:\s+[A-Z][a-z]+)*\b")
SSN_RE = re.compile(r"\b\d{3}-?\d{2}-?\d{4}\b")
EMAIL_RE = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")
PHONE_RE = re.compile(
    r"(?<![\w+])(?:\+1[-.\s]?)?\(?[0-9]{3}\)?[-.\s]?[0-9]{3}[-.\s]?[0-9]{4}\b"
)

Captures = tuple[str, ...]


@dataclass(frozen=True)
class RuleMatcher:
    """One row of the recognition table."""

    kind: str
    match: Callable[[str], Captures | None]

    def __call__(self, rule: str) -> Captures | None:
        return self.match(rule)


def _clean_word(word: str) -> str:
    return word.strip().strip(_PUNCTUATION) or word.strip()


def _words_from(match: re.Match) -> Captures:
    """Collapse (quoted, bare) group pairs into one word per slot."""
    groups = match.groups()
    return tuple(
        _clean_word(quoted if quoted is not None else bare)
        for quoted, bare in zip(groups[0::2], groups[1::2])
    )


def _keywords(*alternatives: tuple[str, ...]) -> Callable[[str], Captures | None]:
    """Match when every group has at least one keyword present in the lowercased rule."""

    def match(rule: str) -> Captures | None:
        lowered = rule.lower()
        if all(any(k in lowered for k in group) for group in alternatives):
            return ()
        return None

    return match


def _pattern(regex: re.Pattern) -> Callable[[str], Captures | None]:
    def match(rule: str) -> Captures | None:
        found = regex.search(rule)
        return _words_from(found) if found else None

    return match


def _exact_forbidden_words_rule(rule: str) -> Captures | None:
    return () if rule == FORBIDDEN_WORDS_RULE else None


def caps_tokens(rule: str) -> list[str]:
    """Tokens of two or more consecutive uppercase letters, in rule order."""
    return CAPS_TOKEN_RE.findall(rule)


def quoted_phrases(rule: str) -> list[str]:
    return [p.strip() for p in QUOTED_PHRASE_RE.findall(rule) if p.strip()]


def _must_contain_caps(rule: str) -> Captures | None:
    if "must contain" not in rule.lower():
        return None
    tokens = caps_tokens(rule)
    return tuple(tokens) if tokens else None


def _must_contain_quoted(rule: str) -> Captures | None:
    if "must contain" not in rule.lower():
        return None
    phrases = quoted_phrases(rule)
    return tuple(phrases) if phrases else None


FORBIDDEN_WORDS = RuleMatcher("forbidden_words", _exact_forbidden_words_rule)
CAPITALIZED_NAMES = RuleMatcher(
    "capitalized_names", _keywords(("name",), ("capitalized", "capital"))
)
SSN_PRESENT = RuleMatcher("ssn_present", _keywords(("ssn", "social security"), ("blank",)))
EMAIL_FORMAT = RuleMatcher("email_format", _keywords(("email",), ("valid", "format")))
PHONE_FORMAT = RuleMatcher("phone_format", _keywords(("phone",), ("valid", "format")))
AND_BUT_NOT = RuleMatcher("and_but_not", _pattern(AND_BUT_NOT_RE))
CONTAINS_WORD = RuleMatcher("contains_word", _pattern(CONTAINS_WORD_RE))
NOT_CONTAINS_WORD = RuleMatcher("not_contains_word", _pattern(NOT_CONTAINS_WORD_RE))
CONTAINS_CAPS = RuleMatcher("contains_caps", _must_contain_caps)
CONTAINS_QUOTED = RuleMatcher("contains_quoted", _must_contain_quoted)
CONTAINS_GENERIC = RuleMatcher("contains_generic", _keywords(("must contain",)))


def first_match(
    chain: list[tuple[RuleMatcher, Callable]], rule: str
) -> tuple[RuleMatcher, Callable, Captures] | None:
    """Walk a (matcher, handler) chain and return the first row that fires."""
    for matcher, handler in chain:
        captures = matcher(rule)
        if captures is not None:
            return matcher, handler, captures
    return None
