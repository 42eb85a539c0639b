"""
Rule engine components.

  matchers     -- ordered recognition table shared by interpreter and validator
  interpreter  -- rule -> RuleInterpretation (heuristic chain, optional oracle)
  validator    -- rule + document -> ValidationResult (heuristic chain, optional oracle)
  conflicts    -- contradictory rule pairs
  quality      -- unsafe content and capitalization checks on rule text
"""

from .conflicts import classify_rule, detect_conflicts, significant_words
from .interpreter import INTERPRETER_CHAIN, interpret, interpret_with_oracle
from .quality import check_quality
from .validator import VALIDATOR_CHAIN, judge_with_oracle, parse_verdict, validate

__all__ = [
    "INTERPRETER_CHAIN",
    "VALIDATOR_CHAIN",
    "check_quality",
    "classify_rule",
    "detect_conflicts",
    "interpret",
    "interpret_with_oracle",
    "judge_with_oracle",
    "parse_verdict",
    "significant_words",
    "validate",
]
