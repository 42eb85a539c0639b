"""
Code-Based Graders -- deterministic evaluation with exact criteria.

Use for: report structure, status vocabularies, ordering, detail strings.
Fast, cheap, reproducible. No LLM needed.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable

from rulecheck.models import RULE_STATUSES

logger = logging.getLogger(__name__)


@dataclass
class CodeGraderResult:
    """Result from code-based grading."""

    eval_name: str
    passed: bool
    checks_passed: int = 0
    checks_total: int = 0
    failures: list[str] = field(default_factory=list)


class CodeGrader:
    """Deterministic grader that runs a list of check functions.

    Usage:
        grader = CodeGrader("default_rules")
        grader.add_check("six_results", lambda r: len(r.results) == 6)
        grader.add_check("all_passed", lambda r: r.passed)
        result = grader.grade(report)
    """

    def __init__(self, eval_name: str):
        self.eval_name = eval_name
        self._checks: list[tuple[str, Callable]] = []

    def add_check(self, name: str, check_fn: Callable[[Any], bool]) -> "CodeGrader":
        """Add a named check function. Returns self for chaining."""
        self._checks.append((name, check_fn))
        return self

    def grade(self, output: Any) -> CodeGraderResult:
        """Run all checks against the output. A raising check counts as a failure."""
        failures = []
        passed_count = 0

        for name, check_fn in self._checks:
            try:
                if check_fn(output):
                    passed_count += 1
                else:
                    failures.append(f"FAIL: {name}")
            except Exception as e:
                failures.append(f"ERROR: {name} -- {e}")

        if failures:
            logger.info(f"[Grader] {self.eval_name}: {failures}")
        return CodeGraderResult(
            eval_name=self.eval_name,
            passed=len(failures) == 0,
            checks_passed=passed_count,
            checks_total=len(self._checks),
            failures=failures,
        )


def report_grader(eval_name: str, expected_rules: list[str]) -> CodeGrader:
    """Structural checks every ValidationReport must satisfy for a given rule list."""
    return (
        CodeGrader(eval_name)
        .add_check("one_result_per_rule", lambda r: len(r.results) == len(expected_rules))
        .add_check("input_order_kept", lambda r: [x.rule for x in r.results] == expected_rules)
        .add_check("passed_is_bool", lambda r: all(isinstance(x.passed, bool) for x in r.results))
        .add_check(
            "failures_explained",
            lambda r: all(isinstance(x.details, str) and x.details for x in r.results if not x.passed),
        )
        .add_check("overall_matches_results", lambda r: r.passed == all(x.passed for x in r.results))
    )


def preview_grader(eval_name: str, expected_rules: list[str]) -> CodeGrader:
    """Structural checks every PreviewResult must satisfy for a given rule list."""
    return (
        CodeGrader(eval_name)
        .add_check("one_item_per_rule", lambda p: len(p.feedback) == len(expected_rules))
        .add_check("input_order_kept", lambda p: [f.original_rule for f in p.feedback] == expected_rules)
        .add_check("known_statuses", lambda p: all(f.status in RULE_STATUSES for f in p.feedback))
        .add_check("interpretations_present", lambda p: all(f.interpretation for f in p.feedback))
        .add_check("conflict_flag_consistent", lambda p: p.has_conflicts == bool(p.conflicts))
    )
