"""
Eval graders.

- CodeGrader: Deterministic checks (fast, cheap, reproducible)
- report_grader / preview_grader: standard structural checks for engine output
"""

from .code_grader import CodeGrader, CodeGraderResult, preview_grader, report_grader
