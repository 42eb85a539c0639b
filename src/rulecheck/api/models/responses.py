"""
Pydantic response models -- what the API returns.

Each model has a from_domain() constructor so routes never hand-build dicts
out of the engine's dataclasses.
"""

from pydantic import BaseModel, Field

from ...models import (
    ConflictRecord,
    PreviewResult,
    RuleInterpretation,
    ValidationReport,
    ValidationResult,
)


# =============================================================================
# PREVIEW
# =============================================================================


class RuleFeedback(BaseModel):
    """Interpretation of a single rule."""

    original_rule: str
    interpretation: str
    status: str = Field(..., description="recognized | unrecognized | error | conflict")

    @classmethod
    def from_domain(cls, item: RuleInterpretation) -> "RuleFeedback":
        return cls(
            original_rule=item.original_rule,
            interpretation=item.interpretation,
            status=item.status,
        )


class ConflictInfo(BaseModel):
    """Two rules making contradictory demands about one word."""

    word: str
    conflicting_rules: list[str]
    conflict_type: str

    @classmethod
    def from_domain(cls, record: ConflictRecord) -> "ConflictInfo":
        return cls(
            word=record.word,
            conflicting_rules=list(record.conflicting_rules),
            conflict_type=record.conflict_type,
        )


class PreviewResponse(BaseModel):
    """Returned by POST /api/v1/rules/preview."""

    feedback: list[RuleFeedback] = Field(default_factory=list)
    conflicts: list[ConflictInfo] = Field(default_factory=list)
    has_conflicts: bool = False

    @classmethod
    def from_domain(cls, result: PreviewResult) -> "PreviewResponse":
        return cls(
            feedback=[RuleFeedback.from_domain(f) for f in result.feedback],
            conflicts=[ConflictInfo.from_domain(c) for c in result.conflicts],
            has_conflicts=result.has_conflicts,
        )


# =============================================================================
# VALIDATE
# =============================================================================


class RuleResult(BaseModel):
    """Verdict for one rule."""

    rule: str
    passed: bool
    details: str | None = None

    @classmethod
    def from_domain(cls, result: ValidationResult) -> "RuleResult":
        return cls(rule=result.rule, passed=result.passed, details=result.details)


class ValidationReportResponse(BaseModel):
    """Returned by POST /api/v1/validate."""

    passed: bool
    results: list[RuleResult] = Field(default_factory=list)
    document_text: str = Field("", description="Document text, truncated for display")

    @classmethod
    def from_domain(cls, report: ValidationReport) -> "ValidationReportResponse":
        return cls(
            passed=report.passed,
            results=[RuleResult.from_domain(r) for r in report.results],
            document_text=report.document_text,
        )


# =============================================================================
# HEALTH
# =============================================================================


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "healthy"
    version: str = ""
    oracle_enabled: bool = False
    uptime_seconds: float = 0.0


class ErrorResponse(BaseModel):
    """Body of 4xx/5xx responses."""

    detail: str
    warnings: list[dict] = Field(default_factory=list)
