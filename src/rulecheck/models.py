"""Data models for rule interpretation, validation, and conflict detection."""

from dataclasses import dataclass, field

STATUS_RECOGNIZED = "recognized"
STATUS_UNRECOGNIZED = "unrecognized"
STATUS_ERROR = "error"
STATUS_CONFLICT = "conflict"

RULE_STATUSES = (STATUS_RECOGNIZED, STATUS_UNRECOGNIZED, STATUS_ERROR, STATUS_CONFLICT)

FORBIDDEN_WORDS_RULE = "Must not contain uploaded forbidden words"

DEFAULT_RULES = [
    "Names must be capitalized",
    "Document must contain the word CONFIDENTIAL",
    "Email addresses must be in valid format",
    "Phone numbers must be in valid format",
    "SSN cannot be blank",
    "Document must contain MUSTARD and MAYO but not KETCHUP",
]


@dataclass(frozen=True)
class RuleInterpretation:
    """Human-readable restatement of a rule's intent.

    Attributes:
        original_rule: The rule text exactly as submitted.
        interpretation: What the rule checks, or why it could not be interpreted.
        status: "recognized", "unrecognized", "error", or "conflict".
    """

    original_rule: str
    interpretation: str
    status: str


@dataclass(frozen=True)
class ValidationResult:
    """Pass/fail verdict of one rule against one document."""

    rule: str
    passed: bool
    details: str | None = None


@dataclass(frozen=True)
class ConflictRecord:
    """Two rules that make contradictory demands about the same word."""

    word: str
    conflicting_rules: tuple[str, str]
    conflict_type: str


@dataclass(frozen=True)
class QualityFeedback:
    """Outcome of the rule-text quality check. Both fields None means clean."""

    warning: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.warning is None and self.error is None


@dataclass(frozen=True)
class ValidationReport:
    """Ordered validation results plus a truncated preview of the document text."""

    results: list[ValidationResult] = field(default_factory=list)
    document_text: str = ""

    @property
    def passed(self) -> bool:
        return all(r.passed for r in self.results)


@dataclass(frozen=True)
class PreviewResult:
    """Ordered interpretations plus any conflicts found across the rule set."""

    feedback: list[RuleInterpretation] = field(default_factory=list)
    conflicts: list[ConflictRecord] = field(default_factory=list)

    @property
    def has_conflicts(self) -> bool:
        return bool(self.conflicts)
