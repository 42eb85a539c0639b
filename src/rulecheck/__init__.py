"""
rulecheck -- document compliance checking against plain-language rules.

Usage:
    from rulecheck import ComplianceEngine, EngineConfig

    engine = ComplianceEngine(EngineConfig())
    report = await engine.validate(text, rules=["Document must contain the word DRAFT"])
"""

from .config import EngineConfig
from .engine import ComplianceEngine
from .errors import (
    ConfirmationRequired,
    InputError,
    OracleError,
    RuleCheckError,
    UnsafeContentError,
)
from .models import (
    DEFAULT_RULES,
    FORBIDDEN_WORDS_RULE,
    ConflictRecord,
    PreviewResult,
    QualityFeedback,
    RuleInterpretation,
    ValidationReport,
    ValidationResult,
)
from .oracle import LLMOracle, TextOracle, create_oracle

__version__ = "0.1.0"
