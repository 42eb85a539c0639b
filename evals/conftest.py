"""Eval test fixtures -- mock oracle, engines, sample documents."""

from unittest.mock import AsyncMock

import pytest

from rulecheck.config import EngineConfig
from rulecheck.engine import ComplianceEngine

COMPLIANT_DOCUMENT = (
    "CONFIDENTIAL memo prepared by John Doe. "
    "Contact john.doe@example.com or call (555) 123-4567. "
    "Employee SSN: 123-45-6789. "
    "Lunch order: turkey with mustard and mayo."
)

NON_COMPLIANT_DOCUMENT = (
    "internal memo. no contact details here. "
    "lunch order: fries with ketchup and mustard."
)


@pytest.fixture
def compliant_document() -> str:
    return COMPLIANT_DOCUMENT


@pytest.fixture
def non_compliant_document() -> str:
    return NON_COMPLIANT_DOCUMENT


@pytest.fixture
def mock_oracle():
    """Mock TextOracle that answers without API calls."""
    oracle = AsyncMock()
    oracle.summarize_intent.return_value = "Checks that the document includes the requested word."
    oracle.judge_rule.return_value = '{"passed": true, "details": "The rule is satisfied."}'
    return oracle


@pytest.fixture
def engine() -> ComplianceEngine:
    """Heuristic-only engine."""
    return ComplianceEngine(EngineConfig(oracle_enabled=False))


@pytest.fixture
def oracle_engine(mock_oracle) -> ComplianceEngine:
    """Engine wired to the mock oracle."""
    return ComplianceEngine(EngineConfig(oracle_enabled=True), oracle=mock_oracle)


@pytest.fixture(autouse=True)
def _no_provider_keys(monkeypatch):
    """Keep real API keys out of every eval."""
    for var in ("OPENAI_API_KEY", "ANTHROPIC_API_KEY", "GOOGLE_API_KEY", "RULECHECK_ORACLE"):
        monkeypatch.delenv(var, raising=False)
