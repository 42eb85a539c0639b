"""
Engine configuration.

The engine never reads process state. Environment variables are read once at
the edges (API factory, CLI) via EngineConfig.from_env() and the resulting
value is passed into ComplianceEngine at construction. The preview ceiling is fixed at 3 and has no environment override.

Environment:
  RULECHECK_ORACLE=auto               auto (use oracle if an API key is set), on, off
  RULECHECK_MAX_VALIDATION_RULES=50   rule ceiling for the validation path
"""

import logging
import os
from dataclasses import dataclass

logger = logging.getLogger(__name__)

ORACLE_MODES = ("auto", "on", "off")
ORACLE_KEY_VARS = ("OPENAI_API_KEY", "ANTHROPIC_API_KEY", "GOOGLE_API_KEY")

DEFAULT_MAX_PREVIEW_RULES = 3
DEFAULT_MAX_VALIDATION_RULES = 50
DEFAULT_ORACLE_DOCUMENT_CHARS = 15_000
DEFAULT_REPORT_PREVIEW_CHARS = 2000
DEFAULT_MAX_DOCUMENT_BYTES = 10 * 1024 * 1024
DEFAULT_MAX_FORBIDDEN_BYTES = 1 * 1024 * 1024


@dataclass
class EngineConfig:
    """Process-wide settings for a ComplianceEngine."""

    oracle_enabled: bool = False
    max_preview_rules: int = DEFAULT_MAX_PREVIEW_RULES
    max_validation_rules: int = DEFAULT_MAX_VALIDATION_RULES
    oracle_document_chars: int = DEFAULT_ORACLE_DOCUMENT_CHARS
    report_preview_chars: int = DEFAULT_REPORT_PREVIEW_CHARS
    max_document_bytes: int = DEFAULT_MAX_DOCUMENT_BYTES
    max_forbidden_bytes: int = DEFAULT_MAX_FORBIDDEN_BYTES

    @classmethod
    def from_env(cls) -> "EngineConfig":
        """Build a config from environment variables, falling back to defaults."""
        mode = os.environ.get("RULECHECK_ORACLE", "auto").strip().lower()
        if mode not in ORACLE_MODES:
            logger.warning(f"[Config] Unknown RULECHECK_ORACLE={mode!r}, using 'auto'")
            mode = "auto"

        if mode == "auto":
            oracle_enabled = any(os.environ.get(var) for var in ORACLE_KEY_VARS)
        else:
            oracle_enabled = mode == "on"

        return cls(
            oracle_enabled=oracle_enabled,
            max_validation_rules=_int_from_env(
                "RULECHECK_MAX_VALIDATION_RULES", DEFAULT_MAX_VALIDATION_RULES
            ),
        )


def _int_from_env(name: str, default: int) -> int:
    try:
        value = int(os.environ.get(name, default))
    except ValueError:
        logger.warning(f"[Config] {name} is not an integer, using {default}")
        return default
    return value if value > 0 else default
