"""
Error taxonomy for the rule engine.

Request-scoped errors (abort the whole request):
  InputError           -- empty, oversized, or wrong-type input
  UnsafeContentError   -- rule text rejected by the quality checker
  ConfirmationRequired -- quality warnings the caller has not confirmed

Rule-scoped errors (never abort sibling rules):
  OracleError          -- transport or parse failure from the external oracle

Unrecognized rules and rule conflicts are statuses, not exceptions.
"""


class RuleCheckError(Exception):
    """Base class for all rulecheck errors."""

    pass


class InputError(RuleCheckError, ValueError):
    """Raised when request input fails validation. Contains a user-friendly message."""

    pass


class UnsafeContentError(InputError):
    """Raised when a rule contains script tags, event handlers, or JS URIs."""

    def __init__(self, message: str, rule: str = ""):
        super().__init__(message)
        self.rule = rule


class ConfirmationRequired(InputError):
    """Raised when rules carry quality warnings that need explicit confirmation.

    Attributes:
        warnings: (rule, warning message) pairs, in input order.
    """

    def __init__(self, warnings: list[tuple[str, str]]):
        self.warnings = warnings
        listed = "; ".join(message for _, message in warnings)
        super().__init__(
            f"{len(warnings)} rule(s) need confirmation before processing: {listed}"
        )


class OracleError(RuleCheckError):
    """Raised when the external text oracle cannot be reached or misbehaves."""

    pass
