"""
Input Validators - boundary checks for rule text and uploaded files.

Parse at the boundary: every request is checked here before any rule logic
runs. Failures raise InputError with a message that is safe to show users.
"""

import logging

from ..errors import InputError

logger = logging.getLogger(__name__)

ALLOWED_DOCUMENT_TYPES = ("application/pdf", "text/plain")
FORBIDDEN_LIST_TYPE = "text/plain"
FORBIDDEN_LIST_EXTENSION = ".txt"


def validate_not_empty(value: str | None, message: str = "input cannot be empty") -> str:
    """Validate that a string is not empty or whitespace-only."""
    if not value or not value.strip():
        raise InputError(message)
    return value.strip()


def validate_length(
    value: str,
    field_name: str = "input",
    min_length: int = 0,
    max_length: int = 100_000,
) -> str:
    """Validate string length is within bounds."""
    if len(value) < min_length:
        raise InputError(f"{field_name} must be at least {min_length} characters")
    if len(value) > max_length:
        raise InputError(f"{field_name} must be at most {max_length} characters")
    return value


def validate_list_size(items: list, max_items: int, label: str = "rules") -> list:
    """Reject (never truncate) a list with more than max_items entries."""
    if len(items) > max_items:
        raise InputError(
            f"Limited to {max_items} {label} maximum. You entered {len(items)} {label}. "
            f"Please reduce to {max_items} or fewer."
        )
    return items


def split_rules(rules_text: str | None) -> list[str]:
    """Split newline-separated rule text into trimmed, non-empty rule lines."""
    if not rules_text:
        return []
    return [line.strip() for line in rules_text.split("\n") if line.strip()]


def validate_document_upload(
    filename: str,
    mime_type: str,
    size: int,
    max_bytes: int,
) -> None:
    """Check the document-to-validate against size and MIME limits."""
    if size > max_bytes:
        raise InputError(
            f"Document too large. Maximum size is {max_bytes // (1024 * 1024)}MB."
        )
    if mime_type not in ALLOWED_DOCUMENT_TYPES:
        raise InputError(
            f"Invalid document file type: {mime_type or 'unknown'}. "
            f"Only PDF and text files allowed."
        )
    logger.debug(f"[Validators] Document accepted: {filename} ({mime_type}, {size} bytes)")


def validate_forbidden_upload(
    filename: str,
    mime_type: str,
    size: int,
    max_bytes: int,
) -> None:
    """Check the forbidden-words list: a .txt file of type text/plain under max_bytes."""
    if size > max_bytes:
        raise InputError(
            f"Forbidden words file too large. Maximum size is {max_bytes // (1024 * 1024)}MB."
        )
    if not (filename or "").lower().endswith(FORBIDDEN_LIST_EXTENSION):
        raise InputError(
            "Invalid forbidden words file: incorrect extension (must be .txt)."
        )
    if mime_type != FORBIDDEN_LIST_TYPE:
        raise InputError(
            "Invalid forbidden words file: incorrect MIME type (must be text/plain)."
        )
