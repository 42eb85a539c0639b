"""Mapping from engine errors to HTTP errors."""

import logging

from fastapi import HTTPException

from ..errors import ConfirmationRequired, InputError

logger = logging.getLogger(__name__)


def to_http_exception(error: InputError) -> HTTPException:
    """400 for bad input and unsafe rules, 409 when warnings need confirmation."""
    if isinstance(error, ConfirmationRequired):
        return HTTPException(
            status_code=409,
            detail={
                "message": str(error),
                "warnings": [
                    {"rule": rule, "warning": warning} for rule, warning in error.warnings
                ],
            },
        )
    logger.info(f"[API] Rejected request: {error}")
    return HTTPException(status_code=400, detail=str(error))
