"""
Document validation API.

  POST /api/v1/validate -- Upload a PDF or text document (plus optional
                           forbidden-words list and custom rules), get a
                           per-rule pass/fail report

Security:
  - Upload size and MIME type checked before extraction
  - HTML/JS-looking documents rejected
  - Unsafe rule text rejected before any evaluation
  - Rate limiting
"""

import logging

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile

from ...errors import InputError
from ...security.validators import split_rules
from ..errors import to_http_exception
from ..middleware.rate_limit import check_rate_limit
from ..models.responses import ValidationReportResponse

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post(
    "/validate",
    response_model=ValidationReportResponse,
    dependencies=[Depends(check_rate_limit)],
    responses={400: {"description": "Invalid upload or rules"}, 409: {"description": "Warnings need confirmation"}},
)
async def validate_document(
    request: Request,
    file: UploadFile = File(..., description="PDF or plain-text document"),
    forbidden_words_file: UploadFile | None = File(
        None, description="Optional .txt list of forbidden words, one per line"
    ),
    custom_rules: str = Form("", description="Optional newline-separated rules"),
    confirm_warnings: bool = Form(False),
) -> ValidationReportResponse:
    """Validate an uploaded document against custom or default rules."""
    engine = request.app.state.engine
    try:
        data = await file.read()
        document_text = engine.read_document(
            data, file.content_type or "", file.filename or ""
        )

        forbidden_words = None
        if forbidden_words_file is not None and forbidden_words_file.filename:
            forbidden_words = engine.read_forbidden_words(
                await forbidden_words_file.read(),
                forbidden_words_file.content_type or "",
                forbidden_words_file.filename,
            )
            logger.info(f"[API] Loaded {len(forbidden_words)} forbidden word(s)")

        report = await engine.validate(
            document_text,
            rules=split_rules(custom_rules),
            forbidden_words=forbidden_words,
            confirm_warnings=confirm_warnings,
        )
    except InputError as e:
        raise to_http_exception(e) from e

    failed = sum(1 for r in report.results if not r.passed)
    logger.info(
        f"[API] Validated {file.filename}: {len(report.results) - failed} passed, {failed} failed"
    )
    return ValidationReportResponse.from_domain(report)
