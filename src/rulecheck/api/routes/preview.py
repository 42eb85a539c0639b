"""
Rule preview API -- interpret rules before uploading a document.

  POST /api/v1/rules/preview -- Interpret up to 3 rules, report conflicts

Security:
  - Rule count and length validated at the boundary
  - Unsafe rule text rejected before any interpretation
  - Rate limiting
"""

import logging

from fastapi import APIRouter, Depends, Request

from ...errors import InputError
from ..errors import to_http_exception
from ..middleware.rate_limit import check_rate_limit
from ..models.requests import PreviewRequest
from ..models.responses import PreviewResponse

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post(
    "/rules/preview",
    response_model=PreviewResponse,
    dependencies=[Depends(check_rate_limit)],
    responses={400: {"description": "Invalid or unsafe rules"}, 409: {"description": "Warnings need confirmation"}},
)
async def preview_rules(body: PreviewRequest, request: Request) -> PreviewResponse:
    """Interpret each rule and flag contradictory pairs."""
    engine = request.app.state.engine
    try:
        result = await engine.preview(
            body.custom_rules_text, confirm_warnings=body.confirm_warnings
        )
    except InputError as e:
        raise to_http_exception(e) from e

    logger.info(f"[API] Preview returned {len(result.feedback)} interpretation(s)")
    return PreviewResponse.from_domain(result)
