"""
Pydantic request models -- the API contract for JSON endpoints.

  POST /api/v1/rules/preview -> PreviewRequest

The validate endpoint takes multipart form data (a file upload), so its
fields are declared on the route itself.
"""

from pydantic import BaseModel, Field


class PreviewRequest(BaseModel):
    """Interpret up to three newline-separated rules without a document."""

    custom_rules_text: str = Field(
        "", description="Newline-separated rules (at most 3 non-empty lines)"
    )
    confirm_warnings: bool = Field(
        False, description="Accept rules flagged for unusual capitalization"
    )
