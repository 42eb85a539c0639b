"""Pydantic models for API request/response contracts."""
from .requests import PreviewRequest
from .responses import (
    ConflictInfo,
    ErrorResponse,
    HealthResponse,
    PreviewResponse,
    RuleFeedback,
    RuleResult,
    ValidationReportResponse,
)
