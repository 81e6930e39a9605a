"""
API request and response models.

Pydantic models for FastAPI endpoint responses and OpenAPI schema generation.
The registration request body is a free-form field mapping:
field validation is done by the domain so that every problem is reported
at once as an alert.
"""

from pydantic import BaseModel, Field


class AlertModel(BaseModel):
    """User-facing message produced while handling a request."""

    severity: str = Field(..., description="danger, warning, info or success")
    message: str


class RegistrationResult(BaseModel):
    """Structured result returned to background (ajaxMode) callers."""

    errors: int
    successes: int
    alerts: list[AlertModel] = Field(default_factory=list)


class HealthResponse(BaseModel):
    """Response model for the health check."""

    status: str
