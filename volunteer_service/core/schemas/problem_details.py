"""RFC 7807 Problem Details schemas for error responses."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ProblemDetail(BaseModel):
    """RFC 7807 Problem Details for HTTP APIs.

    See: https://datatracker.ietf.org/doc/html/rfc7807
    """

    type: str = Field(
        default="about:blank",
        min_length=1,
        max_length=200,
        description="URI reference identifying the problem type",
    )
    title: str = Field(
        min_length=1, max_length=200, description="Short, human-readable summary of the problem"
    )
    status: int = Field(ge=100, le=599, description="HTTP status code")
    detail: str | None = Field(
        default=None,
        max_length=2000,
        description="Human-readable explanation specific to this occurrence",
    )
    instance: str | None = Field(
        default=None,
        max_length=500,
        description="URI reference identifying the specific occurrence",
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "type": "duplicate-registration",
                "title": "Conflict",
                "status": 409,
                "detail": "Phone number already registered!",
                "instance": "http://localhost:8003/api/v1/volunteers",
            }
        },
        str_strip_whitespace=True,
    )


class ValidationErrorItem(BaseModel):
    """One field-level validation failure."""

    field: str = Field(description="Dotted location of the invalid field")
    message: str = Field(description="Validation message")
    type: str = Field(description="Pydantic error type")
    value: Any | None = Field(default=None, description="Rejected input, when available")


class ValidationProblemDetail(ProblemDetail):
    """Problem Details with per-field validation errors."""

    errors: list[ValidationErrorItem] = Field(default_factory=list)
