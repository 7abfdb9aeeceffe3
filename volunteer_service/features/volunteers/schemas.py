"""Pydantic schemas for the volunteers feature."""

from __future__ import annotations

import re
from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from volunteer_service.features.volunteers.models import VolunteerStatus

PHONE_PATTERN = r"^\+?[0-9][0-9 ()-]{4,30}$"
PHONE_SEPARATORS = re.compile(r"[\s()-]")
MIN_PHONE_DIGITS = 5


def _normalize_phone(v: str) -> str:
    """Drop separators so ``0711 000 111``, ``0711-000-111`` and ``0711000111`` share one key."""
    phone = PHONE_SEPARATORS.sub("", v)
    if len(phone.lstrip("+")) < MIN_PHONE_DIGITS:
        msg = f"phone number needs at least {MIN_PHONE_DIGITS} digits"
        raise ValueError(msg)
    return phone


class VolunteerBase(BaseModel):
    """Shared attributes for volunteer payloads."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Full name",
    )
    phone: str = Field(
        ...,
        min_length=1,
        max_length=32,
        pattern=PHONE_PATTERN,
        description="Contact phone number; one registration per number",
    )
    email: EmailStr | None = Field(
        default=None,
        description="Optional contact email",
    )
    ward: str = Field(
        ...,
        min_length=1,
        max_length=120,
        description="Locality (ward) the volunteer serves",
    )
    interest: str | None = Field(
        default=None,
        max_length=255,
        description="Optional area of interest",
    )

    @field_validator("phone")
    @classmethod
    def normalize_phone(cls, v: str) -> str:
        return _normalize_phone(v)

    @field_validator("interest")
    @classmethod
    def blank_interest_is_none(cls, v: str | None) -> str | None:
        """Treat an empty interest the same as an omitted one."""
        return v or None


class VolunteerCreate(VolunteerBase):
    """Payload used when registering a volunteer.

    ``status`` is accepted for compatibility with older clients but ignored:
    every registration starts ACTIVE.
    """

    status: VolunteerStatus | None = Field(
        default=None,
        description="Ignored; registrations always start ACTIVE",
    )


class VolunteerUpdate(BaseModel):
    """Partial profile update; only fields present in the request are changed."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str | None = Field(default=None, min_length=1, max_length=255)
    phone: str | None = Field(default=None, min_length=1, max_length=32, pattern=PHONE_PATTERN)
    email: EmailStr | None = None
    ward: str | None = Field(default=None, min_length=1, max_length=120)
    interest: str | None = Field(default=None, max_length=255)

    @field_validator("phone")
    @classmethod
    def normalize_phone(cls, v: str | None) -> str | None:
        if v is not None:
            return _normalize_phone(v)
        return v

    @field_validator("interest")
    @classmethod
    def blank_interest_is_none(cls, v: str | None) -> str | None:
        return v or None

    @field_validator("name", "ward")
    @classmethod
    def reject_null(cls, v: str | None) -> str | None:
        """Required columns can be changed but not cleared."""
        if v is None:
            msg = "field cannot be null"
            raise ValueError(msg)
        return v


class VolunteerResponse(BaseModel):
    """Representation returned from the API."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    phone: str
    email: str | None
    ward: str
    interest: str | None
    status: VolunteerStatus
    created_at: datetime
    updated_at: datetime


class VolunteerListResponse(BaseModel):
    """One page of volunteers."""

    items: list[VolunteerResponse]
    total: int = Field(description="Total matching volunteers across all pages")
    limit: int
    offset: int
    has_next: bool


class VolunteerCountResponse(BaseModel):
    """Volunteer count, optionally scoped to a ward."""

    count: int = Field(ge=0)
    ward: str | None = None
    status: VolunteerStatus | None = None
