from __future__ import annotations

from datetime import datetime
import re

from pydantic import BaseModel, ConfigDict, Field


EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_RE.match(email or ""))


class WaitlistCreateRequest(BaseModel):
    """Signup form payload.

    Everything is optional at the schema level; required fields and the allowed
    user types are checked by `WaitlistService` so the API answers 400 with a
    readable message rather than a 422 validation dump.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    email: str | None = None
    name: str | None = None
    first_name: str | None = Field(default=None, alias="firstName")
    last_name: str | None = Field(default=None, alias="lastName")
    phone: str | None = None
    country: str | None = None
    province: str | None = None
    city: str | None = None
    user_type: str | None = None

    trade: str | None = None
    apprenticeship_year: str | None = None
    is_apprentice: str | None = None
    is_challenging: str | None = None
    challenge_date: str | None = None

    company_name: str | None = None
    industry: str | None = None
    industry_other: str | None = None
    hiring_needs: str | None = None

    rcic_number: str | None = None
    experience_years: str | None = None

    mentor_trade: str | None = None
    years_experience: str | None = None
    certification_level: str | None = None


class WaitlistCreated(BaseModel):
    id: str
    email: str
    user_type: str


class WaitlistCreateResponse(BaseModel):
    success: bool
    message: str
    data: WaitlistCreated


class WaitlistExistsResponse(BaseModel):
    exists: bool
    user_type: str | None = None
    joined_at: datetime | None = None
