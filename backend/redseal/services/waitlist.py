from __future__ import annotations

import logging
from typing import Any

from fastapi import HTTPException
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from redseal.models.waitlist import UserType, WaitlistEntry, WaitlistStatus
from redseal.schemas.waitlist import WaitlistCreateRequest, is_valid_email


log = logging.getLogger(__name__)


# Fields stored only for the user types that collect them.
TYPE_SPECIFIC_FIELDS: dict[UserType, tuple[str, ...]] = {
    UserType.student: ("trade", "apprenticeship_year", "is_apprentice", "is_challenging", "challenge_date"),
    UserType.international_worker: (
        "trade",
        "apprenticeship_year",
        "is_apprentice",
        "is_challenging",
        "challenge_date",
        "experience_years",
    ),
    UserType.employer: ("company_name", "industry", "industry_other", "hiring_needs"),
    UserType.immigration_consultant: ("rcic_number",),
    UserType.mentor: ("mentor_trade", "years_experience", "certification_level"),
}

COMMON_FIELDS = ("first_name", "last_name", "phone", "country", "province", "city")


def _strip(value: object) -> str | None:
    s = str(value).strip() if value is not None else ""
    return s or None


class WaitlistService:
    def __init__(self, db: Session):
        self.db = db

    def build_record(self, body: WaitlistCreateRequest) -> dict[str, Any]:
        email = _strip(body.email)
        name = _strip(body.name)
        raw_type = _strip(body.user_type)
        if not email or not name or not raw_type:
            raise HTTPException(status_code=400, detail="Email, name, and user type are required")

        try:
            user_type = UserType(raw_type)
        except ValueError as e:
            raise HTTPException(status_code=400, detail="Invalid user type") from e

        if not is_valid_email(email):
            raise HTTPException(status_code=400, detail="Invalid email format")

        record: dict[str, Any] = {
            "email": email.lower(),
            "name": name,
            "user_type": user_type,
            "status": WaitlistStatus.pending,
        }
        for f in COMMON_FIELDS:
            record[f] = _strip(getattr(body, f))
        for f in TYPE_SPECIFIC_FIELDS.get(user_type, ()):
            v = _strip(getattr(body, f))
            if v is not None:
                record[f] = v
        return record

    def create(self, body: WaitlistCreateRequest) -> WaitlistEntry:
        record = self.build_record(body)
        entry = WaitlistEntry(**record)
        self.db.add(entry)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise HTTPException(status_code=409, detail="This email is already on the waitlist") from e
        self.db.refresh(entry)
        log.info("waitlist signup created id=%s user_type=%s", entry.id, entry.user_type.value)
        return entry

    def find_by_email(self, email: str) -> WaitlistEntry | None:
        e = (email or "").strip().lower()
        if not e:
            return None
        return self.db.scalar(select(WaitlistEntry).where(WaitlistEntry.email == e))


def entry_notification_payload(entry: WaitlistEntry) -> dict[str, Any]:
    return {
        "email": entry.email,
        "name": entry.name,
        "first_name": entry.first_name,
        "last_name": entry.last_name,
        "user_type": entry.user_type.value,
        "trade": entry.trade,
        "country": entry.country,
        "province": entry.province,
        "city": entry.city,
        "phone": entry.phone,
        "company_name": entry.company_name,
        "industry": entry.industry,
        "industry_other": entry.industry_other,
        "hiring_needs": entry.hiring_needs,
        "signup_time": entry.created_at.isoformat() if entry.created_at else None,
    }
