from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.orm import Session

from redseal.core.config import settings
from redseal.core.rate_limit import rate_limit
from redseal.db.session import get_db
from redseal.models.user import User
from redseal.schemas.notifications import (
    AdminOnboardingNotificationRequest,
    AdminSignupNotificationRequest,
    AdminWaitlistNotificationRequest,
    NotificationResponse,
    WelcomeEmailRequest,
)
from redseal.services.email import EmailError, send_email
from redseal.services.email_templates import (
    onboarding_location,
    onboarding_type_label,
    render_admin_onboarding_notification,
    render_admin_signup_notification,
    render_admin_waitlist_notification,
    render_waitlist_welcome,
)
from redseal.services.lookups import LookupService

log = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/emails",
    tags=["emails"],
    dependencies=[rate_limit(key_prefix="emails", limit=20)],
)


def _send(*, to: str, subject: str, html: str, sender: str | None = None) -> str | None:
    try:
        return send_email(to=to, subject=subject, html=html, sender=sender)
    except EmailError as e:
        log.error("email send failed subject=%r: %s", subject, e)
        raise HTTPException(status_code=500, detail="Failed to send email") from e


@router.post("/send-waitlist-welcome", response_model=NotificationResponse)
def send_waitlist_welcome(body: WelcomeEmailRequest):
    if not (body.email or "").strip():
        raise HTTPException(status_code=400, detail="Email is required")
    subject, html = render_waitlist_welcome(name=body.name, user_type=body.user_type)
    message_id = _send(to=body.email.strip(), subject=subject, html=html, sender=settings.email_from_welcome)
    return {"success": True, "id": message_id}


@router.post("/admin-waitlist-notification", response_model=NotificationResponse)
def admin_waitlist_notification(body: AdminWaitlistNotificationRequest):
    subject, html = render_admin_waitlist_notification(body.model_dump())
    message_id = _send(to=settings.admin_notification_email, subject=subject, html=html)
    return {"success": True, "id": message_id}


@router.post("/admin-signup-notification", response_model=NotificationResponse)
def admin_signup_notification(body: AdminSignupNotificationRequest):
    subject, html = render_admin_signup_notification(
        user_id=body.user_id,
        email=body.email,
        first_name=body.first_name,
        last_name=body.last_name,
        signup_time=body.signup_time,
    )
    message_id = _send(to=settings.admin_notification_email, subject=subject, html=html)
    return {"success": True, "id": message_id}


@router.post("/admin-onboarding-notification", response_model=NotificationResponse)
def admin_onboarding_notification(body: AdminOnboardingNotificationRequest, db: Session = Depends(get_db)):
    user = db.scalar(select(User).where(User.id == body.clerk_user_id))
    trade_name = LookupService(db).trade_name(body.trade) or body.trade

    subject, html = render_admin_onboarding_notification(
        user_id=body.clerk_user_id,
        name=(user.full_name if user is not None else None) or "Unknown",
        email=(user.email if user is not None else None) or "Unknown",
        type_label=onboarding_type_label(body.user_type),
        pathway_type=body.pathway_type,
        year_level=body.year_level,
        trade_name=trade_name,
        location=onboarding_location(
            home_country=body.home_country,
            target_province=body.target_province,
            city=body.city,
            province=body.province,
        ),
    )
    message_id = _send(to=settings.admin_notification_email, subject=subject, html=html)
    return {"success": True, "id": message_id}
