from __future__ import annotations

import logging
from typing import Any

from rq import get_current_job

from redseal.core.config import settings
from redseal.core.queue import get_queue
from redseal.services.email import send_email
from redseal.services.email_templates import render_admin_waitlist_notification, render_waitlist_welcome
from redseal.services.klaviyo import sync_waitlist_profile


log = logging.getLogger(__name__)


def _job_id() -> str | None:
    try:
        job = get_current_job()
    except Exception:
        job = None
    return str(job.id) if job is not None else None


def send_waitlist_welcome_job(*, email: str, name: str | None, user_type: str | None) -> dict:
    subject, html = render_waitlist_welcome(name=name, user_type=user_type)
    message_id = send_email(to=email, subject=subject, html=html, sender=settings.email_from_welcome)
    log.info("welcome email job=%s email=%s", _job_id(), email)
    return {"ok": True, "id": message_id}


def send_admin_waitlist_notification_job(*, data: dict[str, Any]) -> dict:
    subject, html = render_admin_waitlist_notification(data)
    message_id = send_email(to=settings.admin_notification_email, subject=subject, html=html)
    return {"ok": True, "id": message_id}


def sync_klaviyo_job(*, data: dict[str, Any]) -> dict:
    profile_id = sync_waitlist_profile(data)
    return {"ok": True, "profile_id": profile_id}


def enqueue_waitlist_followups(data: dict[str, Any]) -> list[str]:
    """Queue the welcome email, admin notification and CRM sync for a new signup.

    The signup is already stored; queueing problems are logged and swallowed.
    """

    job_ids: list[str] = []
    try:
        q = get_queue()
        jobs = [
            q.enqueue(
                send_waitlist_welcome_job,
                email=data.get("email"),
                name=data.get("name"),
                user_type=data.get("user_type"),
            ),
            q.enqueue(send_admin_waitlist_notification_job, data=data),
            q.enqueue(sync_klaviyo_job, data=data),
        ]
        job_ids = [str(j.id) for j in jobs]
    except Exception:
        log.exception("failed to enqueue waitlist followups email=%s", data.get("email"))
    return job_ids
