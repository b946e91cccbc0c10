from __future__ import annotations

import logging

import httpx

from redseal.core.config import settings


log = logging.getLogger(__name__)


class EmailError(RuntimeError):
    pass


def send_email(*, to: str | list[str], subject: str, html: str, sender: str | None = None) -> str | None:
    """Send one message through the Resend HTTP API and return its id."""

    token = (settings.resend_api_key or "").strip()
    if not token:
        raise EmailError("RESEND_API_KEY not configured")

    payload = {
        "from": sender or settings.email_from_notifications,
        "to": to if isinstance(to, list) else [to],
        "subject": subject,
        "html": html,
    }
    url = str(settings.resend_base_url or "").rstrip("/") + "/emails"

    try:
        with httpx.Client(timeout=float(settings.outbound_timeout_seconds)) as client:
            r = client.post(url, json=payload, headers={"Authorization": f"Bearer {token}"})
            r.raise_for_status()
            data = r.json()
    except httpx.HTTPStatusError as e:
        body = (e.response.text or "")[:300]
        raise EmailError(f"resend rejected message: HTTP_{e.response.status_code} {body}") from e
    except httpx.HTTPError as e:
        raise EmailError(f"resend unreachable: {type(e).__name__}") from e

    message_id = (data or {}).get("id") if isinstance(data, dict) else None
    log.info("email sent subject=%r id=%s", subject, message_id)
    return str(message_id) if message_id else None
