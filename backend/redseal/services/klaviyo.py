from __future__ import annotations

from datetime import datetime, timezone
import logging
from typing import Any

import httpx

from redseal.core.config import settings
from redseal.services.email_templates import hiring_needs_display, industry_display


log = logging.getLogger(__name__)

JOINED_WAITLIST_METRIC = "Joined Waitlist"


class KlaviyoError(RuntimeError):
    def __init__(self, message: str, *, status_code: int = 500, details: str | None = None):
        super().__init__(message)
        self.status_code = int(status_code)
        self.details = details


class KlaviyoNotConfigured(KlaviyoError):
    pass


def _headers() -> dict[str, str]:
    key = (settings.klaviyo_private_api_key or "").strip()
    if not key:
        raise KlaviyoNotConfigured("Klaviyo not configured")
    return {
        "Authorization": f"Klaviyo-API-Key {key}",
        "Content-Type": "application/json",
        "revision": str(settings.klaviyo_revision),
    }


def _url(path: str) -> str:
    return str(settings.klaviyo_api_url or "").rstrip("/") + path


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def waitlist_properties(data: dict[str, Any]) -> dict[str, str]:
    return {
        "user_type": str(data.get("user_type") or ""),
        "trade": str(data.get("trade") or ""),
        "country": str(data.get("country") or ""),
        "province": str(data.get("province") or ""),
        "city": str(data.get("city") or ""),
        "company_name": str(data.get("company_name") or ""),
        "industry": industry_display(data.get("industry"), data.get("industry_other")),
        "hiring_needs": hiring_needs_display(data.get("hiring_needs")),
    }


def profile_payload(data: dict[str, Any]) -> dict[str, Any]:
    props = waitlist_properties(data)
    props["waitlist_signup_date"] = _now_iso()
    return {
        "data": {
            "type": "profile",
            "attributes": {
                "email": data.get("email"),
                "first_name": data.get("first_name") or "",
                "last_name": data.get("last_name") or "",
                "phone_number": data.get("phone") or "",
                "properties": props,
            },
        }
    }


def event_payload(profile_id: str, data: dict[str, Any]) -> dict[str, Any]:
    return {
        "data": {
            "type": "event",
            "attributes": {
                "profile": {"data": {"type": "profile", "id": profile_id}},
                "metric": {"data": {"type": "metric", "attributes": {"name": JOINED_WAITLIST_METRIC}}},
                "properties": waitlist_properties(data),
                "time": _now_iso(),
            },
        }
    }


def sync_waitlist_profile(data: dict[str, Any]) -> str | None:
    """Upsert the profile, add it to the waitlist list and record the signup event.

    Only the profile upsert is fatal; list membership and the event are logged on failure.
    Returns the Klaviyo profile id.
    """

    email = str(data.get("email") or "").strip()
    if not email:
        raise KlaviyoError("Email is required", status_code=400)

    headers = _headers()
    with httpx.Client(timeout=float(settings.outbound_timeout_seconds)) as client:
        try:
            r = client.post(_url("/profiles/"), json=profile_payload(data), headers=headers)
        except httpx.HTTPError as e:
            raise KlaviyoError(f"Failed to sync to Klaviyo: {type(e).__name__}") from e
        if r.status_code >= 400:
            log.error("klaviyo profile upsert failed status=%s body=%s", r.status_code, r.text[:300])
            raise KlaviyoError("Failed to sync to Klaviyo", status_code=r.status_code, details=r.text)

        try:
            profile_id = ((r.json() or {}).get("data") or {}).get("id")
        except ValueError:
            profile_id = None
        log.info("klaviyo profile synced email=%s", email)

        list_id = (settings.klaviyo_waitlist_list_id or "").strip()
        if list_id and profile_id:
            try:
                lr = client.post(
                    _url(f"/lists/{list_id}/relationships/profiles/"),
                    json={"data": [{"type": "profile", "id": profile_id}]},
                    headers=headers,
                )
                if lr.status_code >= 400:
                    log.warning("klaviyo list add failed status=%s", lr.status_code)
            except httpx.HTTPError:
                log.exception("klaviyo list add failed")

        if profile_id:
            try:
                er = client.post(_url("/events/"), json=event_payload(str(profile_id), data), headers=headers)
                if er.status_code >= 400:
                    log.warning("klaviyo event failed status=%s", er.status_code)
            except httpx.HTTPError:
                log.exception("klaviyo event failed")

    return str(profile_id) if profile_id else None
