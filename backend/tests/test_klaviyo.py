import httpx
import pytest

import redseal.routers.integrations as integrations_router
import redseal.services.klaviyo as klaviyo
import redseal.services.notification_jobs as notification_jobs
from redseal.core.config import settings
from redseal.services.klaviyo import KlaviyoError, KlaviyoNotConfigured, sync_waitlist_profile


class _KlaviyoClient:
    responses: dict[str, httpx.Response | Exception] = {}
    calls: list[dict] = []

    def __init__(self, *args, **kwargs):
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        return False

    def post(self, url, json, headers):
        _KlaviyoClient.calls.append({"url": url, "json": json, "headers": headers})
        for suffix, resp in _KlaviyoClient.responses.items():
            if url.endswith(suffix):
                if isinstance(resp, Exception):
                    raise resp
                return resp
        return httpx.Response(202)


@pytest.fixture()
def fake_klaviyo(monkeypatch):
    monkeypatch.setattr(settings, "klaviyo_private_api_key", "pk_test")
    monkeypatch.setattr(settings, "klaviyo_api_url", "https://klaviyo.test/api")
    monkeypatch.setattr(settings, "klaviyo_waitlist_list_id", "LIST1")
    monkeypatch.setattr(klaviyo.httpx, "Client", _KlaviyoClient)
    _KlaviyoClient.responses = {"/profiles/": httpx.Response(201, json={"data": {"id": "PROF1"}})}
    _KlaviyoClient.calls = []
    return _KlaviyoClient


_SIGNUP = {
    "email": "jo@example.com",
    "first_name": "Jo",
    "last_name": "Welder",
    "user_type": "student",
    "trade": "Welder",
    "country": "Canada",
}


def test_sync_creates_profile_list_membership_and_event(fake_klaviyo):
    assert sync_waitlist_profile(_SIGNUP) == "PROF1"

    urls = [c["url"] for c in fake_klaviyo.calls]
    assert urls == [
        "https://klaviyo.test/api/profiles/",
        "https://klaviyo.test/api/lists/LIST1/relationships/profiles/",
        "https://klaviyo.test/api/events/",
    ]
    profile = fake_klaviyo.calls[0]["json"]["data"]["attributes"]
    assert profile["email"] == "jo@example.com"
    assert profile["properties"]["trade"] == "Welder"
    assert profile["properties"]["waitlist_signup_date"]
    assert fake_klaviyo.calls[0]["headers"]["Authorization"] == "Klaviyo-API-Key pk_test"

    event = fake_klaviyo.calls[2]["json"]["data"]["attributes"]
    assert event["metric"]["data"]["attributes"]["name"] == "Joined Waitlist"
    assert event["profile"]["data"]["id"] == "PROF1"


def test_sync_skips_list_without_list_id(fake_klaviyo, monkeypatch):
    monkeypatch.setattr(settings, "klaviyo_waitlist_list_id", None)
    sync_waitlist_profile(_SIGNUP)
    assert not any("/lists/" in c["url"] for c in fake_klaviyo.calls)


def test_sync_list_and_event_failures_are_not_fatal(fake_klaviyo):
    fake_klaviyo.responses["/relationships/profiles/"] = httpx.Response(500)
    fake_klaviyo.responses["/events/"] = httpx.ConnectError("refused")
    assert sync_waitlist_profile(_SIGNUP) == "PROF1"


def test_sync_profile_failure_is_fatal(fake_klaviyo):
    fake_klaviyo.responses["/profiles/"] = httpx.Response(400, text="bad email")
    with pytest.raises(KlaviyoError) as ei:
        sync_waitlist_profile(_SIGNUP)
    assert ei.value.status_code == 400
    assert ei.value.details == "bad email"
    assert len(fake_klaviyo.calls) == 1


def test_sync_requires_email(fake_klaviyo):
    with pytest.raises(KlaviyoError) as ei:
        sync_waitlist_profile({"first_name": "Jo"})
    assert ei.value.status_code == 400


def test_sync_requires_key(monkeypatch):
    monkeypatch.setattr(settings, "klaviyo_private_api_key", "")
    with pytest.raises(KlaviyoNotConfigured):
        sync_waitlist_profile(_SIGNUP)


def test_klaviyo_sync_endpoint(client, monkeypatch):
    monkeypatch.setattr(integrations_router, "sync_waitlist_profile", lambda data: "PROF9")
    r = client.post("/api/integrations/klaviyo-sync", json=_SIGNUP)
    assert r.status_code == 200
    assert r.json() == {"success": True, "profile_id": "PROF9"}


def test_klaviyo_sync_endpoint_error_envelope(client, monkeypatch):
    def _fail(data):
        raise KlaviyoError("Failed to sync to Klaviyo", status_code=400, details="bad email")

    monkeypatch.setattr(integrations_router, "sync_waitlist_profile", _fail)
    r = client.post("/api/integrations/klaviyo-sync", json=_SIGNUP)
    assert r.status_code == 400
    body = r.json()
    assert body["error_code"] == "klaviyo_error"
    assert body["error_message"] == "Failed to sync to Klaviyo"
    assert body["details"] == "bad email"


def test_notification_jobs_send_and_sync(monkeypatch):
    outbox = []
    monkeypatch.setattr(
        notification_jobs,
        "send_email",
        lambda *, to, subject, html, sender=None: outbox.append((to, subject, sender)) or "msg",
    )
    monkeypatch.setattr(notification_jobs, "sync_waitlist_profile", lambda data: "PROF2")

    assert notification_jobs.send_waitlist_welcome_job(email="jo@example.com", name="Jo", user_type="student") == {
        "ok": True,
        "id": "msg",
    }
    assert notification_jobs.send_admin_waitlist_notification_job(data={**_SIGNUP, "name": "Jo Welder"})["ok"] is True
    assert notification_jobs.sync_klaviyo_job(data=_SIGNUP) == {"ok": True, "profile_id": "PROF2"}

    assert outbox[0] == ("jo@example.com", "You're on the Red Seal Hub Waitlist! 🎉", settings.email_from_welcome)
    assert outbox[1][0] == settings.admin_notification_email
    assert outbox[1][1] == "New Waitlist Signup: Jo Welder (Student/Apprentice)"


def test_enqueue_waitlist_followups(mem_queue):
    ids = notification_jobs.enqueue_waitlist_followups(_SIGNUP)
    assert len(ids) == 3
    assert mem_queue.jobs[1].kwargs == {"data": _SIGNUP}
