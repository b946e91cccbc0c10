import uuid

from sqlalchemy import select

from redseal.models.waitlist import WaitlistEntry
from redseal.services import notification_jobs


def _email() -> str:
    return f"apprentice_{uuid.uuid4().hex[:8]}@example.com"


def _student(email: str, **extra) -> dict:
    return {
        "email": email,
        "name": "Jordan Lee",
        "firstName": "Jordan",
        "lastName": "Lee",
        "country": "Canada",
        "province": "Alberta",
        "user_type": "student",
        "trade": "Electrician",
        "is_apprentice": "yes",
        "apprenticeship_year": "2",
        **extra,
    }


def test_join_waitlist_created(client, db, mem_queue):
    email = _email()
    r = client.post("/api/waitlist", json=_student(email.upper()))
    assert r.status_code == 201
    body = r.json()
    assert body["success"] is True
    assert body["message"] == "Successfully joined the waitlist"
    assert body["data"]["email"] == email
    assert body["data"]["user_type"] == "student"

    entry = db.scalar(select(WaitlistEntry).where(WaitlistEntry.email == email))
    assert entry is not None
    assert entry.first_name == "Jordan"
    assert entry.trade == "Electrician"
    assert entry.apprenticeship_year == "2"

    funcs = [j.func for j in mem_queue.jobs]
    assert funcs == [
        notification_jobs.send_waitlist_welcome_job,
        notification_jobs.send_admin_waitlist_notification_job,
        notification_jobs.sync_klaviyo_job,
    ]
    assert mem_queue.jobs[0].kwargs["email"] == email


def test_join_waitlist_drops_fields_of_other_user_types(client, db):
    email = _email()
    r = client.post("/api/waitlist", json=_student(email, company_name="Acme Corp", rcic_number="R123"))
    assert r.status_code == 201

    entry = db.scalar(select(WaitlistEntry).where(WaitlistEntry.email == email))
    assert entry.company_name is None
    assert entry.rcic_number is None


def test_join_waitlist_employer_fields(client, db):
    email = _email()
    r = client.post(
        "/api/waitlist",
        json={
            "email": email,
            "name": "Pat Boss",
            "user_type": "employer",
            "company_name": "Northern Builders",
            "industry": "construction",
            "hiring_needs": "apprentices,journeypersons",
            "trade": "Plumber",
        },
    )
    assert r.status_code == 201
    entry = db.scalar(select(WaitlistEntry).where(WaitlistEntry.email == email))
    assert entry.company_name == "Northern Builders"
    assert entry.trade is None


def test_join_waitlist_missing_required_fields(client):
    r = client.post("/api/waitlist", json={"email": _email(), "user_type": "student"})
    assert r.status_code == 400
    body = r.json()
    assert body["ok"] is False
    assert body["error_code"] == "bad_request"
    assert body["error_message"] == "Email, name, and user type are required"


def test_join_waitlist_invalid_user_type(client):
    r = client.post("/api/waitlist", json={"email": _email(), "name": "X", "user_type": "astronaut"})
    assert r.status_code == 400
    assert r.json()["error_message"] == "Invalid user type"


def test_join_waitlist_invalid_email(client):
    r = client.post("/api/waitlist", json={"email": "not-an-email", "name": "X", "user_type": "mentor"})
    assert r.status_code == 400
    assert r.json()["error_message"] == "Invalid email format"


def test_join_waitlist_duplicate_email(client, mem_queue):
    email = _email()
    assert client.post("/api/waitlist", json=_student(email)).status_code == 201
    mem_queue.jobs.clear()

    r = client.post("/api/waitlist", json=_student(email))
    assert r.status_code == 409
    assert r.json()["error_code"] == "conflict"
    assert r.json()["error_message"] == "This email is already on the waitlist"
    assert mem_queue.jobs == []


def test_join_waitlist_survives_queue_failure(client, monkeypatch):
    def _broken(name=None):
        raise ConnectionError("redis down")

    monkeypatch.setattr(notification_jobs, "get_queue", _broken)
    r = client.post("/api/waitlist", json=_student(_email()))
    assert r.status_code == 201


def test_check_waitlist(client):
    email = _email()
    client.post("/api/waitlist", json=_student(email))

    r = client.get("/api/waitlist", params={"email": email.upper()})
    assert r.status_code == 200
    body = r.json()
    assert body["exists"] is True
    assert body["user_type"] == "student"
    assert body["joined_at"]

    r = client.get("/api/waitlist", params={"email": _email()})
    assert r.status_code == 200
    assert r.json()["exists"] is False


def test_check_waitlist_requires_email(client):
    r = client.get("/api/waitlist")
    assert r.status_code == 400
    assert r.json()["error_message"] == "Email parameter required"


def test_join_waitlist_rate_limited(client):
    for _ in range(10):
        client.post("/api/waitlist", json={})
    r = client.post("/api/waitlist", json={})
    assert r.status_code == 429
    assert r.json()["error_code"] == "rate_limited"
    assert int(r.headers["Retry-After"]) > 0
