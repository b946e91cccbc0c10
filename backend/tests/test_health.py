from fastapi.testclient import TestClient

from redseal.core.config import settings
from redseal.main import create_app


def test_health_ok():
    app = create_app()
    client = TestClient(app)

    r = client.get("/health")
    assert r.status_code == 200
    assert r.json().get("status") == "ok"
    assert r.json()["env"] == settings.app_env


def test_health_live():
    app = create_app()
    client = TestClient(app)

    r = client.get("/health/live")
    assert r.status_code == 200
    assert r.json().get("status") == "live"


def test_health_ready_checks_db_and_redis(client):
    r = client.get("/health/ready")
    assert r.status_code == 200
    assert r.json() == {"status": "ready", "checks": {"db": "ok", "redis": "ok"}}


def test_health_ready_reports_redis_down(client, monkeypatch):
    import redseal.routers.health as health_router

    class _Down:
        def ping(self):
            raise ConnectionError("down")

    monkeypatch.setattr(health_router, "get_redis", lambda: _Down())
    r = client.get("/health/ready")
    assert r.status_code == 503
    body = r.json()
    assert body["ok"] is False
    assert body["error_code"] == "not_ready"
    assert body["error_message"] == "redis not ready"
    assert body["checks"] == {"db": "ok", "redis": "down"}


def test_health_ready_names_db_first_when_both_down(client, monkeypatch):
    import redseal.routers.health as health_router

    class _Down:
        def ping(self):
            raise ConnectionError("down")

    def _broken_session():
        raise RuntimeError("no database")

    monkeypatch.setattr(health_router, "get_redis", lambda: _Down())
    monkeypatch.setattr(health_router.db_session, "SessionLocal", _broken_session)
    r = client.get("/health/ready")
    assert r.status_code == 503
    body = r.json()
    assert body["error_message"] == "db not ready"
    assert body["checks"] == {"db": "down", "redis": "down"}


def test_request_id_is_echoed(client):
    r = client.get("/health", headers={"X-Request-ID": "rid-123"})
    assert r.headers["X-Request-ID"] == "rid-123"
    assert r.headers["X-Content-Type-Options"] == "nosniff"
