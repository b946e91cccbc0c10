import logging

from fastapi import APIRouter, HTTPException
from sqlalchemy import text

from redseal.core.config import settings
from redseal.core.redis_client import get_redis
from redseal.db import session as db_session

log = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


def _check_db() -> None:
    db = db_session.SessionLocal()
    try:
        db.execute(text("SELECT 1"))
    finally:
        db.close()


def _check_redis() -> None:
    get_redis().ping()


# Order matters: the first failing component names the 503 message.
READINESS_CHECKS = (("db", _check_db), ("redis", _check_redis))


@router.get("/health")
def health():
    return {"status": "ok", "env": settings.app_env}


@router.get("/health/live")
def live():
    return {"status": "live"}


@router.get("/health/ready")
def ready():
    checks: dict[str, str] = {}
    for name, check in READINESS_CHECKS:
        try:
            check()
            checks[name] = "ok"
        except Exception as e:
            log.warning("readiness check failed component=%s: %s", name, type(e).__name__)
            checks[name] = "down"

    failed = [name for name, state in checks.items() if state != "ok"]
    if failed:
        raise HTTPException(
            status_code=503,
            detail={"error_code": "not_ready", "error_message": f"{failed[0]} not ready", "checks": checks},
        )
    return {"status": "ready", "checks": checks}
