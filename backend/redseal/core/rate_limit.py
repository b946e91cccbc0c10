from __future__ import annotations

from dataclasses import dataclass
import logging

from fastapi import Depends, HTTPException, Request

from redseal.core.config import settings
from redseal.core.redis_client import get_redis


log = logging.getLogger(__name__)


@dataclass(frozen=True)
class RateLimit:
    key: str
    limit: int
    window_seconds: int
    current: int = 0


def client_ip(request: Request) -> str:
    if bool(getattr(settings, "trust_proxy_headers", False)):
        xri = str(request.headers.get("x-real-ip") or "").strip()
        if xri:
            return xri
        xff = request.headers.get("x-forwarded-for")
        if xff:
            ip = xff.split(",")[0].strip()
            if ip:
                return ip
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


def bucket_key(key_prefix: str, ip: str) -> str:
    # One bucket per route name and caller, so path parameters never split it.
    return f"rl:{key_prefix}:{ip}"


def count_hit(r, key: str, window_seconds: int) -> int:
    """Increments a fixed-window counter, starting the window on the first hit."""
    current = int(r.incr(key))
    if current == 1:
        r.expire(key, int(window_seconds))
    return current


def retry_after_seconds(r, key: str, window_seconds: int) -> int:
    try:
        ttl = r.ttl(key)
    except Exception:
        ttl = None
    return int(ttl) if ttl and ttl > 0 else int(window_seconds)


def rate_limit(*, key_prefix: str, limit: int, window_seconds: int | None = None):
    """Per-IP fixed window for one route bucket.

    The window comes from `RATE_LIMIT_WINDOW_SECONDS` unless the route passes
    its own. Redis errors let the request through.
    """

    async def _dep(request: Request) -> RateLimit:
        window = max(1, int(window_seconds if window_seconds is not None else settings.rate_limit_window_seconds))
        key = bucket_key(key_prefix, client_ip(request))
        if not settings.rate_limit_enabled:
            return RateLimit(key=key, limit=int(limit), window_seconds=window)

        r = get_redis()
        try:
            current = count_hit(r, key, window)
        except Exception as e:
            log.warning("rate limit check skipped key=%s: %s", key, type(e).__name__)
            return RateLimit(key=key, limit=int(limit), window_seconds=window)

        if current > int(limit):
            raise HTTPException(
                status_code=429,
                detail="rate limit exceeded",
                headers={"Retry-After": str(retry_after_seconds(r, key, window))},
            )

        return RateLimit(key=key, limit=int(limit), window_seconds=window, current=current)

    return Depends(_dep)
