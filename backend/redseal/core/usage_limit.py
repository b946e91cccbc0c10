from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from fastapi import Depends, HTTPException, Request

from redseal.core.config import settings
from redseal.core.rate_limit import client_ip, count_hit
from redseal.core.redis_client import get_redis
from redseal.schemas.demo import LIMIT_EXCEEDED


@dataclass(frozen=True)
class DemoUsage:
    key: str
    current: int
    limit: int


def usage_key(*, kind: str, ip: str) -> str:
    return f"demo_usage:{kind}:{ip}"


def demo_usage_gate(*, kind: str, limit: Callable[[], int], message: str, suggested_plan: str = "basic"):
    """Counts one demo use per request and answers 402 once the allowance is spent.

    Unlike `rate_limit` this is a product quota: the client treats 402 as a
    signup call-to-action rather than a retryable error.
    """

    async def _dep(request: Request) -> DemoUsage:
        allowed = max(0, int(limit()))
        window = max(1, int(settings.demo_usage_window_seconds))
        key = usage_key(kind=kind, ip=client_ip(request))

        r = get_redis()
        try:
            current = count_hit(r, key, window)
        except Exception:
            return DemoUsage(key=key, current=0, limit=allowed)

        if current > allowed:
            raise HTTPException(
                status_code=402,
                detail={
                    "error_code": LIMIT_EXCEEDED,
                    "error_message": message,
                    "current_usage": allowed,
                    "limit": allowed,
                    "suggested_plan": suggested_plan,
                },
            )
        return DemoUsage(key=key, current=current, limit=allowed)

    return Depends(_dep)
