from __future__ import annotations

import redis
from rq import Queue

from redseal.core.config import settings


def get_queue(name: str | None = None) -> Queue:
    conn = redis.Redis.from_url(settings.redis_url)
    eff = str(name or "").strip() or str(settings.rq_queue_notifications)
    return Queue(name=eff, connection=conn)
