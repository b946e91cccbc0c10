import sys
from pathlib import Path
import time
import uuid

import pytest
from fastapi.testclient import TestClient

backend_dir = Path(__file__).resolve().parents[1]
if str(backend_dir) not in sys.path:
    sys.path.insert(0, str(backend_dir))

from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from redseal.db.base import Base
from redseal.db import session as session_module
from redseal.main import create_app

# Import models so that they are registered in Base.metadata before create_all.
from redseal.models.location import Country, Region  # noqa: F401
from redseal.models.trade import TradeSpecialization  # noqa: F401
from redseal.models.user import User  # noqa: F401
from redseal.models.waitlist import WaitlistEntry  # noqa: F401


class _MemoryRedis:
    def __init__(self):
        self._data: dict[str, tuple[str, float | None]] = {}

    def ping(self):
        return True

    def flushall(self):
        self._data.clear()
        return True

    def _now(self) -> float:
        return time.time()

    def _get_entry(self, key: str):
        v = self._data.get(key)
        if not v:
            return None
        value, exp = v
        if exp is not None and exp <= self._now():
            self._data.pop(key, None)
            return None
        return value, exp

    def get(self, key: str):
        entry = self._get_entry(key)
        return entry[0] if entry else None

    def set(self, key: str, value: str, ex: int | None = None):
        exp = (self._now() + int(ex)) if ex else None
        self._data[key] = (value, exp)
        return True

    def delete(self, key: str):
        return 1 if self._data.pop(key, None) is not None else 0

    def incr(self, key: str):
        cur = self.get(key)
        n = int(cur or 0) + 1
        _, exp = self._data.get(key, ("", None))
        self._data[key] = (str(n), exp)
        return n

    def expire(self, key: str, seconds: int):
        entry = self._get_entry(key)
        if not entry:
            return False
        value, _ = entry
        self._data[key] = (value, self._now() + int(seconds))
        return True

    def ttl(self, key: str):
        entry = self._get_entry(key)
        if not entry:
            return -2
        _, exp = entry
        if exp is None:
            return -1
        return max(0, int(exp - self._now()))


class _Job:
    def __init__(self, func, kwargs):
        self.id = uuid.uuid4().hex
        self.func = func
        self.kwargs = kwargs


class _MemoryQueue:
    def __init__(self):
        self.jobs: list[_Job] = []

    def enqueue(self, func, *args, **kwargs):
        job = _Job(func, kwargs)
        self.jobs.append(job)
        return job


# Configure test DB (SQLite in-memory) at import time so all tests importing
# redseal.db.session.SessionLocal will get the patched version.
_engine = create_engine(
    "sqlite+pysqlite:///:memory:",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
Base.metadata.create_all(bind=_engine)
session_module.engine = _engine
session_module.SessionLocal = session_module.sessionmaker(autocommit=False, autoflush=False, bind=_engine)


def _seed_reference_data() -> None:
    from sqlalchemy import select

    with session_module.SessionLocal() as db:
        if db.scalar(select(Country).limit(1)) is not None:
            return

        db.add_all(
            [
                Country(code="CA", code_alpha3="CAN", name_en="Canada", region_label="Province/Territory", sort_order=1),
                Country(code="US", code_alpha3="USA", name_en="United States", region_label="State", sort_order=2),
                Country(code="ZZ", name_en="Nowhere", sort_order=99, is_active=False),
            ]
        )
        db.flush()
        db.add_all(
            [
                Region(country_code="CA", code="AB", name_en="Alberta", type="province", sort_order=1),
                Region(country_code="CA", code="BC", name_en="British Columbia", type="province", sort_order=2),
                Region(country_code="CA", code="YT", name_en="Yukon", type="territory", sort_order=3, is_active=False),
                Region(country_code="US", code="WA", name_en="Washington", type="state", sort_order=1),
            ]
        )
        db.add_all(
            [
                TradeSpecialization(code="electrician", name_en="Electrician", sector="Construction"),
                TradeSpecialization(code="plumber", name_en="Plumber", sector="Construction"),
                TradeSpecialization(code="millwright", name_en="Millwright", sector="Industrial"),
                TradeSpecialization(code="heavy_equipment_technician", name_en="Heavy Equipment Technician", sector="Motive Power"),
                TradeSpecialization(code="cook", name_en="Cook", sector="Service"),
                TradeSpecialization(code="drone_pilot", name_en="Drone Pilot", sector=None),
                TradeSpecialization(code="retired_trade", name_en="Retired Trade", sector="Service", is_active=False),
            ]
        )
        db.add(User(id="user_abc123", email="apprentice@example.com", full_name="Sam Apprentice"))
        db.commit()


_seed_reference_data()


# Stub Redis and the RQ queue at import time (rate limiting, demo quotas, quiz sessions, followup jobs).
_mem_redis = _MemoryRedis()
_mem_queue = _MemoryQueue()

import redseal.core.redis_client as redis_client_module
redis_client_module.get_redis = lambda: _mem_redis

import redseal.core.rate_limit as rate_limit_module
rate_limit_module.get_redis = lambda: _mem_redis

import redseal.core.usage_limit as usage_limit_module
usage_limit_module.get_redis = lambda: _mem_redis

import redseal.routers.inline_quiz as inline_quiz_router_module
inline_quiz_router_module.get_redis = lambda: _mem_redis

import redseal.routers.health as health_router_module
health_router_module.get_redis = lambda: _mem_redis

import redseal.services.notification_jobs as notification_jobs_module
notification_jobs_module.get_queue = lambda name=None: _mem_queue


@pytest.fixture(autouse=True)
def _reset_counters():
    # rate limit and demo usage counters are per IP, and every test shares one
    _mem_redis.flushall()
    _mem_queue.jobs.clear()
    yield


@pytest.fixture(scope="session")
def client():
    app = create_app()

    # Ensure app dependencies use our session factory.
    def _get_db_override():
        db = session_module.SessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[session_module.get_db] = _get_db_override
    return TestClient(app)


@pytest.fixture()
def db():
    with session_module.SessionLocal() as session:
        yield session


@pytest.fixture()
def mem_redis():
    return _mem_redis


@pytest.fixture()
def mem_queue():
    return _mem_queue


def make_question(i: int, correct: str = "A", *, explanation: str | None = "because") -> dict:
    return {
        "id": f"q-{i}",
        "question_text": f"Question number {i} about hydraulics?",
        "choice_a": f"alpha {i}",
        "choice_b": f"bravo {i}",
        "choice_c": f"charlie {i}",
        "choice_d": f"delta {i}",
        "correct_answer": correct,
        "explanation": explanation,
    }
