from __future__ import annotations

import os
import sys
from datetime import date
from pathlib import Path
from typing import Dict, Iterator

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Settings are read at import time.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")
os.environ.setdefault("CALENDAR_YEAR", "2026")

from fastapi.testclient import TestClient  # noqa: E402

from archivist.core import calendar  # noqa: E402
from archivist.core.auth import models as auth_models  # noqa: E402,F401
from archivist.core.auth.models import User  # noqa: E402
from archivist.core.auth.services import create_session_and_tokens  # noqa: E402
from archivist.core.categories import models as categories_models  # noqa: E402,F401
from archivist.core.days import models as days_models  # noqa: E402,F401
from archivist.core.dependencies import get_db  # noqa: E402
from archivist.core.profile import models as profile_models  # noqa: E402,F401
from archivist.core.reviews import models as reviews_models  # noqa: E402,F401
from archivist.core.security import hash_password  # noqa: E402
from archivist.database.base import Base  # noqa: E402
from archivist.database.session import enable_sqlite_foreign_keys  # noqa: E402
from archivist.main import app  # noqa: E402
from archivist.utils import cache  # noqa: E402


TODAY = date(2026, 6, 15)
PASSWORD = "journal2026"

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
enable_sqlite_foreign_keys(engine)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: Unit tests (no database)")
    config.addinivalue_line("markers", "integration: Integration tests (database, API)")


class FakeRedis:
    """In-memory stand-in for the handful of redis commands the cache uses."""

    def __init__(self) -> None:
        self.store: Dict[str, str] = {}

    def get(self, key: str):
        return self.store.get(key)

    def setex(self, key: str, ttl: int, value: str) -> None:
        self.store[key] = value

    def delete(self, *keys: str) -> int:
        removed = 0
        for key in keys:
            if self.store.pop(key, None) is not None:
                removed += 1
        return removed

    def ping(self) -> bool:
        return True


@pytest.fixture(autouse=True)
def schema() -> Iterator[None]:
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def fixed_today(monkeypatch) -> date:
    monkeypatch.setattr(calendar, "today", lambda: TODAY)
    return TODAY


@pytest.fixture(autouse=True)
def fake_redis(monkeypatch) -> FakeRedis:
    fake = FakeRedis()
    monkeypatch.setattr(cache, "get_redis", lambda: fake)
    monkeypatch.setattr("archivist.main.get_redis", lambda: fake)
    return fake


@pytest.fixture()
def db() -> Iterator[Session]:
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client() -> Iterator[TestClient]:
    def override_get_db() -> Iterator[Session]:
        session = TestingSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def make_user(db: Session, email: str, name: str | None = None) -> User:
    user = User(
        email=email,
        password_hash=hash_password(PASSWORD),
        name=name,
        is_active=True,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def auth_headers(db: Session, user: User) -> Dict[str, str]:
    tokens = create_session_and_tokens(db, user)
    db.commit()
    return {"Authorization": f"Bearer {tokens.access_token}"}


@pytest.fixture()
def alice(db: Session) -> User:
    return make_user(db, "alice@archivist.dev", name="Alice")


@pytest.fixture()
def bob(db: Session) -> User:
    return make_user(db, "bob@archivist.dev", name="Bob")


@pytest.fixture()
def alice_headers(db: Session, alice: User) -> Dict[str, str]:
    return auth_headers(db, alice)


@pytest.fixture()
def bob_headers(db: Session, bob: User) -> Dict[str, str]:
    return auth_headers(db, bob)
