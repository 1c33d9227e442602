"""Shared fixtures: a throwaway SQLite database, seeded users and a fake directory."""

from __future__ import annotations

import os
import sys
import tempfile
import time
from functools import lru_cache
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.append(str(ROOT))

TEST_DB_PATH = Path(tempfile.gettempdir()) / "circulars_api_test.db"
os.environ["DATABASE_URL"] = f"sqlite:///{TEST_DB_PATH}"
os.environ["SECRET_KEY"] = "test-secret"
os.environ["ACCESS_TOKEN_EXPIRE_MINUTES"] = "30"
os.environ["DIRECTORY_LOOKUP_BACKOFF_SECONDS"] = "0"

from app.config import get_settings  # noqa: E402

get_settings.cache_clear()

from app.domain.entities import User, UserRole  # noqa: E402
from app.domain.exceptions import DirectoryLookupError  # noqa: E402
from app.infrastructure.database import (  # noqa: E402
    Base,
    SessionLocal,
    engine,
    initialize_database,
)
from app.infrastructure.directory import SqlUserDirectory  # noqa: E402
from app.infrastructure.models import UserModel  # noqa: E402
from app.infrastructure.repositories import RoleRepository, UserRepository  # noqa: E402
from app.infrastructure.security import get_password_hash  # noqa: E402
from app.application.use_cases.circulars import LookupPolicy, RecipientResolver  # noqa: E402

DEFAULT_PASSWORD = "StrongPass123"


@lru_cache
def _hashed(password: str) -> str:
    return get_password_hash(password)


class FakeDirectory:
    """In-memory user directory with injectable failures and latency."""

    def __init__(self) -> None:
        self.users_by_role: dict[UserRole, set[int]] = {}
        self.names: dict[int, str] = {}
        self.failures = 0
        self.slow_calls = 0
        self.delay = 0.0
        self.calls: list[str] = []

    def add(self, role: UserRole, *user_ids: int) -> "FakeDirectory":
        self.users_by_role.setdefault(role, set()).update(user_ids)
        return self

    def lookup_users_by_role(self, role: UserRole) -> set[int]:
        self.calls.append(f"role:{role.value}")
        self._simulate()
        return set(self.users_by_role.get(role, set()))

    def lookup_user_name(self, user_id: int) -> str | None:
        self.calls.append(f"name:{user_id}")
        self._simulate()
        return self.names.get(user_id)

    def _simulate(self) -> None:
        if self.slow_calls > 0:
            self.slow_calls -= 1
            time.sleep(self.delay)
        if self.failures > 0:
            self.failures -= 1
            raise DirectoryLookupError("directory offline")


@pytest.fixture(autouse=True)
def reset_database():
    """Ensure every test starts from freshly created tables."""

    Base.metadata.drop_all(bind=engine)
    initialize_database()
    yield
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def session():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def make_user():
    """Return a factory inserting an active user with the given role."""

    def _make_user(
        role: UserRole,
        name: str,
        *,
        email: str | None = None,
        password: str = DEFAULT_PASSWORD,
        is_active: bool = True,
    ) -> User:
        with SessionLocal() as db:
            stored_role = RoleRepository(db).ensure(role)
            model = UserModel(
                role_id=stored_role.id,
                name=name,
                email=email or f"{name.lower().replace(' ', '.')}@example.com",
                password=_hashed(password),
                is_active=is_active,
            )
            db.add(model)
            db.commit()
            return UserRepository(db).get(model.id)

    return _make_user


@pytest.fixture()
def fake_directory() -> FakeDirectory:
    return FakeDirectory()


@pytest.fixture()
def no_sleep():
    """Record requested backoff delays instead of sleeping."""

    delays: list[float] = []
    return delays


@pytest.fixture()
def resolver(no_sleep) -> RecipientResolver:
    """Resolver backed by the SQL user directory of the test database."""

    return RecipientResolver(
        SqlUserDirectory(SessionLocal),
        LookupPolicy(max_attempts=3, backoff_seconds=0, timeout_seconds=5.0),
        sleep=no_sleep.append,
    )
