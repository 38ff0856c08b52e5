import os

os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("ENVIRONMENT", "test")

from datetime import datetime, timezone
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from app.api.deps import get_current_user
from app.core.database import get_db
from app.main import app
from app.models.user import User


class FakeSession:
    """Stands in for AsyncSession where a service only commits or rolls back."""

    def __init__(self):
        self.commits = 0
        self.rollbacks = 0
        self.added = []

    def add(self, obj):
        self.added.append(obj)

    async def commit(self):
        self.commits += 1

    async def rollback(self):
        self.rollbacks += 1

    async def flush(self):
        pass

    async def refresh(self, obj):
        pass


def make_user(**overrides) -> User:
    now = datetime.now(timezone.utc)
    values = dict(
        id=uuid4(),
        email="ada@example.com",
        password_hash="secret",
        full_name="Ada Lovelace",
        email_verified=False,
        is_active=True,
        is_admin=False,
        failed_login_attempts=0,
        lockout_until=None,
        last_seen_at=None,
        created_at=now,
        updated_at=now,
    )
    values.update(overrides)
    return User(**values)


@pytest.fixture
def user_factory():
    return make_user


@pytest.fixture
def fake_db():
    return FakeSession()


@pytest.fixture
def user():
    return make_user()


@pytest.fixture
def client(fake_db, user):
    """TestClient with the database and the signed-in user overridden."""

    async def override_db():
        yield fake_db

    async def override_user():
        return user

    app.dependency_overrides[get_db] = override_db
    app.dependency_overrides[get_current_user] = override_user
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def anon_client(fake_db):
    """TestClient with only the database overridden."""

    async def override_db():
        yield fake_db

    app.dependency_overrides[get_db] = override_db
    yield TestClient(app)
    app.dependency_overrides.clear()
