"""Pytest configuration and fixtures.

API tests run against a throwaway SQLite database (aiosqlite) per test; the
app's session dependencies are overridden to point at it.
"""
import asyncio
import os

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import NullPool

from medicare_api.core.security import create_access_token, hash_password
from medicare_api.database import get_session, get_session_factory, init_db, make_session_factory
from medicare_api.main import app
from medicare_api.models import User, UserRole, UserStatus

TEST_PASSWORD = "Test@1234"


@pytest.fixture
def session_factory(tmp_path):
    # NullPool: every session opens its own connection on whichever loop is running
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", poolclass=NullPool)
    asyncio.run(init_db(engine))
    yield make_session_factory(engine)
    asyncio.run(engine.dispose())


@pytest.fixture
def seed(session_factory):
    """Insert ORM objects and return them (detached, attributes loaded)."""
    def _seed(*objects):
        async def _add():
            async with session_factory() as session:
                session.add_all(objects)
                await session.commit()
        asyncio.run(_add())
        return objects[0] if len(objects) == 1 else objects
    return _seed


@pytest.fixture
def query(session_factory):
    """Run a select and return the scalars as a list."""
    def _query(stmt):
        async def _run():
            async with session_factory() as session:
                return list((await session.execute(stmt)).scalars().all())
        return asyncio.run(_run())
    return _query


@pytest.fixture
def make_user(seed):
    counter = {"n": 0}

    def _make_user(role=UserRole.DONOR, **fields):
        counter["n"] += 1
        n = counter["n"]
        fields.setdefault("name", f"{role.value.title()} {n}")
        fields.setdefault("email", f"{role.value}{n}@example.com")
        fields.setdefault("status", UserStatus.ACTIVE)
        return seed(User(role=role, hashed_password=hash_password(TEST_PASSWORD), **fields))
    return _make_user


@pytest.fixture
def client(session_factory):
    async def override_get_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    yield TestClient(app)
    app.dependency_overrides.clear()


def auth_headers(user: User) -> dict:
    token = create_access_token({"sub": str(user.id), "role": user.role.value})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin(make_user):
    return make_user(UserRole.ADMIN, name="Site Admin", email="admin@example.com")


@pytest.fixture
def admin_headers(admin):
    return auth_headers(admin)


@pytest.fixture
def headers_for():
    return auth_headers


@pytest.fixture
def user_password():
    return TEST_PASSWORD


@pytest.fixture
def lenient_client(client):
    """Same app and overrides, but unhandled errors come back as 500 responses."""
    return TestClient(app, raise_server_exceptions=False)
