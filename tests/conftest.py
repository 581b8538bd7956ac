"""Pytest fixtures for testing."""
import os
from typing import AsyncGenerator

# Settings are read at import time; point them at test values first
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./clientdesk_unused.db"
os.environ["JWT_SECRET_KEY"] = "test-secret-key-with-at-least-32-bytes"

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker

from clientdesk.main import app
from clientdesk.common.database import Base, get_db, enable_sqlite_foreign_keys
from clientdesk.common.config import settings
from clientdesk.common.rate_limit import limiter
from clientdesk.domain.auth_service import hash_password
from clientdesk.models import User, Client, Repo


def _reset_limiter_storage():
    if hasattr(limiter, '_limiter') and hasattr(limiter._limiter, 'storage'):
        storage = limiter._limiter.storage
        if hasattr(storage, 'reset'):
            storage.reset()


@pytest.fixture(scope="function")
async def test_db(tmp_path):
    """Create a fresh SQLite database with all tables for one test."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", echo=False)
    enable_sqlite_foreign_keys(engine)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session_maker = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with async_session_maker() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    # Disable rate limiting in tests
    limiter.enabled = False

    yield async_session_maker

    app.dependency_overrides.clear()
    _reset_limiter_storage()
    await engine.dispose()


@pytest.fixture
def upload_dir(tmp_path, monkeypatch) -> str:
    """Redirect stored project files into the test's temp directory."""
    path = tmp_path / "uploads"
    monkeypatch.setattr(settings, "upload_dir", str(path))
    return str(path)


@pytest.fixture
def scratch_dir(tmp_path, monkeypatch) -> str:
    """Redirect temporary files (ZIP archives) into a watched directory."""
    import tempfile

    path = tmp_path / "scratch"
    path.mkdir()
    monkeypatch.setattr(tempfile, "tempdir", str(path))
    return str(path)


@pytest.fixture
async def client(test_db, upload_dir) -> AsyncGenerator[AsyncClient, None]:
    """Create test client."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as client:
        yield client


@pytest.fixture
async def session(test_db) -> AsyncGenerator[AsyncSession, None]:
    """Create test database session."""
    async with test_db() as session:
        yield session


@pytest.fixture
async def create_user(session: AsyncSession):
    """Factory to insert users directly."""
    async def _create_user(
        email: str,
        username: str,
        password: str = "password123",
        roles: list[str] | None = None,
    ) -> User:
        user = User(
            email=email,
            username=username,
            password_hash=hash_password(password),
            roles=["ROLE_USER"] if roles is None else roles,
        )
        session.add(user)
        await session.commit()
        await session.refresh(user)
        return user

    return _create_user


@pytest.fixture
async def user_a(create_user) -> User:
    """Create test user A."""
    return await create_user("user_a@example.com", "user_a")


@pytest.fixture
async def user_b(create_user) -> User:
    """Create test user B."""
    return await create_user("user_b@example.com", "user_b")


@pytest.fixture
async def user_a_jwt(client: AsyncClient, user_a: User) -> str:
    """Get JWT token for user A."""
    response = await client.post(
        "/api/login",
        json={"email": "user_a@example.com", "password": "password123"}
    )
    assert response.status_code == 200
    return response.json()["data"]["token"]


@pytest.fixture
def auth_headers(user_a_jwt: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {user_a_jwt}"}


@pytest.fixture
async def create_client_record(session: AsyncSession):
    """Factory to insert clients directly."""
    async def _create_client(name: str, cif: str, **fields) -> Client:
        record = Client(name=name, cif=cif, **fields)
        session.add(record)
        await session.commit()
        await session.refresh(record)
        return record

    return _create_client


@pytest.fixture
async def create_project(session: AsyncSession):
    """Factory to insert projects directly."""
    async def _create_project(projectname: str = "Proyecto Alfa") -> Repo:
        project = Repo(projectname=projectname)
        session.add(project)
        await session.commit()
        await session.refresh(project)
        return project

    return _create_project
