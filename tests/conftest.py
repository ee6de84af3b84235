"""Test configuration and fixtures.

Settings are read at import time, so the environment is prepared before any
skillfest module is imported. API tests run against an in-memory SQLite
database; GitHub is replaced by httpx.MockTransport handlers.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("REDIS_URL", "redis://localhost:6379/0")
os.environ.setdefault("GITHUB_TOKEN", "test-token")
os.environ.setdefault("ADMIN_PASSWORD", "test-admin")

from collections.abc import AsyncGenerator, Callable

import httpx
import pytest

ADMIN_HEADERS = {"X-Admin-Password": "test-admin"}


def pytest_configure(config):
    """Register integration test marker."""
    config.addinivalue_line(
        "markers", "integration: mark test as integration test requiring database"
    )


def make_github_handler(
    login: str = "alice",
    counts: dict | None = None,
    repos: list[str] | None = None,
    stats: dict | None = None,
    issues: dict | None = None,
    merged_items: list[dict] | None = None,
    open_items: list[dict] | None = None,
    remaining: int = 5000,
) -> Callable[[httpx.Request], httpx.Response]:
    """Build a fake GitHub API.

    ``counts`` maps search qualifiers (after ``type:pr author:<login>``) to
    totals, ``stats`` maps repo names to a contributor-stats payload or a bare
    status code, ``issues`` maps repo names to issue lists.
    """
    counts = counts or {}
    repos = repos or []
    stats = stats or {}
    issues = issues or {}

    def handler(request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if path == "/user":
            return httpx.Response(200, json={"login": login})
        if path == "/rate_limit":
            return httpx.Response(200, json={"resources": {"core": {"remaining": remaining}}})
        if path == "/search/issues":
            query = request.url.params["q"]
            qualifiers = query.replace(f"type:pr author:{login}", "").strip()
            if qualifiers not in counts:
                return httpx.Response(422, json={"message": "Validation Failed"})
            items: list[dict] = []
            if qualifiers.endswith("is:merged") and "org:" in qualifiers:
                items = merged_items or []
            elif qualifiers == "is:open":
                items = open_items or []
            return httpx.Response(200, json={"total_count": counts[qualifiers], "items": items})
        if path == "/orgs/nst-sdc/repos":
            return httpx.Response(200, json=[{"name": name} for name in repos])
        if path.startswith("/repos/nst-sdc/") and path.endswith("/stats/contributors"):
            repo = path.split("/")[3]
            payload = stats.get(repo, [])
            if isinstance(payload, int):
                return httpx.Response(payload, json={})
            return httpx.Response(200, json=payload)
        if path.startswith("/repos/nst-sdc/") and path.endswith("/issues"):
            repo = path.split("/")[3]
            if repo not in issues:
                return httpx.Response(404, json={"message": "Not Found"})
            return httpx.Response(200, json=issues[repo])
        return httpx.Response(404, json={"message": "Not Found"})

    return handler


@pytest.fixture
def github_handler() -> Callable[..., Callable[[httpx.Request], httpx.Response]]:
    return make_github_handler


@pytest.fixture(scope="function")
async def db_session() -> AsyncGenerator:
    """Create a fresh in-memory database session for each test."""
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
    from sqlalchemy.pool import StaticPool

    from skillfest.db.models import Base

    test_engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        echo=False,
    )
    test_session_maker = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with test_session_maker() as session:
        yield session

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await test_engine.dispose()


@pytest.fixture(scope="function")
async def app(db_session):
    """Application with the database dependency pointed at the test session."""
    from sqlalchemy.ext.asyncio import AsyncSession

    from skillfest.api.app import create_app
    from skillfest.db import get_db

    app = create_app()

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    return app


@pytest.fixture(scope="function")
async def client(app) -> AsyncGenerator:
    """Create a test client for the application."""
    from httpx import ASGITransport, AsyncClient

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest.fixture
async def seed_users(db_session):
    """Insert participants in the given order; returns a factory."""
    from skillfest.db.models import ManualRank, SkillFestUser

    async def _seed(*rows: dict) -> list:
        users = []
        for row in rows:
            override = row.pop("override", None)
            user = SkillFestUser(**row)
            db_session.add(user)
            if override is not None:
                db_session.add(ManualRank(username=row["login"], **override))
            users.append(user)
        await db_session.flush()
        return users

    return _seed
