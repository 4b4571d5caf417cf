"""Test configuration: per-test SQLite database, app instance and httpx client."""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from pydantic import SecretStr

from taskboard.config import Settings
from taskboard.db import Database, update_user, utc_now

from .helpers import register


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        environment="test",
        db_path=tmp_path / "test.db",
        jwt_secret=SecretStr("test-secret"),
        rate_limit_max=10_000,
    )


@pytest_asyncio.fixture
async def app(settings: Settings):
    """FastAPI app with the schema created by hand (lifespan does not run here)."""
    from taskboard.main import create_app

    application = create_app(settings)
    application.state.db.init_schema()
    yield application


@pytest.fixture
def db(app) -> Database:
    return app.state.db


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest_asyncio.fixture
async def alice(client):
    return await register(client, "alice")


@pytest_asyncio.fixture
async def bob(client):
    return await register(client, "bob")


@pytest_asyncio.fixture
async def carol(client):
    return await register(client, "carol")


@pytest_asyncio.fixture
async def admin(client, db):
    account = await register(client, "root_admin")
    update_user(db, account.id, role="admin", updated_at=utc_now())
    return account

