"""Shared test fixtures for all test modules."""

import os
import tempfile

import pytest

# ── Environment overrides (must be set before importing app modules) ─────────
_tmp = tempfile.mkdtemp(prefix="photo_search_pytest_")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{os.path.join(_tmp, 'app.db')}"
os.environ["FLICKR_API_KEY"] = "test-key"
os.environ["FLICKR_API_SECRET"] = "test-secret"
os.environ["FLICKR_RATE_LIMIT"] = "1000"
os.environ["FLICKR_RETRY_MIN_WAIT"] = "0"
os.environ["FLICKR_RETRY_MAX_WAIT"] = "0"

from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.api.dependencies import get_photo_client
from app.core.database import create_tables, get_db
from app.main import app
from app.schemas.photo import PhotoRecord
from app.services.history_store import SearchHistoryStore


class FakePhotoClient:
    """Records calls and returns canned photos, or raises ``error`` when set."""

    def __init__(self, photos=None, error=None):
        self.photos = photos or []
        self.error = error
        self.calls = []

    async def search_photos(self, term, page, sort):
        self.calls.append(("search", term, page, sort))
        if self.error:
            raise self.error
        return list(self.photos)

    async def get_recent_photos(self, page, sort):
        self.calls.append(("recent", page, sort))
        if self.error:
            raise self.error
        return list(self.photos)


@pytest.fixture
def test_photo():
    return PhotoRecord(
        id="1",
        owner="test",
        secret="secret",
        server="server",
        farm=1,
        title="Test Photo",
        is_public=1,
        is_friend=0,
        is_family=0,
    )


@pytest.fixture
def fake_photo_client(test_photo):
    return FakePhotoClient(photos=[test_photo])


@pytest.fixture
async def session_maker(tmp_path):
    """A fresh file-backed sqlite database per test, with tables created."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'history.db'}")
    await create_tables(engine)
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    await engine.dispose()


@pytest.fixture
async def db_session(session_maker):
    async with session_maker() as session:
        yield session


@pytest.fixture
def history_store(db_session):
    return SearchHistoryStore(db_session)


@pytest.fixture
async def api_client(session_maker, fake_photo_client):
    """HTTP client over the ASGI app with the database and photo provider swapped out."""

    async def _get_db():
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_photo_client] = lambda: fake_photo_client
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
