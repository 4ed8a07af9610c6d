"""Test fixtures — in-memory SQLite database, site store and FastAPI test client."""

import io
import zipfile

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from zipsites.api.deps import get_site_store
from zipsites.database import get_db
from zipsites.main import create_app
from zipsites.models.base import Base
from zipsites.services.site_store import DatabaseSiteStore


@pytest_asyncio.fixture
async def db_session():
    """Provide an async in-memory SQLite session for tests."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session

    await engine.dispose()


@pytest_asyncio.fixture
async def store(db_session: AsyncSession, tmp_path):
    """Site store backed by the test session and a temp blob directory."""
    return DatabaseSiteStore(db_session, tmp_path / "blobs")


@pytest_asyncio.fixture
async def client(db_session: AsyncSession, store: DatabaseSiteStore):
    """Provide an async test client with overridden DB and store dependencies."""
    app = create_app()

    async def _override_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_db
    app.dependency_overrides[get_site_store] = lambda: store

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
def make_archive():
    """Build an in-memory ZIP: ``make_archive({"index.html": "<h1>hi</h1>"}, dirs=["img/"])``."""

    def _make(files: dict, dirs: tuple = ()) -> bytes:
        buf = io.BytesIO()
        with zipfile.ZipFile(buf, "w", zipfile.ZIP_DEFLATED) as zf:
            for d in dirs:
                zf.writestr(zipfile.ZipInfo(d), b"")
            for name, content in files.items():
                zf.writestr(name, content)
        return buf.getvalue()

    return _make
