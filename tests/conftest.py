"""Shared test fixtures for jwkstore."""

from collections.abc import AsyncIterator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from jwkstore.core.app import create_app
from jwkstore.db.base import BaseEntity
from jwkstore.db.engine import get_session
from jwkstore.db.models_blobs import BlobEntity
from jwkstore.storage.memory import MemoryStorage

_registered = (BlobEntity,)


@pytest.fixture(autouse=True)
def _set_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Pin key settings so host environment variables do not leak in."""
    monkeypatch.setenv("JWKSTORE_SIGNING_ALGORITHM", "ES256")
    monkeypatch.setenv("JWKSTORE_GENERATION_ATTEMPTS", "1")
    monkeypatch.setenv("JWKSTORE_SCAN_PAGE_SIZE", "1")


@pytest.fixture
def storage() -> MemoryStorage:
    """Empty in-memory key storage."""
    return MemoryStorage()


@pytest.fixture
async def db_session() -> AsyncIterator[AsyncSession]:
    """Create an in-memory SQLite async session for tests."""
    engine = create_async_engine("sqlite+aiosqlite://", echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(BaseEntity.metadata.create_all)

    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session

    await engine.dispose()


@pytest.fixture
async def client(db_session: AsyncSession) -> AsyncIterator[AsyncClient]:
    """Create an httpx test client with DB session override."""
    app = create_app(create_tables=False)

    async def _override_session() -> AsyncIterator[AsyncSession]:
        try:
            yield db_session
            await db_session.commit()
        except Exception:
            await db_session.rollback()
            raise

    app.dependency_overrides[get_session] = _override_session

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
