"""Async SQLAlchemy engine and session management."""

from collections.abc import AsyncIterator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from jwkstore.core.settings import DatabaseSettings
from jwkstore.db.base import BaseEntity
from jwkstore.db.models_blobs import BlobEntity

_registered = (BlobEntity,)


class _EngineHolder:
    """Lazy singleton for the engine and its session factory."""

    engine: AsyncEngine | None = None
    factory: async_sessionmaker[AsyncSession] | None = None


_holder = _EngineHolder()


def _get_engine() -> AsyncEngine:
    if _holder.engine is None:
        db = DatabaseSettings()
        if db.async_url.startswith("sqlite"):
            _holder.engine = create_async_engine(db.async_url)
        else:
            _holder.engine = create_async_engine(
                db.async_url,
                pool_size=db.pool_size,
                max_overflow=db.max_overflow,
            )
    return _holder.engine


def _get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Lazily create the async session factory."""
    if _holder.factory is None:
        _holder.factory = async_sessionmaker(
            _get_engine(),
            class_=AsyncSession,
            expire_on_commit=False,
        )
    return _holder.factory


async def init_models() -> None:
    """Create the storage tables if they do not exist."""
    async with _get_engine().begin() as conn:
        await conn.run_sync(BaseEntity.metadata.create_all)


async def get_session() -> AsyncIterator[AsyncSession]:
    """FastAPI dependency that yields an async database session."""
    factory = _get_session_factory()
    async with factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
