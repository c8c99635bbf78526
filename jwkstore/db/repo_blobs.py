"""Database operations backing the SQL storage adapter."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from jwkstore.db.models_blobs import BlobEntity


async def get_blob(session: AsyncSession, key: str) -> BlobEntity | None:
    """Return the entry stored at ``key``."""
    return await session.get(BlobEntity, key)


async def put_blob(session: AsyncSession, key: str, blob: bytes) -> BlobEntity:
    """Insert or overwrite the entry stored at ``key``."""
    entity = await get_blob(session, key)
    if entity is None:
        entity = BlobEntity(key=key, blob=blob)
        session.add(entity)
    else:
        entity.blob = blob
    await session.flush()
    return entity


async def list_keys(
    session: AsyncSession, prefix: str, after: str | None, limit: int
) -> list[str]:
    """Return up to ``limit`` keys with ``prefix`` ordered after ``after``."""
    stmt = (
        select(BlobEntity.key)
        .where(BlobEntity.key.startswith(prefix, autoescape=True))
        .order_by(BlobEntity.key)
        .limit(limit)
    )
    if after is not None:
        stmt = stmt.where(BlobEntity.key > after)
    result = await session.execute(stmt)
    return list(result.scalars().all())
