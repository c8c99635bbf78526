"""Storage adapter over an async SQLAlchemy session."""

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from jwkstore.core.errors import StorageError
from jwkstore.db.repo_blobs import get_blob, list_keys, put_blob
from jwkstore.storage.base import ListResult, StoredEntry


class SQLStorage:
    """Key-value storage in the ``jwk_blobs`` table.

    Writes are flushed, not committed; the session owner commits.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, key: str) -> bytes | None:
        try:
            entity = await get_blob(self._session, key)
        except SQLAlchemyError as exc:
            raise StorageError(f"Failed to read {key!r}") from exc
        return None if entity is None else entity.blob

    async def set(self, key: str, blob: bytes) -> None:
        try:
            await put_blob(self._session, key, blob)
        except SQLAlchemyError as exc:
            raise StorageError(f"Failed to write {key!r}") from exc

    async def list(
        self, prefix: str, cursor: str | None = None, limit: int = 1
    ) -> ListResult:
        if limit < 1:
            raise ValueError("limit must be at least 1")
        try:
            keys = await list_keys(self._session, prefix, cursor, limit + 1)
        except SQLAlchemyError as exc:
            raise StorageError(f"Failed to list {prefix!r}") from exc
        page = keys[:limit]
        return ListResult(
            files=[StoredEntry(key=k) for k in page],
            cursor=page[-1] if len(keys) > limit else None,
        )
