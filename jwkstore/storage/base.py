"""Key-value storage interface consumed by the key lifecycle manager."""

from typing import Protocol, runtime_checkable

from pydantic import BaseModel


class StoredEntry(BaseModel):
    """One entry of a storage listing page."""

    key: str


class ListResult(BaseModel):
    """A page of a prefix listing; ``cursor`` is set while more remain."""

    files: list[StoredEntry]
    cursor: str | None = None


@runtime_checkable
class StorageAdapter(Protocol):
    """Durable key-value store with cursor-paginated prefix listing."""

    async def get(self, key: str) -> bytes | None:
        """Return the stored blob, or None if the key is absent."""
        ...

    async def set(self, key: str, blob: bytes) -> None:
        """Create or replace the blob stored at ``key``."""
        ...

    async def list(
        self, prefix: str, cursor: str | None = None, limit: int = 1
    ) -> ListResult:
        """List keys starting with ``prefix`` after ``cursor``."""
        ...
