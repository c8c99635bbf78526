"""In-process storage adapter, used for tests and single-process deployments."""

from jwkstore.storage.base import ListResult, StoredEntry


class MemoryStorage:
    """Dict-backed storage; listing is ordered by key, cursor is the last key."""

    def __init__(self) -> None:
        self._blobs: dict[str, bytes] = {}

    def __contains__(self, key: object) -> bool:
        return key in self._blobs

    def __len__(self) -> int:
        return len(self._blobs)

    async def get(self, key: str) -> bytes | None:
        return self._blobs.get(key)

    async def set(self, key: str, blob: bytes) -> None:
        self._blobs[key] = bytes(blob)

    async def list(
        self, prefix: str, cursor: str | None = None, limit: int = 1
    ) -> ListResult:
        if limit < 1:
            raise ValueError("limit must be at least 1")
        keys = sorted(
            k
            for k in self._blobs
            if k.startswith(prefix) and (cursor is None or k > cursor)
        )
        page = keys[:limit]
        next_cursor = page[-1] if len(keys) > limit else None
        return ListResult(
            files=[StoredEntry(key=k) for k in page],
            cursor=next_cursor,
        )
