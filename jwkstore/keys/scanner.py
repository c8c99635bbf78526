"""Paginated walk over every record stored under a key prefix."""

import logging
from collections.abc import AsyncIterator

from jwkstore.core.settings import SCAN_PAGE_SIZE_DEFAULT
from jwkstore.storage.base import StorageAdapter

logger = logging.getLogger(__name__)


async def scan(
    storage: StorageAdapter,
    prefix: str,
    *,
    limit: int = SCAN_PAGE_SIZE_DEFAULT,
) -> AsyncIterator[bytes]:
    """Yield the blob of every entry listed under ``prefix``.

    Pages are requested until storage stops returning a cursor. Entries that
    disappear between listing and reading are skipped. A new call starts over
    from the beginning of the prefix.
    """
    cursor: str | None = None
    while True:
        page = await storage.list(prefix, cursor=cursor, limit=limit)
        for entry in page.files:
            blob = await storage.get(entry.key)
            if blob is None:
                logger.debug("Skipping %s: listed but no longer stored", entry.key)
                continue
            yield blob
        if page.cursor is None:
            return
        cursor = page.cursor
