"""Discovery, generation, and rotation of stored key pairs."""

import asyncio
import logging
from datetime import UTC, datetime

from jwkstore.core.errors import KeyGenerationRaceError
from jwkstore.core.settings import KeySettings
from jwkstore.crypto.codec import decode, encode, parse_record
from jwkstore.crypto.keys import generate_keypair
from jwkstore.crypto.types import Algorithm, KeyPair, KeyRecord, Purpose
from jwkstore.keys.scanner import scan
from jwkstore.storage.base import StorageAdapter

logger = logging.getLogger(__name__)


class KeyLifecycleManager:
    """Keeps at least one unexpired key pair per purpose in storage.

    Calls are serialised per purpose, so concurrent callers never both
    generate a key for an empty prefix. Managers built per request share
    serialisation by passing the same ``locks`` mapping. Processes sharing one
    store are not coordinated.
    """

    def __init__(
        self,
        storage: StorageAdapter,
        settings: KeySettings | None = None,
        locks: dict[Purpose, asyncio.Lock] | None = None,
    ) -> None:
        self._storage = storage
        self._settings = settings or KeySettings()
        self._locks: dict[Purpose, asyncio.Lock] = {} if locks is None else locks

    def _lock(self, purpose: Purpose) -> asyncio.Lock:
        if purpose not in self._locks:
            self._locks[purpose] = asyncio.Lock()
        return self._locks[purpose]

    def algorithm_for(self, purpose: Purpose) -> Algorithm:
        """Algorithm used when generating a key for ``purpose``."""
        if purpose is Purpose.SIGNING:
            return self._settings.signing_algorithm
        return self._settings.encryption_algorithm

    async def load(self, purpose: Purpose) -> list[KeyPair]:
        """Decode every stored key for ``purpose``, newest first."""
        keys = [
            decode(blob, purpose)
            async for blob in scan(
                self._storage, purpose.prefix, limit=self._settings.scan_page_size
            )
        ]
        # newest first; on equal timestamps the unexpired key wins
        keys.sort(key=lambda k: (k.created, k.is_valid), reverse=True)
        return keys

    async def _generate(self, purpose: Purpose) -> KeyRecord:
        record = generate_keypair(self.algorithm_for(purpose))
        await self._storage.set(purpose.storage_key(record.id), encode(record))
        logger.info("Generated %s key %s (%s)", purpose, record.id, record.alg)
        return record

    async def _keys_for(self, purpose: Purpose) -> list[KeyPair]:
        attempts = self._settings.generation_attempts
        for generated in range(attempts + 1):
            keys = await self.load(purpose)
            if any(k.is_valid for k in keys):
                return keys
            if generated == attempts:
                break
            await self._generate(purpose)
        logger.warning(
            "No valid %s key visible after %d generation attempts", purpose, attempts
        )
        raise KeyGenerationRaceError(purpose.prefix, attempts)

    async def keys_for(self, purpose: Purpose) -> list[KeyPair]:
        """Return all keys for ``purpose``, newest first.

        Expired keys are included for verifying tokens they signed. When no
        unexpired key exists, one is generated and persisted first, so the
        result always holds at least one valid key.
        """
        async with self._lock(purpose):
            return await self._keys_for(purpose)

    async def signing_keys(self) -> list[KeyPair]:
        return await self.keys_for(Purpose.SIGNING)

    async def encryption_keys(self) -> list[KeyPair]:
        return await self.keys_for(Purpose.ENCRYPTION)

    async def _expire(self, purpose: Purpose) -> int:
        now = datetime.now(UTC)
        current = [
            parse_record(blob)
            async for blob in scan(
                self._storage, purpose.prefix, limit=self._settings.scan_page_size
            )
        ]
        expired = 0
        for record in current:
            if record.expired is not None:
                continue
            updated = record.model_copy(update={"expired": now})
            await self._storage.set(purpose.storage_key(record.id), encode(updated))
            expired += 1
        return expired

    async def expire_keys(self, purpose: Purpose) -> int:
        """Mark every current key for ``purpose`` expired; returns the count."""
        async with self._lock(purpose):
            count = await self._expire(purpose)
        logger.info("Expired %d %s key(s)", count, purpose)
        return count

    async def rotate(self, purpose: Purpose) -> list[KeyPair]:
        """Expire the current keys and return the set with a fresh key first."""
        async with self._lock(purpose):
            count = await self._expire(purpose)
            logger.info("Rotating %s keys, expired %d", purpose, count)
            return await self._keys_for(purpose)


async def keys_for(
    storage: StorageAdapter,
    purpose: Purpose,
    settings: KeySettings | None = None,
) -> list[KeyPair]:
    """One-shot ``KeyLifecycleManager(storage).keys_for(purpose)``."""
    return await KeyLifecycleManager(storage, settings).keys_for(purpose)


async def signing_keys(
    storage: StorageAdapter, settings: KeySettings | None = None
) -> list[KeyPair]:
    return await keys_for(storage, Purpose.SIGNING, settings)


async def encryption_keys(
    storage: StorageAdapter, settings: KeySettings | None = None
) -> list[KeyPair]:
    return await keys_for(storage, Purpose.ENCRYPTION, settings)
