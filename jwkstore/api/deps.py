"""FastAPI dependency injection for storage and settings."""

import asyncio
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from jwkstore.core.settings import KeySettings
from jwkstore.crypto.types import Purpose
from jwkstore.db.engine import get_session
from jwkstore.keys.lifecycle import KeyLifecycleManager
from jwkstore.storage.base import StorageAdapter
from jwkstore.storage.sql import SQLStorage


def load_settings() -> KeySettings:
    return KeySettings()


def get_storage(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> SQLStorage:
    """Storage adapter bound to the request's database session."""
    return SQLStorage(session)


def get_key_locks(request: Request) -> dict[Purpose, asyncio.Lock]:
    """Per-purpose generation locks owned by the application."""
    return request.app.state.key_locks


def get_key_manager(
    storage: Annotated[StorageAdapter, Depends(get_storage)],
    settings: Annotated[KeySettings, Depends(load_settings)],
    locks: Annotated[dict[Purpose, asyncio.Lock], Depends(get_key_locks)],
) -> KeyLifecycleManager:
    """Request-scoped manager serialised through the app's shared locks."""
    return KeyLifecycleManager(storage, settings, locks)
