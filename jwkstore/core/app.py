"""FastAPI application factory for the jwkstore key service."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from jwkstore.api.routes_jwks import router as jwks_router
from jwkstore.db.engine import init_models


def create_app(*, create_tables: bool = True) -> FastAPI:
    """Build and configure the FastAPI application."""

    @asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
        if create_tables:
            await init_models()
        yield

    app = FastAPI(
        title="jwkstore",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.key_locks = {}
    app.include_router(jwks_router)
    return app
