"""Public JWKS discovery endpoint."""

from typing import Annotated

from fastapi import APIRouter, Depends, Response

from jwkstore.api.deps import get_key_manager, load_settings
from jwkstore.core.settings import KeySettings
from jwkstore.crypto.keys import to_jwks
from jwkstore.crypto.types import JWKSResponse
from jwkstore.keys.lifecycle import KeyLifecycleManager

router = APIRouter()


@router.get("/.well-known/jwks.json", response_model_exclude_none=True)
async def jwks(
    response: Response,
    manager: Annotated[KeyLifecycleManager, Depends(get_key_manager)],
    settings: Annotated[KeySettings, Depends(load_settings)],
) -> JWKSResponse:
    """JSON Web Key Set of all signing keys, current and expired."""
    keys = await manager.signing_keys()
    response.headers["Cache-Control"] = settings.jwks_cache_control
    return to_jwks(keys)
