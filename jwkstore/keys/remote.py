"""Verification keys from externally supplied or fetched JWKS documents."""

import logging
from collections.abc import Mapping
from typing import Any

import httpx
from jwt import PyJWK
from jwt.exceptions import InvalidKeyError, PyJWKError

from jwkstore.core.errors import JWKSFetchError, KeyImportError
from jwkstore.core.settings import REMOTE_JWKS_TIMEOUT_DEFAULT
from jwkstore.crypto.types import VerificationKey

logger = logging.getLogger(__name__)


def _load_jwk(data: Mapping[str, Any], algorithm: str | None) -> VerificationKey | None:
    declared = data.get("alg")
    if algorithm is not None and declared is not None and declared != algorithm:
        return None
    try:
        jwk = PyJWK(dict(data), algorithm=algorithm)
    except (PyJWKError, InvalidKeyError, ValueError) as exc:
        logger.debug("Ignoring unusable JWK %s: %s", data.get("kid"), exc)
        return None
    return VerificationKey(
        id=jwk.key_id,
        alg=jwk.algorithm_name,
        public_key=jwk.key,
        jwk=dict(data),
    )


def import_local(
    jwks: Mapping[str, Any], algorithm: str | None = None
) -> list[VerificationKey]:
    """Build verification keys from a JWKS document.

    When ``algorithm`` is given only keys usable with it are kept; otherwise
    the algorithm is taken from each key's ``alg`` or inferred from its type.
    """
    entries = jwks.get("keys")
    if not isinstance(entries, list):
        raise KeyImportError("JWKS document has no 'keys' list")
    keys = [
        key
        for entry in entries
        if isinstance(entry, Mapping)
        and (key := _load_jwk(entry, algorithm)) is not None
    ]
    if not keys:
        raise KeyImportError(f"No usable keys in JWKS for algorithm {algorithm}")
    return keys


async def import_remote(
    url: str | httpx.URL,
    algorithm: str | None = None,
    *,
    client: httpx.AsyncClient | None = None,
    timeout: float = REMOTE_JWKS_TIMEOUT_DEFAULT,
) -> list[VerificationKey]:
    """Fetch a JWKS document over HTTP and import its keys."""
    try:
        if client is None:
            async with httpx.AsyncClient(timeout=timeout) as owned:
                response = await owned.get(url)
        else:
            response = await client.get(url, timeout=timeout)
        response.raise_for_status()
        document = response.json()
    except (httpx.HTTPError, ValueError) as exc:
        raise JWKSFetchError(f"Failed to fetch JWKS from {url}") from exc
    if not isinstance(document, Mapping):
        raise JWKSFetchError(f"JWKS from {url} is not a JSON object")
    return import_local(document, algorithm)
