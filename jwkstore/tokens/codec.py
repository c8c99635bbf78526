"""JWT signing and verification against lifecycle-managed key sets."""

import logging
from collections.abc import Callable, Sequence
from typing import Any, TypeVar

import jwt
from jwt.types import Options

from jwkstore.core.errors import NoSigningKeyError, NoVerificationKeyError
from jwkstore.crypto.types import (
    SIGNING_ALGORITHMS,
    KeyPair,
    VerificationKey,
    VerifyOptions,
)
from jwkstore.tokens.claims import Claims, ClaimsView

logger = logging.getLogger(__name__)

C = TypeVar("C", bound=ClaimsView)


def sign(
    claims: ClaimsView,
    algorithm: str,
    keys: Sequence[KeyPair | VerificationKey],
) -> str:
    """Sign ``claims`` with the first key pair in ``keys`` using ``algorithm``.

    Public-only keys (imported from a JWKS) are skipped.
    """
    if algorithm not in SIGNING_ALGORITHMS:
        raise NoSigningKeyError(algorithm)
    key = next(
        (
            k
            for k in keys
            if isinstance(k, KeyPair)
            and k.alg == algorithm
            and k.private_key is not None
        ),
        None,
    )
    if key is None:
        raise NoSigningKeyError(algorithm)
    return jwt.encode(
        claims.payload,
        key.private_key,
        algorithm=str(algorithm),
        headers={"typ": "JWT", "kid": key.id},
    )


def _select_key(
    token: str, keys: Sequence[KeyPair | VerificationKey]
) -> KeyPair | VerificationKey:
    candidates = [k for k in keys if k.public_key is not None]
    if not candidates:
        raise NoVerificationKeyError()
    kid = jwt.get_unverified_header(token).get("kid")
    for key in candidates:
        if kid is not None and key.id == kid:
            return key
    logger.debug("No key with kid %s, falling back to %s", kid, candidates[0].id)
    return candidates[0]


def verify(
    token: str,
    keys: Sequence[KeyPair | VerificationKey],
    options: VerifyOptions | None = None,
    *,
    claims_type: Callable[[dict[str, Any]], C] = Claims,  # type: ignore[assignment]
) -> C:
    """Verify the signature and registered claims of an RS/ES-signed JWT.

    The key whose id matches the token's ``kid`` header is used, otherwise
    the first key carrying a public key. Validation failures are PyJWT's own
    ``jwt.InvalidTokenError`` subclasses.
    """
    opts = options or VerifyOptions()
    key = _select_key(token, keys)
    decode_options: Options = {"require": list(opts.require)}
    if opts.audience is None:
        decode_options["verify_aud"] = False
    payload = jwt.decode(
        token,
        key.public_key,
        algorithms=[str(key.alg)],
        audience=opts.audience,
        issuer=opts.issuer,
        leeway=opts.leeway,
        options=decode_options,
    )
    return claims_type(payload)


def decode(
    token: str,
    *,
    claims_type: Callable[[dict[str, Any]], C] = Claims,  # type: ignore[assignment]
) -> C:
    """Read a token's payload without checking its signature.

    For inspection only; never base trust decisions on the result.
    """
    payload = jwt.decode(token, options={"verify_signature": False})
    return claims_type(payload)
