"""EC/RSA key generation, PEM import, and JWK conversion."""

import base64
from collections.abc import Iterable
from datetime import UTC, datetime
from typing import Any

import uuid_utils
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, rsa
from cryptography.hazmat.primitives.asymmetric.ec import (
    EllipticCurvePrivateKey,
    EllipticCurvePublicKey,
)
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey, RSAPublicKey

from jwkstore.core.errors import KeyImportError
from jwkstore.crypto.types import (
    Algorithm,
    JWKEntry,
    JWKSResponse,
    KeyPair,
    KeyRecord,
    VerificationKey,
)

RSA_KEY_SIZE = 2048
RSA_PUBLIC_EXPONENT = 65537
EC_CURVE_NAME = "P-256"
EC_COORDINATE_SIZE = 32

PublicKey = EllipticCurvePublicKey | RSAPublicKey
PrivateKey = EllipticCurvePrivateKey | RSAPrivateKey


def _now() -> datetime:
    """Current UTC time truncated to the millisecond storage precision."""
    now = datetime.now(UTC)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


def _generate_private_key(alg: Algorithm) -> PrivateKey:
    if alg.key_type == "EC":
        return ec.generate_private_key(ec.SECP256R1())
    return rsa.generate_private_key(
        public_exponent=RSA_PUBLIC_EXPONENT,
        key_size=RSA_KEY_SIZE,
    )


def generate_keypair(alg: Algorithm) -> KeyRecord:
    """Generate a new key pair for ``alg`` as an unexpired record."""
    private_key = _generate_private_key(alg)
    private_pem = private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode()
    public_pem = (
        private_key.public_key()
        .public_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        )
        .decode()
    )
    return KeyRecord(
        id=str(uuid_utils.uuid7()),
        alg=alg,
        public_key=public_pem,
        private_key=private_pem,
        created=_now(),
    )


def _check_key_type(key: object, alg: Algorithm, expected: tuple[type, ...]) -> None:
    if not isinstance(key, expected):
        raise KeyImportError(f"Key material does not match algorithm {alg}")
    if isinstance(key, EllipticCurvePublicKey | EllipticCurvePrivateKey) and not (
        isinstance(key.curve, ec.SECP256R1)
    ):
        raise KeyImportError(f"{alg} requires a {EC_CURVE_NAME} key")


def load_public_key(public_key_pem: str, alg: Algorithm) -> PublicKey:
    """Import an SPKI PEM public key for ``alg``."""
    try:
        loaded = serialization.load_pem_public_key(public_key_pem.encode())
    except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
        raise KeyImportError("Malformed SPKI public key") from exc
    expected = (EllipticCurvePublicKey,) if alg.key_type == "EC" else (RSAPublicKey,)
    _check_key_type(loaded, alg, expected)
    return loaded  # type: ignore[return-value]


def load_private_key(private_key_pem: str, alg: Algorithm) -> PrivateKey:
    """Import an unencrypted PKCS8 PEM private key for ``alg``."""
    try:
        loaded = serialization.load_pem_private_key(
            private_key_pem.encode(), password=None
        )
    except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
        raise KeyImportError("Malformed PKCS8 private key") from exc
    expected = (
        (EllipticCurvePrivateKey,) if alg.key_type == "EC" else (RSAPrivateKey,)
    )
    _check_key_type(loaded, alg, expected)
    return loaded  # type: ignore[return-value]


def _int_to_base64url(value: int, length: int | None = None) -> str:
    """Encode an integer as base64url without padding."""
    byte_length = length or (value.bit_length() + 7) // 8
    raw = value.to_bytes(byte_length, byteorder="big")
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode()


def public_jwk(public_key: PublicKey) -> dict[str, Any]:
    """Project a public key onto its JWK members (no ``kid``)."""
    if isinstance(public_key, EllipticCurvePublicKey):
        numbers = public_key.public_numbers()
        return {
            "kty": "EC",
            "crv": EC_CURVE_NAME,
            "x": _int_to_base64url(numbers.x, EC_COORDINATE_SIZE),
            "y": _int_to_base64url(numbers.y, EC_COORDINATE_SIZE),
        }
    rsa_numbers = public_key.public_numbers()
    return {
        "kty": "RSA",
        "n": _int_to_base64url(rsa_numbers.n),
        "e": _int_to_base64url(rsa_numbers.e),
    }


def to_jwks(keys: Iterable[KeyPair | VerificationKey]) -> JWKSResponse:
    """Build the public key set document for a well-known endpoint."""
    return JWKSResponse(keys=[JWKEntry.model_validate(key.jwk) for key in keys])
