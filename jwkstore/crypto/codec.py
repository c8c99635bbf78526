"""Conversion between stored key record blobs and live key pairs."""

from pydantic import ValidationError

from jwkstore.core.errors import KeyImportError
from jwkstore.crypto.keys import load_private_key, load_public_key, public_jwk
from jwkstore.crypto.types import KeyPair, KeyRecord, Purpose


def encode(record: KeyRecord) -> bytes:
    """Serialize a key record to its JSON storage blob."""
    return record.model_dump_json(by_alias=True, exclude_none=True).encode()


def parse_record(blob: bytes | str) -> KeyRecord:
    """Parse a storage blob without importing its key material."""
    try:
        return KeyRecord.model_validate_json(blob)
    except ValidationError as exc:
        raise KeyImportError(
            f"Malformed key record ({exc.error_count()} invalid fields)"
        ) from exc


def import_record(record: KeyRecord, purpose: Purpose) -> KeyPair:
    """Import a record's PEM material and derive its public JWK."""
    try:
        public_key = load_public_key(record.public_key, record.alg)
        private_key = load_private_key(record.private_key, record.alg)
    except KeyImportError as exc:
        exc.key_id = record.id
        raise
    jwk = public_jwk(public_key)
    jwk["kid"] = record.id
    if purpose is Purpose.SIGNING:
        jwk["use"] = "sig"
    return KeyPair(
        id=record.id,
        alg=record.alg,
        created=record.created,
        expired=record.expired,
        public_key=public_key,
        private_key=private_key,
        jwk=jwk,
    )


def decode(blob: bytes | str, purpose: Purpose) -> KeyPair:
    """Decode a storage blob into a key pair; raises ``KeyImportError``."""
    return import_record(parse_record(blob), purpose)
