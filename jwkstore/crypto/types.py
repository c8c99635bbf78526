"""Type definitions for key records, key pairs, JWKS, and verification."""

from datetime import UTC, datetime, timedelta
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator


class Algorithm(StrEnum):
    """Key algorithms the lifecycle manager can generate."""

    ES256 = "ES256"
    RS256 = "RS256"
    RSA_OAEP_512 = "RSA-OAEP-512"

    @property
    def key_type(self) -> str:
        """JWK ``kty`` of keys generated for this algorithm."""
        return "EC" if self is Algorithm.ES256 else "RSA"

    @property
    def is_signing(self) -> bool:
        """True for JWS algorithms usable by the token codec."""
        return self in (Algorithm.ES256, Algorithm.RS256)


SIGNING_ALGORITHMS = frozenset(alg for alg in Algorithm if alg.is_signing)


class Purpose(StrEnum):
    """Intended use of a key pair; each purpose owns a storage prefix."""

    SIGNING = "signing"
    ENCRYPTION = "encryption"

    @property
    def prefix(self) -> str:
        return f"{self.value}:key"

    def storage_key(self, key_id: str) -> str:
        """Storage key of the record with the given id."""
        return f"{self.prefix}:{key_id}"


EPOCH = datetime(1970, 1, 1, tzinfo=UTC)
MILLISECOND = timedelta(milliseconds=1)


def _from_epoch_millis(value: Any) -> Any:
    if isinstance(value, int | float) and not isinstance(value, bool):
        return EPOCH + value * MILLISECOND
    return value


class KeyRecord(BaseModel):
    """Persisted form of one key pair.

    Serialized with the field names ``id``, ``alg``, ``publicKey``,
    ``privateKey``, ``created`` and ``expired``; timestamps are epoch
    milliseconds. ``expired`` is absent while the key is current.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(min_length=1)
    alg: Algorithm
    public_key: str = Field(alias="publicKey")
    private_key: str = Field(alias="privateKey")
    created: datetime
    expired: datetime | None = None

    @field_validator("created", "expired", mode="before")
    @classmethod
    def _parse_millis(cls, value: Any) -> Any:
        return _from_epoch_millis(value)

    @field_serializer("created", "expired")
    def _dump_millis(self, value: datetime | None) -> int | None:
        if value is None:
            return None
        return (value - EPOCH) // MILLISECOND


class KeyPair(BaseModel):
    """A decoded key pair with live key handles and its public JWK."""

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    id: str
    alg: Algorithm
    created: datetime
    expired: datetime | None = None
    public_key: Any
    private_key: Any
    jwk: dict[str, Any]

    @property
    def is_valid(self) -> bool:
        """A key is current until an expiry has been recorded for it."""
        return self.expired is None


class VerificationKey(BaseModel):
    """Public-only key imported from an external JWKS document."""

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    id: str | None = None
    alg: str
    public_key: Any
    jwk: dict[str, Any]


class JWKEntry(BaseModel):
    """Public projection of one key in a published JWKS."""

    crv: str | None = None
    kty: str
    x: str | None = None
    y: str | None = None
    n: str | None = None
    e: str | None = None
    kid: str | None = None


class JWKSResponse(BaseModel):
    """JSON Web Key Set document."""

    keys: list[JWKEntry]


class VerifyOptions(BaseModel):
    """Claim checks applied when verifying a token."""

    audience: str | list[str] | None = None
    issuer: str | None = None
    leeway: int = 0
    require: list[str] = Field(default_factory=list)
