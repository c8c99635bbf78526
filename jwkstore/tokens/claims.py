"""Typed access to JWT payload claims.

Registered claims (RFC 7519 section 4.1) are exposed as properties; any other
claim is read and written with ``get``/``set``. Timestamps (``exp``, ``iat``,
``nbf``) are stored as integer seconds since the epoch and surface as aware
UTC datetimes. ``exp`` is an absolute timestamp, not a duration.

Applications add their own claims by subclassing ``Claims`` (or by writing
any class satisfying ``ClaimsView``) and passing the class as
``claims_type`` when decoding or verifying.
"""

import math
from collections.abc import Mapping, Sequence
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, Protocol, Self, runtime_checkable

if TYPE_CHECKING:
    from jwkstore.crypto.types import KeyPair, VerificationKey, VerifyOptions


@runtime_checkable
class ClaimsView(Protocol):
    """Anything the token codec can sign and build from a payload."""

    @property
    def payload(self) -> dict[str, Any]: ...

    def get(self, name: str, default: Any = None) -> Any: ...

    def set(self, name: str, value: Any) -> None: ...


def _to_seconds(value: datetime) -> int:
    return int(value.timestamp())


def _from_seconds(value: int | float) -> datetime | None:
    try:
        return datetime.fromtimestamp(value, UTC)
    except (OverflowError, OSError, ValueError):
        # outside the platform datetime range
        return None


def _is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, int | float):
        return False
    return not isinstance(value, float) or math.isfinite(value)


class Claims:
    """Payload-backed claims accessor."""

    def __init__(self, payload: Mapping[str, Any] | None = None) -> None:
        self._payload: dict[str, Any] = dict(payload or {})

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._payload!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Claims):
            return NotImplemented
        return type(self) is type(other) and self._payload == other._payload

    def __contains__(self, name: object) -> bool:
        return name in self._payload

    @property
    def payload(self) -> dict[str, Any]:
        """The underlying claim mapping; setters write through to it."""
        return self._payload

    def to_dict(self) -> dict[str, Any]:
        return dict(self._payload)

    def has(self, name: str) -> bool:
        return name in self._payload

    def get(self, name: str, default: Any = None) -> Any:
        """Raw value of any claim, or ``default`` when absent."""
        return self._payload.get(name, default)

    def set(self, name: str, value: Any) -> None:
        """Store a raw claim value as given."""
        self._payload[name] = value

    def _string(self, name: str) -> str | None:
        value = self._payload.get(name)
        return value if isinstance(value, str) else None

    def _number(self, name: str) -> int | None:
        value = self._payload.get(name)
        return int(value) if _is_number(value) else None

    def _date(self, name: str) -> datetime | None:
        value = self._payload.get(name)
        return _from_seconds(value) if _is_number(value) else None

    def _put(self, name: str, value: Any) -> None:
        if value is None:
            self._payload.pop(name, None)
        else:
            self._payload[name] = value

    @property
    def issuer(self) -> str | None:
        """``iss``: who issued the token."""
        return self._string("iss")

    @issuer.setter
    def issuer(self, value: str | None) -> None:
        self._put("iss", value)

    @property
    def subject(self) -> str | None:
        """``sub``: who the token is about."""
        return self._string("sub")

    @subject.setter
    def subject(self, value: str | None) -> None:
        self._put("sub", value)

    @property
    def audience(self) -> str | list[str] | None:
        """``aud``: one recipient or a list of recipients."""
        value = self._payload.get("aud")
        if isinstance(value, str):
            return value
        if isinstance(value, list) and all(isinstance(v, str) for v in value):
            return value
        return None

    @audience.setter
    def audience(self, value: str | Sequence[str] | None) -> None:
        if value is not None and not isinstance(value, str):
            value = list(value)
        self._put("aud", value)

    @property
    def id(self) -> str | None:
        """``jti``: unique token identifier."""
        return self._string("jti")

    @id.setter
    def id(self, value: str | None) -> None:
        self._put("jti", value)

    @property
    def issued_at(self) -> datetime | None:
        """``iat`` as a datetime."""
        return self._date("iat")

    @issued_at.setter
    def issued_at(self, value: datetime | None) -> None:
        self._put("iat", None if value is None else _to_seconds(value))

    @property
    def not_before(self) -> datetime | None:
        """``nbf`` as a datetime."""
        return self._date("nbf")

    @not_before.setter
    def not_before(self, value: datetime | None) -> None:
        self._put("nbf", None if value is None else _to_seconds(value))

    @property
    def expires_in(self) -> int | None:
        """Raw ``exp`` claim in epoch seconds."""
        return self._number("exp")

    @expires_in.setter
    def expires_in(self, value: int | None) -> None:
        self._put("exp", value)

    @property
    def expires_at(self) -> datetime | None:
        """``exp`` as a datetime."""
        return self._date("exp")

    @expires_at.setter
    def expires_at(self, value: datetime | None) -> None:
        self._put("exp", None if value is None else _to_seconds(value))

    @property
    def expired(self) -> bool:
        """True once ``exp`` has passed; tokens without ``exp`` never expire."""
        exp = self._payload.get("exp")
        if not _is_number(exp):
            return False
        return exp < datetime.now(UTC).timestamp()

    def sign(
        self, algorithm: str, keys: Sequence["KeyPair | VerificationKey"]
    ) -> str:
        """Sign these claims with the first key matching ``algorithm``."""
        from jwkstore.tokens.codec import sign

        return sign(self, algorithm, keys)

    @classmethod
    def verify(
        cls,
        token: str,
        keys: Sequence["KeyPair | VerificationKey"],
        options: "VerifyOptions | None" = None,
    ) -> Self:
        """Verify ``token`` and wrap its payload in this class."""
        from jwkstore.tokens.codec import verify

        return verify(token, keys, options, claims_type=cls)

    @classmethod
    def decode(cls, token: str) -> Self:
        """Wrap an unverified token payload in this class."""
        from jwkstore.tokens.codec import decode

        return decode(token, claims_type=cls)
