"""Exception hierarchy for key storage, key import, and token operations.

Signature and claim validation failures are not listed here: they are raised
by PyJWT (``jwt.InvalidTokenError`` and its subclasses) and surface unchanged.
"""


class JWKStoreError(Exception):
    """Base class for all jwkstore errors."""


class StorageError(JWKStoreError):
    """A storage adapter failed to list, read, or write a record."""


class KeyImportError(JWKStoreError):
    """A stored key record is malformed or uses an unknown algorithm."""

    def __init__(self, message: str, key_id: str | None = None) -> None:
        super().__init__(message)
        self.key_id = key_id


class NoSigningKeyError(JWKStoreError):
    """No key in the supplied set can sign with the requested algorithm."""

    def __init__(self, algorithm: str) -> None:
        super().__init__(f"No key available to sign JWT with algorithm {algorithm}")
        self.algorithm = algorithm


class NoVerificationKeyError(JWKStoreError):
    """No key in the supplied set carries a public key."""

    def __init__(self) -> None:
        super().__init__("No key available to verify JWT")


class KeyGenerationRaceError(JWKStoreError):
    """A freshly persisted key was not observed when storage was re-scanned."""

    def __init__(self, prefix: str, attempts: int) -> None:
        super().__init__(
            f"No valid key under {prefix!r} after {attempts} generation attempts; "
            "storage did not return the newly written key"
        )
        self.prefix = prefix
        self.attempts = attempts


class JWKSFetchError(JWKStoreError):
    """A remote JWKS document could not be fetched or parsed."""
