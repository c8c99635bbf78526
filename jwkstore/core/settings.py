"""Application settings loaded from environment variables."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from jwkstore.crypto.types import Algorithm

SCAN_PAGE_SIZE_DEFAULT = 1
GENERATION_ATTEMPTS_DEFAULT = 1
JWKS_CACHE_MAX_AGE_DEFAULT = 3600
REMOTE_JWKS_TIMEOUT_DEFAULT = 5.0
DB_POOL_SIZE_DEFAULT = 5
DB_MAX_OVERFLOW_DEFAULT = 10
DB_PORT_DEFAULT = 5432


class DatabaseSettings(BaseSettings):
    """Connection settings for the SQL storage adapter."""

    model_config = SettingsConfigDict(env_prefix="JWKSTORE_DB_")

    url: str = ""
    host: str = "localhost"
    port: int = DB_PORT_DEFAULT
    user: str = "jwkstore"
    password: str = "jwkstore"
    database: str = "jwkstore"
    pool_size: int = DB_POOL_SIZE_DEFAULT
    max_overflow: int = DB_MAX_OVERFLOW_DEFAULT

    @property
    def async_url(self) -> str:
        """Explicit URL if set, otherwise an asyncpg PostgreSQL URL."""
        if self.url:
            return self.url
        return (
            f"postgresql+asyncpg://{self.user}:{self.password}"
            f"@{self.host}:{self.port}/{self.database}"
        )


class KeySettings(BaseSettings):
    """Key lifecycle and JWKS publication settings."""

    model_config = SettingsConfigDict(env_prefix="JWKSTORE_")

    signing_algorithm: Algorithm = Algorithm.ES256
    encryption_algorithm: Algorithm = Algorithm.RSA_OAEP_512
    scan_page_size: int = Field(default=SCAN_PAGE_SIZE_DEFAULT, ge=1)
    generation_attempts: int = Field(default=GENERATION_ATTEMPTS_DEFAULT, ge=1)
    jwks_cache_max_age: int = JWKS_CACHE_MAX_AGE_DEFAULT
    remote_jwks_timeout: float = REMOTE_JWKS_TIMEOUT_DEFAULT

    @property
    def jwks_cache_control(self) -> str:
        """Cache-Control header value for the published key set."""
        return f"public, max-age={self.jwks_cache_max_age}"
