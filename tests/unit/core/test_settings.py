"""Tests for environment-driven settings."""

import pytest
from pydantic import ValidationError

from jwkstore.core.settings import DatabaseSettings, KeySettings
from jwkstore.crypto.types import Algorithm


class TestKeySettings:
    """Tests for KeySettings."""

    def test_defaults(self) -> None:
        settings = KeySettings()
        assert settings.signing_algorithm == Algorithm.ES256
        assert settings.encryption_algorithm == Algorithm.RSA_OAEP_512
        assert settings.scan_page_size == 1
        assert settings.generation_attempts == 1

    def test_reads_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("JWKSTORE_SIGNING_ALGORITHM", "RS256")
        monkeypatch.setenv("JWKSTORE_JWKS_CACHE_MAX_AGE", "60")
        settings = KeySettings()
        assert settings.signing_algorithm == Algorithm.RS256
        assert settings.jwks_cache_control == "public, max-age=60"

    def test_rejects_zero_attempts(self) -> None:
        with pytest.raises(ValidationError):
            KeySettings(generation_attempts=0)


class TestDatabaseSettings:
    """Tests for DatabaseSettings."""

    def test_builds_postgres_url(self) -> None:
        db = DatabaseSettings(host="db", user="u", password="p", database="keys")
        assert db.async_url == "postgresql+asyncpg://u:p@db:5432/keys"

    def test_explicit_url_wins(self) -> None:
        db = DatabaseSettings(url="sqlite+aiosqlite:///keys.db")
        assert db.async_url == "sqlite+aiosqlite:///keys.db"
