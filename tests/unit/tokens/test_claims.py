"""Tests for the claims accessor."""

import time
from datetime import UTC, datetime, timedelta

import pytest

from jwkstore.tokens.claims import Claims, ClaimsView

NOW = int(time.time())

PAYLOAD = {
    "iss": "https://example.com",
    "sub": "subject",
    "aud": "audience",
    "jti": "id",
    "exp": NOW + 60,
    "iat": NOW,
    "nbf": NOW,
    "uid": "user-42",
}


class TestRegisteredClaims:
    """Tests for typed registered-claim access."""

    def test_reads_payload(self) -> None:
        claims = Claims(PAYLOAD)
        assert claims.issuer == "https://example.com"
        assert claims.subject == "subject"
        assert claims.audience == "audience"
        assert claims.id == "id"
        assert claims.expires_in == NOW + 60
        assert claims.expires_at == datetime.fromtimestamp(NOW + 60, UTC)
        assert claims.issued_at == datetime.fromtimestamp(NOW, UTC)
        assert claims.not_before == datetime.fromtimestamp(NOW, UTC)
        assert claims.expired is False

    def test_unset_claims_read_none(self) -> None:
        claims = Claims()
        assert claims.issuer is None
        assert claims.subject is None
        assert claims.audience is None
        assert claims.id is None
        assert claims.issued_at is None
        assert claims.not_before is None
        assert claims.expires_in is None
        assert claims.expires_at is None

    def test_wrong_types_read_none(self) -> None:
        claims = Claims({"iss": 5, "aud": {"a": 1}, "exp": "soon", "iat": True})
        assert claims.issuer is None
        assert claims.audience is None
        assert claims.expires_in is None
        assert claims.issued_at is None

    def test_audience_list(self) -> None:
        claims = Claims()
        claims.audience = ("a", "b")
        assert claims.audience == ["a", "b"]
        assert claims.payload["aud"] == ["a", "b"]

    @pytest.mark.parametrize("value", ["https://example.org", "x"])
    def test_set_then_get_issuer(self, value: str) -> None:
        claims = Claims(PAYLOAD)
        claims.issuer = value
        assert claims.issuer == value
        assert claims.payload["iss"] == value

    def test_setting_none_removes_claim(self) -> None:
        claims = Claims(PAYLOAD)
        claims.subject = None
        assert "sub" not in claims
        assert claims.subject is None

    def test_dates_written_as_seconds(self) -> None:
        moment = datetime(2030, 1, 1, 12, 0, 30, 999_000, tzinfo=UTC)
        claims = Claims()
        claims.issued_at = moment
        claims.not_before = moment
        claims.expires_at = moment + timedelta(hours=1)
        assert claims.payload["iat"] == int(moment.timestamp())
        assert claims.payload["nbf"] == int(moment.timestamp())
        assert claims.payload["exp"] == int(moment.timestamp()) + 3600
        assert claims.issued_at == moment.replace(microsecond=0)

    def test_does_not_mutate_source_mapping(self) -> None:
        source = dict(PAYLOAD)
        claims = Claims(source)
        claims.issuer = "changed"
        assert source["iss"] == "https://example.com"


class TestExpiry:
    """Tests for the expired flag."""

    def test_past_exp_is_expired(self) -> None:
        assert Claims({"exp": NOW - 1}).expired is True

    def test_future_exp_is_not_expired(self) -> None:
        assert Claims({"exp": NOW + 3600}).expired is False

    def test_no_exp_never_expires(self) -> None:
        assert Claims({"iat": 0}).expired is False

    def test_expires_in_setter(self) -> None:
        claims = Claims()
        claims.expires_in = NOW - 10
        assert claims.expired is True
        claims.expires_in = None
        assert claims.expired is False

    def test_unrepresentable_dates_read_none(self) -> None:
        claims = Claims({"exp": 1e20, "iat": -1e20, "nbf": 10**400})
        assert claims.expires_at is None
        assert claims.issued_at is None
        assert claims.not_before is None

    def test_far_future_exp_is_not_expired(self) -> None:
        assert Claims({"exp": 1e20}).expired is False
        assert Claims({"exp": 10**400}).expired is False

    def test_far_past_exp_is_expired(self) -> None:
        assert Claims({"exp": -1e20}).expired is True

    def test_non_finite_exp_is_ignored(self) -> None:
        claims = Claims({"exp": float("inf")})
        assert claims.expires_in is None
        assert claims.expires_at is None
        assert claims.expired is False


class TestCustomClaims:
    """Tests for passthrough access to application claims."""

    def test_get_custom(self) -> None:
        claims = Claims(PAYLOAD)
        assert claims.get("uid") == "user-42"
        assert claims.get("missing") is None
        assert claims.get("missing", "fallback") == "fallback"

    def test_set_custom(self) -> None:
        claims = Claims(PAYLOAD)
        claims.set("uid", "user-7")
        claims.set("roles", ["admin"])
        assert claims.get("uid") == "user-7"
        assert claims.has("roles")
        assert claims.to_dict()["roles"] == ["admin"]

    def test_satisfies_view_protocol(self) -> None:
        assert isinstance(Claims(), ClaimsView)

    def test_equality_by_type_and_payload(self) -> None:
        class Other(Claims):
            pass

        assert Claims(PAYLOAD) == Claims(PAYLOAD)
        assert Claims(PAYLOAD) != Other(PAYLOAD)
