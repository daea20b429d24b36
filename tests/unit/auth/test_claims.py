"""Tests for unverified JWT claim decoding."""

from datetime import UTC, datetime, timedelta

import jwt
import pytest

from hubclient_core.auth.claims import decode_claims, is_jwt_acceptable, token_expiry
from hubclient_core.auth.exceptions import TokenError, TokenErrorKind
from hubclient_core.testing import TEST_SIGNING_KEY, make_jwt


@pytest.mark.unit
class TestDecodeClaims:
    def test_reads_standard_claims(self):
        expiry = datetime(2030, 1, 1, tzinfo=UTC)
        token = make_jwt(expiry, sub="alice", iss="hub", iat=1_700_000_000)

        claims = decode_claims(token)

        assert claims.expiry == expiry
        assert claims.issued_at == datetime.fromtimestamp(1_700_000_000, tz=UTC)
        assert claims.subject == "alice"
        assert claims.issuer == "hub"
        assert claims.raw["sub"] == "alice"

    def test_signature_is_not_checked(self):
        expiry = datetime(2030, 1, 1, tzinfo=UTC)
        token = jwt.encode({"exp": int(expiry.timestamp())}, "some-other-key-of-sufficient-length", algorithm="HS256")

        assert decode_claims(token).expiry == expiry

    def test_expired_token_still_decodes(self):
        expiry = datetime(2000, 1, 1, tzinfo=UTC)

        assert decode_claims(make_jwt(expiry)).expiry == expiry

    def test_missing_exp(self):
        assert decode_claims(make_jwt(include_exp=False)).expiry is None

    def test_non_numeric_exp_ignored(self):
        token = jwt.encode({"exp": "tomorrow"}, TEST_SIGNING_KEY, algorithm="HS256")

        assert decode_claims(token).expiry is None

    def test_malformed_token(self):
        with pytest.raises(jwt.DecodeError):
            decode_claims("not-a-jwt")


@pytest.mark.unit
class TestTokenExpiry:
    def test_returns_expiry(self):
        expiry = datetime(2030, 6, 1, 8, 30, tzinfo=UTC)

        assert token_expiry(make_jwt(expiry)) == expiry

    def test_no_exp_claim(self):
        with pytest.raises(TokenError) as exc_info:
            token_expiry(make_jwt(include_exp=False))

        assert exc_info.value.kind is TokenErrorKind.NO_EXPIRY
        assert "token does not contain expiry" in str(exc_info.value)

    def test_garbage_token(self):
        with pytest.raises(TokenError) as exc_info:
            token_expiry("garbage")

        assert exc_info.value.kind is TokenErrorKind.NO_EXPIRY
        assert isinstance(exc_info.value.__cause__, jwt.PyJWTError)


@pytest.mark.unit
class TestIsJwtAcceptable:
    def test_unexpired(self):
        now = datetime(2025, 1, 1, tzinfo=UTC)

        assert is_jwt_acceptable(make_jwt(now + timedelta(minutes=5)), now)

    def test_expiring_exactly_now_is_not_acceptable(self):
        now = datetime(2025, 1, 1, tzinfo=UTC)

        assert not is_jwt_acceptable(make_jwt(now), now)

    def test_expired(self):
        now = datetime(2025, 1, 1, tzinfo=UTC)

        assert not is_jwt_acceptable(make_jwt(now - timedelta(seconds=1)), now)

    def test_opaque_access_token(self):
        assert not is_jwt_acceptable("dckr_pat_0123456789abcdef")

    def test_no_exp(self):
        assert not is_jwt_acceptable(make_jwt(include_exp=False))
