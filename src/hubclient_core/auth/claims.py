"""Unverified JWT claim extraction.

Hub login tokens are JWTs. The client only needs their expiry to decide how
long a token may be cached, so claims are decoded without checking the
signature.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

import jwt

from hubclient_core.auth.exceptions import TokenError, TokenErrorKind


def utcnow() -> datetime:
    """Default clock used by token providers."""
    return datetime.now(UTC)


Clock = Callable[[], datetime]


@dataclass(frozen=True)
class TokenClaims:
    """Decoded (not verified) payload of a bearer token."""

    expiry: datetime | None = None
    issued_at: datetime | None = None
    subject: str | None = None
    issuer: str | None = None
    raw: dict[str, Any] = field(default_factory=dict)


def _timestamp(value: Any) -> datetime | None:
    # bool is an int subclass; a boolean "exp" is not a timestamp
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    try:
        return datetime.fromtimestamp(value, tz=UTC)
    except (OverflowError, OSError, ValueError):
        return None


def decode_claims(token: str) -> TokenClaims:
    """Decode the claims segment of a JWT without verifying it.

    Args:
        token: Encoded JWT.

    Returns:
        TokenClaims with whatever timestamps could be read.

    Raises:
        jwt.DecodeError: If the token is not a well-formed JWT.
    """
    payload = jwt.decode(token, options={"verify_signature": False})
    return TokenClaims(
        expiry=_timestamp(payload.get("exp")),
        issued_at=_timestamp(payload.get("iat")),
        subject=payload.get("sub"),
        issuer=payload.get("iss"),
        raw=payload,
    )


def token_expiry(token: str) -> datetime:
    """Return the expiry of a token.

    Raises:
        TokenError: kind NO_EXPIRY when the token cannot be decoded or has
            no usable ``exp`` claim.
    """
    try:
        claims = decode_claims(token)
    except jwt.PyJWTError as e:
        raise TokenError(f"parse token claims: {e}", TokenErrorKind.NO_EXPIRY) from e

    if claims.expiry is None:
        raise TokenError("token does not contain expiry", TokenErrorKind.NO_EXPIRY)
    return claims.expiry


def is_jwt_acceptable(token: str, now: datetime | None = None) -> bool:
    """Heuristic check that a token is a JWT that has not expired yet.

    Not a security check; it only tells whether a token is worth sending.
    """
    try:
        expiry = token_expiry(token)
    except TokenError:
        return False
    now = now or utcnow()
    return now < expiry
