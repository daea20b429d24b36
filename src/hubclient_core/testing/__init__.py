"""Testing utilities for hub clients.

Helpers for building fake servers with ``httpx.MockTransport``: signed test
JWTs, a controllable clock and paginated response payloads.

Example:
    ```python
    import httpx

    from hubclient_core.testing import FrozenClock, make_jwt, page_payload


    def test_lists_repositories():
        clock = FrozenClock()
        token = make_jwt(expires_at=clock.now + timedelta(hours=1))

        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path.endswith("/users/login"):
                return httpx.Response(200, json={"token": token})
            return httpx.Response(200, json=page_payload([{"name": "alpine"}]))
    ```
"""

from datetime import UTC, datetime, timedelta
from typing import Any

import jwt

TEST_SIGNING_KEY = "hubclient-core-test-signing-key-32b"


def make_jwt(expires_at: datetime | None = None, *, include_exp: bool = True, **claims: Any) -> str:
    """Return an HS256 JWT for tests.

    Args:
        expires_at: Value of the ``exp`` claim. Defaults to one hour from now.
        include_exp: Set to False to produce a token without ``exp``.
        **claims: Extra claims, e.g. ``sub="alice"``.
    """
    payload = dict(claims)
    if include_exp:
        expires_at = expires_at or datetime.now(UTC) + timedelta(hours=1)
        payload["exp"] = int(expires_at.timestamp())
    return jwt.encode(payload, TEST_SIGNING_KEY, algorithm="HS256")


class FrozenClock:
    """Clock that only moves when told to.

    Instances are callables returning an aware UTC datetime, so they can be
    passed wherever a provider accepts ``clock=``.
    """

    def __init__(self, now: datetime | None = None):
        # whole seconds, matching the precision of JWT timestamps
        self.now = (now or datetime.now(UTC)).replace(microsecond=0)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **delta: float) -> datetime:
        """Move the clock forward by ``timedelta(**delta)`` and return the new time."""
        self.now += timedelta(**delta)
        return self.now


def page_payload(
    results: list[Any],
    next: str | None = None,
    previous: str | None = None,
    count: int | None = None,
) -> dict[str, Any]:
    """Build a list endpoint response body."""
    return {
        "count": len(results) if count is None else count,
        "next": next,
        "previous": previous,
        "results": results,
    }


__all__ = ["TEST_SIGNING_KEY", "FrozenClock", "make_jwt", "page_payload"]
