"""Bearer token providers.

A token provider answers one question: "what bearer token should the next
request carry?" Two implementations exist:

- ``LoginTokenProvider`` exchanges a username/password for a short-lived JWT
  at ``POST {base}/users/login`` and caches it until its ``exp`` claim.
- ``AccessTokenProvider`` reads an access token from a credential source on
  every call. The source owns validity (it may rotate tokens externally), so
  nothing is cached.

Example:
    ```python
    from hubclient_core.auth import Credentials, LoginTokenProvider

    provider = LoginTokenProvider(
        Credentials("my-user", "my-password"),
        base_url="https://hub.docker.com/v2",
    )
    token = provider.ensure_token()  # logs in once, then served from cache
    ```
"""

import logging
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

import httpx

from hubclient_core.auth.claims import Clock, is_jwt_acceptable, token_expiry, utcnow
from hubclient_core.auth.credentials import CredentialSource, Credentials
from hubclient_core.auth.exceptions import CredentialError, TokenError, TokenErrorKind
from hubclient_core.errors.exceptions import DecodeError, RequestCancelledError, TransportError
from hubclient_core.errors.handler import raise_for_status
from hubclient_core.transport.deadline import DeadlineTransport
from hubclient_core.transport.retry import RetryTransport

logger = logging.getLogger(__name__)

DEFAULT_LOGIN_TIMEOUT = 60.0


class TokenProvider(Protocol):
    """Source of a currently valid bearer token."""

    def ensure_token(self, cancel: threading.Event | None = None) -> str:
        """Return a valid token, refreshing it if necessary."""
        ...

    def identity(self) -> str:
        """Username associated with the token (for display purposes)."""
        ...


@dataclass(frozen=True)
class CachedToken:
    """A token and the instant it stops being usable."""

    value: str
    expiry: datetime

    def is_valid_at(self, now: datetime) -> bool:
        # strict: a token expiring exactly now is already expired
        return now < self.expiry


class LoginTokenProvider:
    """Obtain tokens by logging in with a username and password.

    The cache is checked and refreshed under a single lock. The login call
    itself runs while the lock is held, so concurrent callers that find the
    cache cold wait for the first login instead of starting their own.

    Args:
        credentials: Username and password (or identity token).
        base_url: API base URL, e.g. ``https://hub.docker.com/v2``.
        http_client: Client used for the login call. When omitted a client
            with the retrying transport is created on first use and closed
            by ``close()``.
        clock: Callable returning the current aware datetime.
    """

    def __init__(
        self,
        credentials: Credentials,
        base_url: str,
        *,
        http_client: httpx.Client | None = None,
        clock: Clock | None = None,
    ):
        self._credentials = credentials
        self._login_url = f"{base_url.rstrip('/')}/users/login"
        self._http_client = http_client
        self._owns_client = http_client is None
        self._clock = clock or utcnow
        self._cached: CachedToken | None = None
        self._lock = threading.Lock()

    def ensure_token(self, cancel: threading.Event | None = None) -> str:
        """Return the cached token, logging in again once it has expired.

        Raises:
            TokenError: NO_EXPIRY if the issued token has no readable expiry.
            APIError: If the login endpoint answers with a non-success status.
            DecodeError: If the login response is not the expected JSON.
            TransportError: If the login request fails at the network level.
            RequestCancelledError: If ``cancel`` is set before logging in.
        """
        with self._lock:
            cached = self._cached
            if cached is not None and cached.is_valid_at(self._clock()):
                logger.debug(f"Using cached token for {self._credentials.username}")
                return cached.value

            if cancel is not None and cancel.is_set():
                raise RequestCancelledError("login cancelled")

            self._cached = self._login(cancel)
            return self._cached.value

    def invalidate(self) -> None:
        """Drop the cached token; the next ensure_token() logs in again."""
        with self._lock:
            self._cached = None

    def identity(self) -> str:
        return self._credentials.username

    def close(self) -> None:
        """Close the login HTTP client if this provider created it."""
        if self._owns_client and self._http_client is not None:
            self._http_client.close()
            self._http_client = None

    def _client(self) -> httpx.Client:
        if self._http_client is None:
            self._http_client = httpx.Client(
                transport=RetryTransport(
                    wrapped_transport=DeadlineTransport(
                        wrapped_transport=httpx.HTTPTransport(),
                        timeout=DEFAULT_LOGIN_TIMEOUT,
                    ),
                ),
                timeout=DEFAULT_LOGIN_TIMEOUT,
            )
        return self._http_client

    def _login(self, cancel: threading.Event | None) -> CachedToken:
        logger.info(f"Logging in to {self._login_url} as {self._credentials.username}")
        client = self._client()
        request = client.build_request(
            "POST",
            self._login_url,
            json={"username": self._credentials.username, "password": self._credentials.secret},
            headers={"Accept": "application/json"},
            extensions={"cancel_event": cancel} if cancel is not None else None,
        )
        try:
            response = client.send(request)
        except httpx.TransportError as e:
            raise TransportError(f"login request: {e}", url=self._login_url) from e
        try:
            raise_for_status(response, url=self._login_url)
            try:
                data = response.json()
            except ValueError as e:
                raise DecodeError(
                    f"decode token response: {e}", url=self._login_url, body=response.text
                ) from e
        finally:
            response.close()

        token = data.get("token") if isinstance(data, dict) else None
        if not token or not isinstance(token, str):
            raise DecodeError("login response has no token", url=self._login_url, body=response.text)

        expiry = token_expiry(token)
        logger.debug(f"Login token for {self._credentials.username} expires at {expiry.isoformat()}")
        return CachedToken(value=token, expiry=expiry)


class AccessTokenProvider:
    """Use an access token straight from a credential source.

    Args:
        source: Credential source holding the token as the secret.
        registry_key: Key to look the token up under.
        validate_jwt: Require the token to be an unexpired JWT. Desktop
            session tokens are JWTs; long-lived personal access tokens are
            opaque and need ``validate_jwt=False``.
        clock: Callable returning the current aware datetime.
    """

    def __init__(
        self,
        source: CredentialSource,
        registry_key: str,
        *,
        validate_jwt: bool = True,
        clock: Clock | None = None,
    ):
        self._source = source
        self._registry_key = registry_key
        self._validate_jwt = validate_jwt
        self._clock = clock or utcnow
        self._identity = ""
        self._lock = threading.Lock()

    def ensure_token(self, cancel: threading.Event | None = None) -> str:
        """Fetch the current token from the source.

        Raises:
            TokenError: SOURCE_UNAVAILABLE if the source cannot produce a
                usable token.
        """
        try:
            credentials = self._source.get_credentials(self._registry_key)
        except (CredentialError, OSError) as e:
            raise TokenError(
                f"get access token from store: {e}", TokenErrorKind.SOURCE_UNAVAILABLE
            ) from e

        if self._validate_jwt and not is_jwt_acceptable(credentials.secret, self._clock()):
            raise TokenError(
                f"no valid JWT found for {self._registry_key}", TokenErrorKind.SOURCE_UNAVAILABLE
            )

        with self._lock:
            self._identity = credentials.username
        return credentials.secret

    def identity(self) -> str:
        with self._lock:
            return self._identity


def login_provider_from_source(
    source: CredentialSource,
    registry_key: str,
    base_url: str,
    **kwargs,
) -> LoginTokenProvider:
    """Build a LoginTokenProvider from the credentials stored for a registry.

    Raises:
        CredentialError: If the source has no usable username/password.
    """
    credentials = source.get_credentials(registry_key)
    return LoginTokenProvider(credentials, base_url, **kwargs)


def access_token_provider_from_source(
    source: CredentialSource,
    registry_key: str,
    **kwargs,
) -> AccessTokenProvider:
    """Build an AccessTokenProvider, checking once that a token is available.

    Raises:
        TokenError: SOURCE_UNAVAILABLE if no valid access token is available.
    """
    provider = AccessTokenProvider(source, registry_key, **kwargs)
    provider.ensure_token()
    return provider
