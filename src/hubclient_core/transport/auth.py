"""Authenticating transport layer.

Every outgoing request gets a ``User-Agent`` and an
``Authorization: Bearer <token>`` header, with the token taken from a
``TokenProvider``. If the provider fails, the request is never sent.
"""

import logging
from typing import TYPE_CHECKING

import httpx

from hubclient_core.transport.retry import cancel_event_of

if TYPE_CHECKING:
    from hubclient_core.auth.providers import TokenProvider

logger = logging.getLogger(__name__)


class AuthenticatedTransport(httpx.BaseTransport):
    """Inject user agent and bearer token, then delegate.

    Args:
        wrapped_transport: Transport that actually sends the request,
            normally a ``RetryTransport``.
        token_provider: Source of the bearer token.
        user_agent: Value for the ``User-Agent`` header, ``<product>/<version>``.
    """

    def __init__(
        self,
        *,
        wrapped_transport: httpx.BaseTransport,
        token_provider: "TokenProvider",
        user_agent: str,
    ) -> None:
        self._wrapped_transport = wrapped_transport
        self._token_provider = token_provider
        self.user_agent = user_agent

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        token = self._token_provider.ensure_token(cancel=cancel_event_of(request))

        request.headers["User-Agent"] = self.user_agent
        request.headers["Authorization"] = f"Bearer {token}"
        logger.debug(f"Sending authenticated {request.method} {request.url}")
        return self._wrapped_transport.handle_request(request)

    def close(self) -> None:
        self._wrapped_transport.close()
