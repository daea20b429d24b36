"""Factory for the standard hub transport stack."""

from typing import TYPE_CHECKING

import httpx

from hubclient_core.transport.auth import AuthenticatedTransport
from hubclient_core.transport.deadline import DEFAULT_DEADLINE, DeadlineTransport
from hubclient_core.transport.retry import RetryTransport

if TYPE_CHECKING:
    from hubclient_core.auth.providers import TokenProvider


def create_transport_stack(
    *,
    token_provider: "TokenProvider",
    user_agent: str,
    timeout: float = DEFAULT_DEADLINE,
    max_retries: int = 4,
    backoff_factor: float = 1.0,
    max_backoff: float = 30.0,
    retry_status_codes: frozenset[int] | None = None,
    base_transport: httpx.BaseTransport | None = None,
) -> AuthenticatedTransport:
    """Build ``AuthenticatedTransport(RetryTransport(DeadlineTransport(base_transport)))``.

    Authentication sits outside the retry layer, so one logical request
    asks the provider for a token once and every retry reuses it. The
    deadline sits inside it, so each attempt gets its own ``timeout``.

    Args:
        token_provider: Source of bearer tokens.
        user_agent: ``User-Agent`` header value.
        timeout: Overall deadline for one attempt, in seconds.
        max_retries: Retry attempts after the first try.
        backoff_factor: Exponential backoff multiplier, in seconds.
        max_backoff: Cap for a single backoff delay, in seconds.
        retry_status_codes: 5xx codes treated as transient.
        base_transport: Transport that talks to the network. Defaults to
            ``httpx.HTTPTransport()``; tests pass ``httpx.MockTransport``.
    """
    deadline = DeadlineTransport(
        wrapped_transport=base_transport or httpx.HTTPTransport(),
        timeout=timeout,
    )
    retry = RetryTransport(
        wrapped_transport=deadline,
        max_retries=max_retries,
        backoff_factor=backoff_factor,
        max_backoff=max_backoff,
        retry_status_codes=retry_status_codes,
    )
    return AuthenticatedTransport(
        wrapped_transport=retry,
        token_provider=token_provider,
        user_agent=user_agent,
    )
