"""Transport layer components for composable HTTP middleware.

Transport layers wrap ``httpx.BaseTransport`` to add behavior around each
request:

Modules:
    retry: Retry with exponential backoff for network failures and 5xx
    deadline: Overall per-attempt deadline and mid-flight cancellation
    auth: User-Agent and bearer token injection
    factory: Factory function for the standard transport stack

Example:
    ```python
    from hubclient_core.transport import create_transport_stack

    transport = create_transport_stack(
        token_provider=provider,
        user_agent="hubclient-core/dev",
    )
    ```
"""

from hubclient_core.transport.auth import AuthenticatedTransport
from hubclient_core.transport.deadline import DeadlineTransport
from hubclient_core.transport.factory import create_transport_stack
from hubclient_core.transport.retry import RetryTransport, should_retry

__all__ = [
    "AuthenticatedTransport",
    "DeadlineTransport",
    "RetryTransport",
    "create_transport_stack",
    "should_retry",
]
