"""Retry transport for resilient hub clients.

``RetryTransport`` wraps any ``httpx.BaseTransport`` and retries:

| Condition | Retried? |
|-----------|----------|
| Network failure (``httpx.TransportError``) | Yes |
| Configured 5xx (default 500, 502, 503, 504) | Yes |
| Any 4xx | Never |
| Anything else | No |

Delays grow exponentially, ``backoff_factor * 2 ** (attempt - 1)``, capped
at ``max_backoff``. The retry decision lives in the pure function
``should_retry`` so it can be tested on its own.

Cancellation: when a request carries a ``threading.Event`` in
``request.extensions["cancel_event"]``, the event is checked before and after every
attempt and backoff waits end as soon as it is set.

## Example

```python
import httpx

from hubclient_core.transport.retry import RetryTransport

transport = RetryTransport(wrapped_transport=httpx.HTTPTransport(), max_retries=4)

with httpx.Client(transport=transport) as client:
    response = client.get("https://hub.docker.com/v2/repositories/library/")
```
"""

import logging
import threading
import time

import httpx

from hubclient_core.errors.exceptions import RequestCancelledError

logger = logging.getLogger(__name__)

CANCEL_EVENT_EXTENSION = "cancel_event"

DEFAULT_RETRY_STATUS_CODES: frozenset[int] = frozenset([500, 502, 503, 504])


def should_retry(
    status_code: int | None,
    error: Exception | None,
    retry_status_codes: frozenset[int] = DEFAULT_RETRY_STATUS_CODES,
) -> bool:
    """Decide whether one attempt's outcome is worth retrying.

    Args:
        status_code: Response status, or None if no response arrived.
        error: Exception raised by the attempt, if any.
        retry_status_codes: 5xx codes that count as transient.

    Returns:
        True if the attempt should be retried.
    """
    if error is not None:
        return isinstance(error, httpx.TransportError)
    if status_code is None:
        return False
    if 400 <= status_code < 500:
        return False
    return status_code in retry_status_codes


def cancel_event_of(request: httpx.Request) -> threading.Event | None:
    """Return the cancellation event attached to a request, if any."""
    return request.extensions.get(CANCEL_EVENT_EXTENSION)


class RetryTransport(httpx.BaseTransport):
    """Retry transient network failures and server errors with backoff.

    Args:
        wrapped_transport: The underlying transport to wrap
        max_retries: Maximum number of retry attempts (default: 4)
        backoff_factor: Multiplier for exponential backoff (default: 1.0)
        max_backoff: Maximum backoff time in seconds (default: 30)
        retry_status_codes: 5xx codes to retry (default: 500, 502, 503, 504);
            an empty set disables status-based retries

    Example:
        ```python
        transport = RetryTransport(
            wrapped_transport=httpx.HTTPTransport(),
            max_retries=4,
            max_backoff=30,
        )
        ```
    """

    def __init__(
        self,
        *,
        wrapped_transport: httpx.BaseTransport,
        max_retries: int = 4,
        backoff_factor: float = 1.0,
        max_backoff: float = 30.0,
        retry_status_codes: frozenset[int] | None = None,
    ) -> None:
        self._wrapped_transport = wrapped_transport
        self.max_retries = max_retries
        self.backoff_factor = backoff_factor
        self.max_backoff = max_backoff
        self.retry_status_codes = DEFAULT_RETRY_STATUS_CODES if retry_status_codes is None else retry_status_codes

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        """Send the request, retrying transient failures.

        Returns:
            The first non-retryable response, or the last retryable one once
            retries are exhausted.

        Raises:
            httpx.TransportError: The last network error once retries are
                exhausted.
            RequestCancelledError: If the request's cancel event is set.
        """
        cancel_event = cancel_event_of(request)
        retries = 0

        while True:
            self._check_cancelled(request, cancel_event)
            try:
                response = self._wrapped_transport.handle_request(request)
            except httpx.TransportError as e:
                if retries >= self.max_retries or not should_retry(None, e, self.retry_status_codes):
                    raise

                retries += 1
                delay = self._calculate_backoff_delay(retries)
                logger.warning(
                    f"Request {request.method} {request.url} failed with {e!r}, "
                    f"retrying in {delay}s (attempt {retries}/{self.max_retries})"
                )
                self._sleep(request, cancel_event, delay)
                continue

            if cancel_event is not None and cancel_event.is_set():
                response.close()
                raise RequestCancelledError(f"Request {request.method} {request.url} cancelled")

            if retries >= self.max_retries or not should_retry(
                response.status_code, None, self.retry_status_codes
            ):
                return response

            retries += 1
            delay = self._calculate_backoff_delay(retries)
            logger.warning(
                f"Request {request.method} {request.url} failed with {response.status_code}, "
                f"retrying in {delay}s (attempt {retries}/{self.max_retries})"
            )
            # the discarded attempt's connection goes back to the pool
            response.close()
            self._sleep(request, cancel_event, delay)

    def close(self) -> None:
        self._wrapped_transport.close()

    def _check_cancelled(self, request: httpx.Request, cancel_event: threading.Event | None) -> None:
        if cancel_event is not None and cancel_event.is_set():
            raise RequestCancelledError(f"Request {request.method} {request.url} cancelled")

    def _sleep(self, request: httpx.Request, cancel_event: threading.Event | None, delay: float) -> None:
        if cancel_event is None:
            time.sleep(delay)
        elif cancel_event.wait(delay):
            raise RequestCancelledError(f"Request {request.method} {request.url} cancelled")

    def _calculate_backoff_delay(self, retry_number: int) -> float:
        """Calculate exponential backoff delay with max_backoff cap.

        Uses formula: min(backoff_factor * (2 ** (retry_number - 1)), max_backoff)
        Default backoff sequence: 1, 2, 4, 8 seconds

        Args:
            retry_number: Current retry attempt (1-indexed)

        Returns:
            Delay in seconds (capped at max_backoff)
        """
        delay = self.backoff_factor * (2 ** (retry_number - 1))
        return min(delay, self.max_backoff)
