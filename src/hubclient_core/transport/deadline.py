"""Per-attempt deadline and prompt cancellation.

``httpx.Timeout`` only bounds each connect, read and write separately, so a
server that trickles one byte at a time can hold a request open forever.
``DeadlineTransport`` puts one overall deadline on every attempt and reads
the whole body before handing the response on, checking the deadline
between chunks.

The attempt runs on a worker thread while the calling thread waits, so a
cancel event set mid-request (see ``CANCEL_EVENT_EXTENSION``) or an expired
deadline returns control to the caller at once. The abandoned worker stops
at its next chunk, or when httpx's own socket timeouts fire, and closes the
response it was reading.

| Outcome | Raised to the caller |
|---------|----------------------|
| Cancel event set | ``RequestCancelledError`` |
| Deadline passed | ``httpx.ReadTimeout`` (a network error, so retried) |
| Wrapped transport failed | The original exception |
"""

import logging
import threading
import time

import httpx

from hubclient_core.errors.exceptions import RequestCancelledError
from hubclient_core.transport.retry import cancel_event_of

logger = logging.getLogger(__name__)

DEFAULT_DEADLINE = 60.0

# how often a waiting caller looks at the cancel event
CANCEL_POLL_INTERVAL = 0.05


class _Attempt:
    """One request running on a worker thread."""

    def __init__(self, transport: httpx.BaseTransport, request: httpx.Request, deadline: float):
        self.transport = transport
        self.request = request
        self.deadline = deadline
        self.done = threading.Event()
        self.abandoned = threading.Event()
        self.response: httpx.Response | None = None
        self.error: Exception | None = None

    def run(self) -> None:
        try:
            self.response = self._send()
        except Exception as e:
            self.error = e
        finally:
            self.done.set()

    def _send(self) -> httpx.Response:
        response = self.transport.handle_request(self.request)
        try:
            chunks = []
            for chunk in response.stream:
                if self.abandoned.is_set():
                    raise RequestCancelledError(f"Request {self.request.method} {self.request.url} abandoned")
                if time.monotonic() >= self.deadline:
                    raise httpx.ReadTimeout("Request deadline exceeded while reading body", request=self.request)
                chunks.append(chunk)
        finally:
            response.close()

        return httpx.Response(
            status_code=response.status_code,
            headers=response.headers,
            stream=httpx.ByteStream(b"".join(chunks)),
            extensions=response.extensions,
            request=self.request,
        )


class DeadlineTransport(httpx.BaseTransport):
    """Bound every attempt by an overall deadline and honor mid-flight cancellation.

    Args:
        wrapped_transport: Transport that talks to the network.
        timeout: Overall deadline for one attempt, in seconds, covering
            connect, headers and the full body (default: 60).

    Example:
        ```python
        transport = RetryTransport(
            wrapped_transport=DeadlineTransport(
                wrapped_transport=httpx.HTTPTransport(),
                timeout=60.0,
            ),
        )
        ```
    """

    def __init__(self, *, wrapped_transport: httpx.BaseTransport, timeout: float = DEFAULT_DEADLINE) -> None:
        self._wrapped_transport = wrapped_transport
        self.timeout = timeout

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        """Send one attempt and return it with its body already read.

        Raises:
            RequestCancelledError: If the request's cancel event is set before
                the attempt completes.
            httpx.ReadTimeout: If the attempt is still running at the deadline.
        """
        cancel_event = cancel_event_of(request)
        deadline = time.monotonic() + self.timeout
        attempt = _Attempt(self._wrapped_transport, request, deadline)
        worker = threading.Thread(
            target=attempt.run,
            name=f"hubclient-{request.method.lower()}",
            daemon=True,
        )
        worker.start()

        while not attempt.done.wait(self._wait_interval(deadline, cancel_event)):
            if cancel_event is not None and cancel_event.is_set():
                attempt.abandoned.set()
                logger.debug(f"Abandoning cancelled {request.method} {request.url}")
                raise RequestCancelledError(f"Request {request.method} {request.url} cancelled")
            if time.monotonic() >= deadline:
                attempt.abandoned.set()
                logger.warning(f"{request.method} {request.url} exceeded its {self.timeout}s deadline")
                raise httpx.ReadTimeout(f"Request deadline of {self.timeout}s exceeded", request=request)

        if attempt.error is not None:
            raise attempt.error
        return attempt.response

    def close(self) -> None:
        self._wrapped_transport.close()

    @staticmethod
    def _wait_interval(deadline: float, cancel_event: threading.Event | None) -> float:
        remaining = max(deadline - time.monotonic(), 0.0)
        if cancel_event is None:
            return remaining
        return min(remaining, CANCEL_POLL_INTERVAL)
