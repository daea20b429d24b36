"""Hub API client.

``HubClient`` sends JSON requests through the authenticated, retrying
transport stack, classifies responses and walks paginated list endpoints.
Typed helpers for individual endpoints live under ``client.access_tokens``,
``client.repositories`` and ``client.orgs``.

Example:
    ```python
    from hubclient_core import HubClient, HubClientConfig

    with HubClient(HubClientConfig.from_env()) as client:
        repo = client.repositories.get("library/alpine")
        tags = client.repositories.list_tags("library", "alpine")
    ```
"""

import logging
import threading
from collections.abc import Callable
from typing import Any, TypeVar

import httpx

from hubclient_core.config import HubClientConfig
from hubclient_core.errors.exceptions import DecodeError, RequestCancelledError, TransportError
from hubclient_core.errors.handler import raise_for_status
from hubclient_core.pagination import Page, Paginator, ProcessPage
from hubclient_core.resources.access_tokens import AccessTokens
from hubclient_core.resources.organizations import Organizations
from hubclient_core.resources.repositories import Repositories
from hubclient_core.transport.factory import create_transport_stack
from hubclient_core.transport.retry import CANCEL_EVENT_EXTENSION

logger = logging.getLogger(__name__)

T = TypeVar("T")

JSON_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}


class HubClient:
    """Authenticated client for the hub API.

    Safe to share between threads: the underlying ``httpx.Client`` and the
    token provider are both thread-safe.

    Args:
        config: Client configuration.
    """

    def __init__(self, config: HubClientConfig):
        self.config = config
        self.base_url = config.base_url
        self.token_provider = config.token_provider
        self._http = httpx.Client(
            transport=create_transport_stack(
                token_provider=config.token_provider,
                user_agent=config.user_agent,
                timeout=config.timeout,
                max_retries=config.max_retries,
                backoff_factor=config.backoff_factor,
                max_backoff=config.max_backoff,
                retry_status_codes=config.retry_status_codes,
                base_transport=config.transport,
            ),
            timeout=httpx.Timeout(config.timeout),
        )

        self.access_tokens = AccessTokens(self)
        self.repositories = Repositories(self)
        self.orgs = Organizations(self)

    @property
    def max_page_results(self) -> int:
        return self.config.max_page_results

    def identity(self) -> str:
        """Username the client acts as."""
        return self.token_provider.identity()

    def to_relative_url(self, url: str) -> str:
        """Normalize ``url`` to a path relative to the base URL.

        Pagination cursors come back as absolute URLs under the base URL;
        those are stripped back to their relative form so that both
        spellings produce the same request.

        Raises:
            ValueError: If ``url`` is absolute but outside the base URL.
        """
        if url.startswith(self.base_url):
            rest = url[len(self.base_url) :]
            if rest and rest[0] not in "/?":
                raise ValueError(f"URL {url} is not under base URL {self.base_url}")
            url = rest
        elif url.startswith(("http://", "https://")):
            raise ValueError(f"URL {url} is not under base URL {self.base_url}")

        if not url.startswith("/"):
            url = "/" + url
        return url

    def send(
        self,
        method: str,
        url: str,
        body: Any = None,
        *,
        into: Callable[[Any], T] | None = None,
        cancel: threading.Event | None = None,
    ) -> T | None:
        """Send one request and decode the response.

        Args:
            method: HTTP method.
            url: Path relative to the base URL, or an absolute URL under it.
            body: JSON-serializable request body, or None for no body.
            into: Callable that builds the result from the decoded JSON. When
                None the response body is ignored.
            cancel: Event that aborts the call when set.

        Returns:
            ``into(decoded_json)``, or None when ``into`` is None.

        Raises:
            APIError: For statuses outside [200, 400); carries the full body.
            DecodeError: If ``into`` was given and the body is not valid JSON
                of the expected shape.
            TransportError: If the request failed at the network level after
                all retries.
            RequestCancelledError: If ``cancel`` was set.
            TokenError: If no bearer token could be obtained.
        """
        full_url = self.base_url + self.to_relative_url(url)
        if cancel is not None and cancel.is_set():
            raise RequestCancelledError(f"{method} {full_url} cancelled")

        request = self._http.build_request(
            method,
            full_url,
            json=body,
            headers=JSON_HEADERS,
            extensions={CANCEL_EVENT_EXTENSION: cancel} if cancel is not None else None,
        )
        logger.debug(f"{method} {full_url}")

        try:
            response = self._http.send(request)
        except httpx.TransportError as e:
            raise TransportError(f"{method} {full_url}: {e}", url=full_url) from e

        try:
            raise_for_status(response, url=full_url)
            if into is None:
                return None
            return self._decode(response, full_url, into)
        finally:
            response.close()

    def _decode(self, response: httpx.Response, url: str, into: Callable[[Any], T]) -> T:
        text = response.text
        if not text.strip():
            raise DecodeError(f"empty response body from {url}", url=url, body=text)
        try:
            data = response.json()
        except ValueError as e:
            raise DecodeError(f"decode response from {url}: {e}", url=url, body=text) from e
        try:
            return into(data)
        except (TypeError, KeyError, ValueError) as e:
            raise DecodeError(f"unexpected response shape from {url}: {e}", url=url, body=text) from e

    def paginate(
        self,
        initial_url: str,
        process_page: ProcessPage,
        cancel: threading.Event | None = None,
    ) -> int:
        """Walk a list endpoint within the configured page budget.

        See ``Paginator.run``; the budget is ``config.max_page_results``.
        """
        return Paginator(self.config.max_page_results).run(initial_url, process_page, cancel=cancel)

    def list_all(
        self,
        initial_url: str,
        item: Callable[[Any], T],
        cancel: threading.Event | None = None,
    ) -> list[T]:
        """Fetch every page of a list endpoint and return the results in order."""
        parse = Page.parser(item)
        results: list[T] = []

        def process_page(url: str) -> str | None:
            page = self.send("GET", url, into=parse, cancel=cancel)
            results.extend(page.results)
            return page.next

        self.paginate(initial_url, process_page, cancel=cancel)
        return results

    def close(self) -> None:
        """Close the HTTP client and the token provider's own client, if any."""
        self._http.close()
        close_provider = getattr(self.token_provider, "close", None)
        if callable(close_provider):
            close_provider()

    def __enter__(self) -> "HubClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
