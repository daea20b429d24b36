"""Error handling utilities for HTTP responses."""

import httpx

from hubclient_core.errors.exceptions import (
    APIError,
    BadRequestError,
    ClientError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    RateLimitError,
    ServerError,
    UnauthorizedError,
)

SUCCESS_MIN = 200
SUCCESS_MAX = 400  # exclusive; redirects that reach the caller count as success


def is_success_status(status_code: int) -> bool:
    """Return True for statuses in the half-open success range [200, 400)."""
    return SUCCESS_MIN <= status_code < SUCCESS_MAX


def raise_for_status(response: httpx.Response, url: str | None = None) -> None:
    """Raise appropriate exception for HTTP error responses.

    The full response body is kept in both the message and the ``body``
    attribute; the hub's error payloads are the only useful diagnostic and
    are never truncated.

    Args:
        response: HTTP response object (body already read)
        url: URL to report; defaults to the URL of the response's request

    Raises:
        APIError subclass based on status code
    """
    status_code = response.status_code
    if is_success_status(status_code):
        return

    if url is None:
        try:
            url = str(response.request.url)
        except RuntimeError:
            # Response built without a request (e.g. in tests).
            url = None

    exception_map = {
        400: BadRequestError,
        401: UnauthorizedError,
        403: ForbiddenError,
        404: NotFoundError,
        409: ConflictError,
        429: RateLimitError,
    }

    if status_code in exception_map:
        exc_class = exception_map[status_code]
    elif 400 <= status_code < 500:
        exc_class = ClientError
    elif 500 <= status_code < 600:
        exc_class = ServerError
    else:
        exc_class = APIError

    body = response.text
    message = f"server response {url} (HTTP {status_code}): {body}"

    if exc_class == RateLimitError:
        retry_after = None
        if "retry-after" in response.headers:
            try:
                retry_after = int(response.headers["retry-after"])
            except (ValueError, TypeError):
                retry_after = None
        raise exc_class(
            message=message,
            retry_after=retry_after,
            status_code=status_code,
            response=response,
            url=url,
            body=body,
        )

    raise exc_class(
        message=message,
        status_code=status_code,
        response=response,
        url=url,
        body=body,
    )
