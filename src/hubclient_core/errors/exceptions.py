"""Structured exceptions for hub API errors."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import httpx


class HubClientError(Exception):
    """Base exception for every error raised by hubclient-core."""

    pass


class ConfigurationError(HubClientError):
    """Invalid or incomplete client configuration."""

    pass


class APIError(HubClientError):
    """Base exception for non-success HTTP responses.

    Attributes:
        status_code: HTTP status code of the response.
        response: The (closed) response object.
        url: URL of the request that failed.
        body: Full response body text, exactly as the server sent it.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response: "httpx.Response | None" = None,
        url: str | None = None,
        body: str = "",
    ):
        super().__init__(message)
        self.status_code = status_code
        self.response = response
        self.url = url
        self.body = body


class ClientError(APIError):
    """4xx client errors."""

    pass


class BadRequestError(ClientError):
    """400 Bad Request."""

    pass


class UnauthorizedError(ClientError):
    """401 Unauthorized."""

    pass


class ForbiddenError(ClientError):
    """403 Forbidden."""

    pass


class NotFoundError(ClientError):
    """404 Not Found."""

    pass


class ConflictError(ClientError):
    """409 Conflict."""

    pass


class RateLimitError(ClientError):
    """429 Too Many Requests."""

    def __init__(self, message: str, retry_after: int | None = None, **kwargs):
        super().__init__(message, **kwargs)
        self.retry_after = retry_after


class ServerError(APIError):
    """5xx server errors."""

    pass


class DecodeError(HubClientError):
    """Response body was expected to be JSON but could not be decoded."""

    def __init__(self, message: str, url: str | None = None, body: str = ""):
        super().__init__(message)
        self.url = url
        self.body = body


class TransportError(HubClientError):
    """Network failure that persisted after all retry attempts."""

    def __init__(self, message: str, url: str | None = None):
        super().__init__(message)
        self.url = url


class RequestCancelledError(HubClientError):
    """The caller cancelled the operation before it completed."""

    pass
