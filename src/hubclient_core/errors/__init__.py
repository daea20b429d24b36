"""Error taxonomy and HTTP status classification for hub clients."""

from hubclient_core.errors.exceptions import (
    APIError,
    BadRequestError,
    ClientError,
    ConfigurationError,
    ConflictError,
    DecodeError,
    ForbiddenError,
    HubClientError,
    NotFoundError,
    RateLimitError,
    RequestCancelledError,
    ServerError,
    TransportError,
    UnauthorizedError,
)
from hubclient_core.errors.handler import is_success_status, raise_for_status

__all__ = [
    "APIError",
    "BadRequestError",
    "ClientError",
    "ConfigurationError",
    "ConflictError",
    "DecodeError",
    "ForbiddenError",
    "HubClientError",
    "NotFoundError",
    "RateLimitError",
    "RequestCancelledError",
    "ServerError",
    "TransportError",
    "UnauthorizedError",
    "is_success_status",
    "raise_for_status",
]
