"""Tests for response status classification."""

import httpx
import pytest
from httpx import Response

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
from hubclient_core.errors.handler import is_success_status, raise_for_status

URL = "https://hub.docker.com/v2/repositories/acme/app/"


@pytest.mark.unit
@pytest.mark.parametrize("status_code", [200, 201, 204, 301, 302, 399])
def test_success_range(status_code):
    """Statuses in [200, 400) are success."""
    assert is_success_status(status_code)
    raise_for_status(Response(status_code=status_code), url=URL)


@pytest.mark.unit
@pytest.mark.parametrize("status_code", [100, 199, 400, 404, 500, 599])
def test_outside_success_range(status_code):
    assert not is_success_status(status_code)


@pytest.mark.unit
@pytest.mark.parametrize(
    ("status_code", "exc_class"),
    [
        (400, BadRequestError),
        (401, UnauthorizedError),
        (403, ForbiddenError),
        (404, NotFoundError),
        (409, ConflictError),
        (429, RateLimitError),
        (418, ClientError),
        (422, ClientError),
        (500, ServerError),
        (503, ServerError),
    ],
)
def test_status_maps_to_exception(status_code, exc_class):
    response = Response(status_code=status_code, text="nope")

    with pytest.raises(exc_class) as exc_info:
        raise_for_status(response, url=URL)

    assert type(exc_info.value) is exc_class
    assert exc_info.value.status_code == status_code
    assert exc_info.value.response is response


@pytest.mark.unit
def test_informational_status_is_generic_api_error():
    with pytest.raises(APIError) as exc_info:
        raise_for_status(Response(status_code=101), url=URL)

    assert type(exc_info.value) is APIError


@pytest.mark.unit
def test_message_carries_url_status_and_full_body():
    """The whole body is kept, however long."""
    body = '{"message":"object not found","errinfo":{"namespace":"acme"}}' + "x" * 5000
    response = Response(status_code=404, text=body)

    with pytest.raises(NotFoundError) as exc_info:
        raise_for_status(response, url=URL)

    error = exc_info.value
    assert str(error) == f"server response {URL} (HTTP 404): {body}"
    assert error.body == body
    assert error.url == URL


@pytest.mark.unit
def test_url_defaults_to_request_url():
    request = httpx.Request("DELETE", URL)
    response = Response(status_code=404, text="not found", request=request)

    with pytest.raises(NotFoundError) as exc_info:
        raise_for_status(response)

    assert exc_info.value.url == URL


@pytest.mark.unit
def test_url_unknown_without_request():
    with pytest.raises(ServerError) as exc_info:
        raise_for_status(Response(status_code=500, text="boom"))

    assert exc_info.value.url is None


@pytest.mark.unit
def test_rate_limit_retry_after():
    response = Response(status_code=429, headers={"retry-after": "60"}, text="slow down")

    with pytest.raises(RateLimitError) as exc_info:
        raise_for_status(response, url=URL)

    assert exc_info.value.retry_after == 60


@pytest.mark.unit
@pytest.mark.parametrize("headers", [{}, {"retry-after": "Wed, 21 Oct 2026 07:28:00 GMT"}])
def test_rate_limit_without_numeric_retry_after(headers):
    response = Response(status_code=429, headers=headers, text="slow down")

    with pytest.raises(RateLimitError) as exc_info:
        raise_for_status(response, url=URL)

    assert exc_info.value.retry_after is None
