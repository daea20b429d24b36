"""Personal access token endpoints."""

import logging
import threading
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from hubclient_core.resources.models import Model, segment

if TYPE_CHECKING:
    from hubclient_core.client import HubClient

logger = logging.getLogger(__name__)


@dataclass
class AccessToken(Model):
    uuid: str = ""
    client_id: str = ""
    creator_ip: str = ""
    creator_ua: str = ""
    created_at: str = ""
    last_used: str = ""
    generated_by: str = ""
    is_active: bool = False
    token: str = ""  # only returned on creation
    token_label: str = ""
    scopes: list[str] = field(default_factory=list)


@dataclass
class AccessTokenCreateParams(Model):
    token_label: str = ""
    scopes: list[str] = field(default_factory=list)


@dataclass
class AccessTokenUpdateParams(Model):
    token_label: str = ""
    is_active: bool = False


def _token_path(uuid: str) -> str:
    return f"/access-tokens/{segment(uuid, 'access token id')}"


class AccessTokens:
    """``/access-tokens`` endpoints."""

    def __init__(self, client: "HubClient"):
        self._client = client

    def get(self, uuid: str, cancel: threading.Event | None = None) -> AccessToken:
        return self._client.send("GET", _token_path(uuid), into=AccessToken.from_dict, cancel=cancel)

    def list(self, cancel: threading.Event | None = None) -> "list[AccessToken]":
        return self._client.list_all("/access-tokens", AccessToken.from_dict, cancel=cancel)

    def create(self, params: AccessTokenCreateParams, cancel: threading.Event | None = None) -> AccessToken:
        token = self._client.send(
            "POST", "/access-tokens", params.to_dict(), into=AccessToken.from_dict, cancel=cancel
        )
        logger.info(f"Created access token {token.uuid} ({token.token_label})")
        return token

    def update(
        self, uuid: str, params: AccessTokenUpdateParams, cancel: threading.Event | None = None
    ) -> AccessToken:
        return self._client.send(
            "PATCH", _token_path(uuid), params.to_dict(), into=AccessToken.from_dict, cancel=cancel
        )

    def delete(self, uuid: str, cancel: threading.Event | None = None) -> None:
        self._client.send("DELETE", _token_path(uuid), cancel=cancel)
        logger.info(f"Deleted access token {uuid}")
