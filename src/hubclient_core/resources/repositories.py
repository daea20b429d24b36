"""Repository and tag endpoints."""

import logging
import threading
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from hubclient_core.resources.models import Model, json_field, repository_path, require, segment

if TYPE_CHECKING:
    from hubclient_core.client import HubClient

logger = logging.getLogger(__name__)


@dataclass
class Permissions(Model):
    read: bool = False
    write: bool = False
    admin: bool = False


@dataclass
class ImmutableTagsSettings(Model):
    enabled: bool = False
    rules: list[str] = field(default_factory=list)


@dataclass
class Repository(Model):
    """A repository as returned by ``GET /repositories/{namespace}/{name}/``."""

    name: str = ""
    namespace: str = ""
    repository_type: str = ""
    is_private: bool = False
    status: int = 0
    status_description: str = ""
    description: str = ""
    full_description: str = ""
    star_count: int = 0
    pull_count: int = 0
    last_updated: str = ""
    date_registered: str = ""
    affiliation: str = ""
    media_types: list[str] = field(default_factory=list)
    content_types: list[str] = field(default_factory=list)
    is_automated: bool = False
    collaborator_count: int = 0
    hub_user: str = ""
    has_starred: bool = False
    permissions: Permissions = json_field(model=Permissions, default_factory=Permissions)
    immutable_tags_settings: ImmutableTagsSettings = json_field(
        model=ImmutableTagsSettings, default_factory=ImmutableTagsSettings
    )

    @property
    def id(self) -> str:
        return f"{self.namespace}/{self.name}"


@dataclass
class TagImage(Model):
    architecture: str = ""
    features: str = ""
    variant: str = ""
    digest: str = ""
    os: str = ""
    os_features: str = ""
    os_version: str = ""
    size: int = 0
    status: str = ""
    last_pulled: str = ""
    last_pushed: str = ""


@dataclass
class Tag(Model):
    name: str = ""
    id: int = 0
    full_size: int = 0
    repository: int = 0
    creator: int = 0
    last_updated: str = ""
    last_updater: int = 0
    last_updater_name: str = json_field("last_updater_username", default="")
    image_id: str = ""
    v2: bool = False
    tag_status: str = ""
    tag_last_pulled: str = ""
    tag_last_pushed: str = ""
    media_type: str = ""
    content_type: str = ""
    digest: str = ""
    images: list[TagImage] = json_field(model=TagImage, many=True, default_factory=list)


@dataclass
class CreateRepositoryRequest(Model):
    name: str = ""
    description: str = ""
    full_description: str = ""
    registry: str = ""
    is_private: bool = False


@dataclass
class UpdateRepositoryRequest(Model):
    description: str = ""
    full_description: str = ""
    immutable_tags: bool = False
    immutable_tags_rules: str = ""

    def to_dict(self):
        data = super().to_dict()
        if not data["immutable_tags_rules"]:
            del data["immutable_tags_rules"]
        return data


@dataclass
class TeamRepoPermission(Model):
    team_id: int = json_field("group_id", default=0)
    team_name: str = json_field("group_name", default="")
    permission: str = ""


class Repositories:
    """Repository endpoints.

    Repository ids are ``namespace/name``.
    """

    def __init__(self, client: "HubClient"):
        self._client = client

    def get(self, repo_id: str, cancel: threading.Event | None = None) -> Repository:
        path = repository_path(repo_id)
        return self._client.send("GET", f"/repositories/{path}/", into=Repository.from_dict, cancel=cancel)

    def create(
        self, namespace: str, request: CreateRepositoryRequest, cancel: threading.Event | None = None
    ) -> Repository:
        ns = segment(namespace, "namespace")
        require(request.name, "repository name")
        repo = self._client.send(
            "POST",
            f"/namespaces/{ns}/repositories",
            request.to_dict(),
            into=Repository.from_dict,
            cancel=cancel,
        )
        logger.info(f"Created repository {namespace}/{request.name}")
        return repo

    def update(
        self, repo_id: str, request: UpdateRepositoryRequest, cancel: threading.Event | None = None
    ) -> Repository:
        path = repository_path(repo_id)
        return self._client.send(
            "PATCH", f"/repositories/{path}/", request.to_dict(), into=Repository.from_dict, cancel=cancel
        )

    def set_privacy(self, repo_id: str, is_private: bool, cancel: threading.Event | None = None) -> None:
        path = repository_path(repo_id)
        self._client.send("POST", f"/repositories/{path}/privacy", {"is_private": is_private}, cancel=cancel)

    def delete(self, repo_id: str, cancel: threading.Event | None = None) -> None:
        path = repository_path(repo_id)
        self._client.send("DELETE", f"/repositories/{path}/", cancel=cancel)
        logger.info(f"Deleted repository {repo_id}")

    def get_tag(self, namespace: str, name: str, tag: str, cancel: threading.Event | None = None) -> Tag:
        ns, repo, tag = segment(namespace, "namespace"), segment(name, "repository name"), segment(tag, "tag")
        return self._client.send("GET", f"/repositories/{ns}/{repo}/tags/{tag}", into=Tag.from_dict, cancel=cancel)

    def list_tags(self, namespace: str, name: str, cancel: threading.Event | None = None) -> "list[Tag]":
        ns, repo = segment(namespace, "namespace"), segment(name, "repository name")
        return self._client.list_all(f"/namespaces/{ns}/repositories/{repo}/tags", Tag.from_dict, cancel=cancel)

    def get_team_permission(
        self, repo_id: str, team_id: int, cancel: threading.Event | None = None
    ) -> TeamRepoPermission:
        path = repository_path(repo_id)
        return self._client.send(
            "GET", f"/repositories/{path}/groups/{team_id}/", into=TeamRepoPermission.from_dict, cancel=cancel
        )

    def create_team_permission(
        self, repo_id: str, team_id: int, permission: str, cancel: threading.Event | None = None
    ) -> TeamRepoPermission:
        path = repository_path(repo_id)
        return self._client.send(
            "POST",
            f"/repositories/{path}/groups/",
            {"group_id": team_id, "permission": permission},
            into=TeamRepoPermission.from_dict,
            cancel=cancel,
        )

    def update_team_permission(
        self, repo_id: str, team_id: int, permission: str, cancel: threading.Event | None = None
    ) -> TeamRepoPermission:
        path = repository_path(repo_id)
        return self._client.send(
            "PATCH",
            f"/repositories/{path}/groups/{team_id}/",
            {"permission": permission},
            into=TeamRepoPermission.from_dict,
            cancel=cancel,
        )

    def delete_team_permission(self, repo_id: str, team_id: int, cancel: threading.Event | None = None) -> None:
        path = repository_path(repo_id)
        self._client.send("DELETE", f"/repositories/{path}/groups/{team_id}/", cancel=cancel)

    def list(self, namespace: str, cancel: threading.Event | None = None) -> "list[Repository]":
        ns = segment(namespace, "namespace")
        return self._client.list_all(f"/repositories/{ns}/", Repository.from_dict, cancel=cancel)
