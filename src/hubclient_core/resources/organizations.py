"""Organization, member, invite and team endpoints."""

import logging
import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from hubclient_core.resources.models import Model, json_field, require, segment

if TYPE_CHECKING:
    from hubclient_core.client import HubClient

logger = logging.getLogger(__name__)


class OrgRole(str, Enum):
    """Role values accepted when setting a member's role.

    The API returns roles capitalized ("Owner") but only accepts them in
    lower case.
    """

    OWNER = "owner"
    EDITOR = "editor"
    MEMBER = "member"


@dataclass
class Org(Model):
    id: str = ""
    orgname: str = ""
    full_name: str = ""
    location: str = ""
    company: str = ""
    date_joined: str = ""


@dataclass
class OrgMember(Model):
    id: str = ""
    username: str = ""
    email: str = ""
    role: str = ""
    groups: list[str] = field(default_factory=list)
    is_guest: bool = False
    company: str = ""
    date_joined: str = ""
    full_name: str = ""
    gravatar_email: str = ""
    gravatar_url: str = ""
    location: str = ""
    profile_url: str = ""
    type: str = ""


@dataclass
class OrgTeam(Model):
    id: int = 0
    uuid: str = ""
    name: str = ""
    description: str = ""
    member_count: int = 0


@dataclass
class OrgTeamMember(Model):
    id: str = ""
    uuid: str = ""
    username: str = ""
    full_name: str = ""
    email: str = ""
    primary_email: str = ""
    role: str = ""
    groups: list[str] = field(default_factory=list)
    is_guest: bool = False
    company: str = ""
    location: str = ""
    profile_url: str = ""
    date_joined: str = ""
    gravatar_url: str = ""
    gravatar_email: str = ""
    type: str = ""


@dataclass
class OrgInvite(Model):
    id: str = ""
    inviter_username: str = ""
    invitee: str = ""
    team: str = ""
    org: str = ""
    role: str = ""
    created_at: str = ""


@dataclass
class OrgInvitee(Model):
    invitee: str = ""
    status: str = ""
    invite: OrgInvite = json_field(model=OrgInvite, default_factory=OrgInvite)


@dataclass
class OrgInviteResponse(Model):
    invitees: list[OrgInvitee] = json_field(model=OrgInvitee, many=True, default_factory=list)


@dataclass
class RestrictedImages(Model):
    enabled: bool = False
    allow_official_images: bool = False
    allow_verified_publishers: bool = False


@dataclass
class ImageAccessManagement(Model):
    restricted_images: RestrictedImages = json_field(model=RestrictedImages, default_factory=RestrictedImages)


@dataclass
class StandardRegistry(Model):
    id: str = ""
    allowed: bool = False


@dataclass
class CustomRegistry(Model):
    address: str = ""
    friendly_name: str = ""
    allowed: bool = False


@dataclass
class RegistryAccessManagement(Model):
    enabled: bool = False
    standard_registries: list[StandardRegistry] = json_field(
        model=StandardRegistry, many=True, default_factory=list
    )
    custom_registries: list[CustomRegistry] = json_field(model=CustomRegistry, many=True, default_factory=list)


def _invites(data) -> "list[OrgInvite]":
    if not isinstance(data, dict):
        raise TypeError(f"expected a JSON object for invites, got {type(data).__name__}")
    return [OrgInvite.from_dict(raw) for raw in data.get("data") or []]


def _org_path(org: str) -> str:
    return f"/orgs/{segment(org, 'org name')}"


def _team_path(org: str, team: str) -> str:
    return f"{_org_path(org)}/groups/{segment(team, 'team name')}"


class Organizations:
    """``/orgs`` endpoints plus the org invite endpoints.

    Names and ids are escaped as single path segments.
    """

    def __init__(self, client: "HubClient"):
        self._client = client

    def get(self, org: str, cancel: threading.Event | None = None) -> Org:
        return self._client.send("GET", f"{_org_path(org)}/", into=Org.from_dict, cancel=cancel)

    # members

    def list_members(self, org: str, cancel: threading.Event | None = None) -> "list[OrgMember]":
        return self._client.list_all(f"{_org_path(org)}/members", OrgMember.from_dict, cancel=cancel)

    def update_member(
        self, org: str, username: str, role: OrgRole | str, cancel: threading.Event | None = None
    ) -> None:
        path = f"{_org_path(org)}/members/{segment(username, 'username')}/"
        role = OrgRole(role)
        self._client.send("PUT", path, {"role": role.value}, cancel=cancel)

    def delete_member(self, org: str, username: str, cancel: threading.Event | None = None) -> None:
        path = f"{_org_path(org)}/members/{segment(username, 'username')}/"
        self._client.send("DELETE", path, cancel=cancel)
        logger.info(f"Removed {username} from org {org}")

    # invites

    def invite_members(
        self,
        org: str,
        role: OrgRole | str,
        invitees: "list[str]",
        dry_run: bool = False,
        cancel: threading.Event | None = None,
    ) -> OrgInviteResponse:
        require(org, "org name")
        if not invitees:
            raise ValueError("at least one invitee is required")
        body = {"org": org, "invitees": list(invitees), "role": OrgRole(role).value, "dry_run": dry_run}
        return self._client.send("POST", "/invites/bulk", body, into=OrgInviteResponse.from_dict, cancel=cancel)

    def list_invites(self, org: str, cancel: threading.Event | None = None) -> "list[OrgInvite]":
        return self._client.send("GET", f"{_org_path(org)}/invites", into=_invites, cancel=cancel)

    def delete_invite(self, invite_id: str, cancel: threading.Event | None = None) -> None:
        self._client.send("DELETE", f"/invites/{segment(invite_id, 'invite id')}", cancel=cancel)

    # teams

    def get_team(self, org: str, team: str, cancel: threading.Event | None = None) -> OrgTeam:
        return self._client.send("GET", f"{_team_path(org, team)}/", into=OrgTeam.from_dict, cancel=cancel)

    def create_team(
        self, org: str, name: str, description: str = "", cancel: threading.Event | None = None
    ) -> OrgTeam:
        path = f"{_org_path(org)}/groups/"
        require(name, "team name")
        return self._client.send(
            "POST",
            path,
            {"name": name, "description": description},
            into=OrgTeam.from_dict,
            cancel=cancel,
        )

    def update_team(
        self, org: str, team: str, name: str, description: str = "", cancel: threading.Event | None = None
    ) -> OrgTeam:
        return self._client.send(
            "PATCH",
            f"{_team_path(org, team)}/",
            {"name": name or team, "description": description},
            into=OrgTeam.from_dict,
            cancel=cancel,
        )

    def delete_team(self, org: str, team: str, cancel: threading.Event | None = None) -> None:
        self._client.send("DELETE", f"{_team_path(org, team)}/", cancel=cancel)

    def list_team_members(self, org: str, team: str, cancel: threading.Event | None = None) -> "list[OrgTeamMember]":
        return self._client.list_all(f"{_team_path(org, team)}/members/", OrgTeamMember.from_dict, cancel=cancel)

    def add_team_member(self, org: str, team: str, username: str, cancel: threading.Event | None = None) -> None:
        path = f"{_team_path(org, team)}/members/"
        require(username, "username")
        self._client.send("POST", path, {"member": username}, cancel=cancel)

    def remove_team_member(self, org: str, team: str, username: str, cancel: threading.Event | None = None) -> None:
        path = f"{_team_path(org, team)}/members/{segment(username, 'username')}"
        self._client.send("DELETE", path, cancel=cancel)

    # settings

    def get_image_access_management(self, org: str, cancel: threading.Event | None = None) -> ImageAccessManagement:
        return self._client.send(
            "GET", f"{_org_path(org)}/settings/", into=ImageAccessManagement.from_dict, cancel=cancel
        )

    def set_image_access_management(
        self, org: str, settings: ImageAccessManagement, cancel: threading.Event | None = None
    ) -> ImageAccessManagement:
        """Replace the image access settings and return them as stored."""
        self._client.send("PUT", f"{_org_path(org)}/settings", settings.to_dict(), cancel=cancel)
        return self.get_image_access_management(org, cancel=cancel)

    def get_registry_access_management(
        self, org: str, cancel: threading.Event | None = None
    ) -> RegistryAccessManagement:
        return self._client.send(
            "GET",
            f"{_org_path(org)}/settings/registry-access-management",
            into=RegistryAccessManagement.from_dict,
            cancel=cancel,
        )

    def set_registry_access_management(
        self, org: str, settings: RegistryAccessManagement, cancel: threading.Event | None = None
    ) -> RegistryAccessManagement:
        """Replace the registry access settings and return them as stored."""
        self._client.send(
            "PUT", f"{_org_path(org)}/settings/registry-access-management", settings.to_dict(), cancel=cancel
        )
        return self.get_registry_access_management(org, cancel=cancel)
