"""Typed helpers for individual hub API endpoints."""

from hubclient_core.resources.access_tokens import (
    AccessToken,
    AccessTokenCreateParams,
    AccessTokens,
    AccessTokenUpdateParams,
)
from hubclient_core.resources.models import Model
from hubclient_core.resources.organizations import (
    CustomRegistry,
    ImageAccessManagement,
    Org,
    OrgInvite,
    OrgInvitee,
    OrgInviteResponse,
    OrgMember,
    OrgRole,
    Organizations,
    OrgTeam,
    OrgTeamMember,
    RegistryAccessManagement,
    RestrictedImages,
    StandardRegistry,
)
from hubclient_core.resources.repositories import (
    CreateRepositoryRequest,
    ImmutableTagsSettings,
    Permissions,
    Repositories,
    Repository,
    Tag,
    TagImage,
    TeamRepoPermission,
    UpdateRepositoryRequest,
)

__all__ = [
    "AccessToken",
    "AccessTokenCreateParams",
    "AccessTokenUpdateParams",
    "AccessTokens",
    "CreateRepositoryRequest",
    "CustomRegistry",
    "ImageAccessManagement",
    "ImmutableTagsSettings",
    "Model",
    "Org",
    "OrgInvite",
    "OrgInviteResponse",
    "OrgInvitee",
    "OrgMember",
    "OrgRole",
    "OrgTeam",
    "OrgTeamMember",
    "Organizations",
    "Permissions",
    "RegistryAccessManagement",
    "Repositories",
    "Repository",
    "RestrictedImages",
    "StandardRegistry",
    "Tag",
    "TagImage",
    "TeamRepoPermission",
    "UpdateRepositoryRequest",
]
