"""Tests for repository and tag endpoints."""

import pytest

from hubclient_core.resources import CreateRepositoryRequest, UpdateRepositoryRequest
from hubclient_core.testing import page_payload

REPO = {
    "name": "app",
    "namespace": "acme",
    "repository_type": "image",
    "is_private": True,
    "status": 1,
    "description": "the app",
    "star_count": 4,
    "pull_count": 1200,
    "permissions": {"read": True, "write": True, "admin": False},
    "immutable_tags_settings": {"enabled": True, "rules": ["v.*"]},
    "media_types": ["application/vnd.oci.image.index.v1+json"],
}

TAG = {
    "name": "latest",
    "id": 11,
    "full_size": 3_000_000,
    "last_updater_username": "alice",
    "digest": "sha256:abc",
    "images": [{"architecture": "amd64", "os": "linux", "size": 3_000_000, "digest": "sha256:def"}],
}


@pytest.mark.unit
class TestRepositories:
    def test_get(self, fake_hub):
        hub, client = fake_hub
        hub.route("GET", "/v2/repositories/acme/app/", json=REPO)

        repo = client.repositories.get("acme/app")

        assert repo.id == "acme/app"
        assert repo.is_private
        assert repo.pull_count == 1200
        assert repo.permissions.write
        assert not repo.permissions.admin
        assert repo.immutable_tags_settings.rules == ["v.*"]

    def test_get_empty_id(self, fake_hub):
        hub, client = fake_hub

        with pytest.raises(ValueError):
            client.repositories.get("")

        assert hub.requests == []

    def test_reserved_characters_escaped(self, fake_hub):
        hub, client = fake_hub
        hub.route("DELETE", "/v2/repositories/acme/app%3Fforce%3D1/", status_code=204)

        client.repositories.delete("acme/app?force=1")

        assert hub.requests[0].url.raw_path == b"/v2/repositories/acme/app%3Fforce%3D1/"

    def test_id_without_namespace_rejected(self, fake_hub):
        hub, client = fake_hub

        with pytest.raises(ValueError):
            client.repositories.get("app")

        assert hub.requests == []

    def test_list(self, fake_hub):
        hub, client = fake_hub
        hub.route(
            "GET",
            "/v2/repositories/acme/",
            json=page_payload([REPO], next="https://hub.docker.com/v2/repositories/acme/?page=2"),
        )
        hub.route("GET", "/v2/repositories/acme/?page=2", json=page_payload([dict(REPO, name="worker")]))

        repos = client.repositories.list("acme")

        assert [r.name for r in repos] == ["app", "worker"]

    def test_create(self, fake_hub):
        hub, client = fake_hub
        hub.route("POST", "/v2/namespaces/acme/repositories", status_code=201, json=REPO)

        repo = client.repositories.create(
            "acme", CreateRepositoryRequest(name="app", description="the app", is_private=True)
        )

        assert repo.name == "app"
        assert hub.bodies() == [
            {"name": "app", "description": "the app", "full_description": "", "registry": "", "is_private": True}
        ]

    def test_update_omits_empty_rules(self, fake_hub):
        hub, client = fake_hub
        hub.route("PATCH", "/v2/repositories/acme/app/", json=REPO)

        client.repositories.update("acme/app", UpdateRepositoryRequest(description="new"))

        assert hub.bodies() == [{"description": "new", "full_description": "", "immutable_tags": False}]

    def test_update_with_rules(self, fake_hub):
        hub, client = fake_hub
        hub.route("PATCH", "/v2/repositories/acme/app/", json=REPO)

        client.repositories.update(
            "acme/app", UpdateRepositoryRequest(immutable_tags=True, immutable_tags_rules="v.*,release-.*")
        )

        assert hub.bodies()[0]["immutable_tags_rules"] == "v.*,release-.*"

    def test_set_privacy(self, fake_hub):
        hub, client = fake_hub
        hub.route("POST", "/v2/repositories/acme/app/privacy", json={})

        client.repositories.set_privacy("acme/app", False)

        assert hub.bodies() == [{"is_private": False}]

    def test_delete(self, fake_hub):
        hub, client = fake_hub
        hub.route("DELETE", "/v2/repositories/acme/app/", status_code=202)

        client.repositories.delete("acme/app")

        assert [r.method for r in hub.requests] == ["DELETE"]

    def test_list_tags(self, fake_hub):
        hub, client = fake_hub
        hub.route(
            "GET",
            "/v2/namespaces/acme/repositories/app/tags",
            json=page_payload([TAG], next="https://hub.docker.com/v2/namespaces/acme/repositories/app/tags?page=2"),
        )
        hub.route("GET", "/v2/namespaces/acme/repositories/app/tags?page=2", json=page_payload([dict(TAG, name="v1")]))

        tags = client.repositories.list_tags("acme", "app")

        assert [t.name for t in tags] == ["latest", "v1"]
        assert tags[0].last_updater_name == "alice"
        assert tags[0].images[0].architecture == "amd64"

    def test_get_tag(self, fake_hub):
        hub, client = fake_hub
        hub.route("GET", "/v2/repositories/acme/app/tags/latest", json=TAG)

        tag = client.repositories.get_tag("acme", "app", "latest")

        assert tag.digest == "sha256:abc"
        assert tag.images[0].os == "linux"

    def test_team_permissions(self, fake_hub):
        hub, client = fake_hub
        perm = {"group_id": 42, "group_name": "devs", "permission": "write"}
        hub.route("POST", "/v2/repositories/acme/app/groups/", json=perm)
        hub.route("GET", "/v2/repositories/acme/app/groups/42/", json=perm)
        hub.route("PATCH", "/v2/repositories/acme/app/groups/42/", json=dict(perm, permission="admin"))
        hub.route("DELETE", "/v2/repositories/acme/app/groups/42/", status_code=204)

        created = client.repositories.create_team_permission("acme/app", 42, "write")
        fetched = client.repositories.get_team_permission("acme/app", 42)
        updated = client.repositories.update_team_permission("acme/app", 42, "admin")
        client.repositories.delete_team_permission("acme/app", 42)

        assert created.team_id == 42
        assert fetched.team_name == "devs"
        assert updated.permission == "admin"
        assert hub.bodies() == [{"group_id": 42, "permission": "write"}, None, {"permission": "admin"}, None]
