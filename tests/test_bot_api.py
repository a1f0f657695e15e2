"""
Integration tests for bot, command and analytics endpoints.

Covers owner scoping, cascade delete and the full register-to-delete
flow.
"""

import pytest

from conftest import register


PROTECTED_ROUTES = [
    ("get", "/api/bots"),
    ("post", "/api/bots"),
    ("get", "/api/bots/1"),
    ("patch", "/api/bots/1"),
    ("delete", "/api/bots/1"),
    ("get", "/api/bots/1/commands"),
    ("post", "/api/bots/1/commands"),
    ("get", "/api/bots/1/analytics"),
    ("post", "/api/bots/1/analytics"),
    ("post", "/api/analyze-code"),
]


def create_bot(client, name="B1", token="t"):
    response = client.post("/api/bots", json={"name": name, "token": token})
    assert response.status_code == 201, response.text
    return response.json()


class TestAuthRequired:
    """Every protected route rejects anonymous callers with 401."""

    @pytest.mark.parametrize("method,path", PROTECTED_ROUTES)
    def test_anonymous_rejected(self, client, method, path):
        response = getattr(client, method)(path) if method in ("get", "delete") else \
            getattr(client, method)(path, json={})
        assert response.status_code == 401


class TestBots:
    """Test /api/bots endpoints."""

    def test_create_bot_always_inactive(self, alice):
        response = alice.post("/api/bots", json={"name": "B1", "token": "t", "is_active": True})
        assert response.status_code == 201
        data = response.json()
        assert data["name"] == "B1"
        assert data["token"] == "t"
        assert data["is_active"] is False
        assert data["user_id"] == 1

    def test_create_bot_validation(self, alice):
        response = alice.post("/api/bots", json={"name": "B1"})
        assert response.status_code == 422
        assert [err["loc"][-1] for err in response.json()["detail"]] == ["token"]

    def test_create_bot_blank_name(self, alice):
        response = alice.post("/api/bots", json={"name": "   ", "token": "t"})
        assert response.status_code == 400

    def test_list_is_owner_scoped(self, alice, bob):
        mine = create_bot(alice, "Mine")
        create_bot(bob, "Theirs")

        response = alice.get("/api/bots")
        assert response.status_code == 200
        assert response.json() == [mine]

    def test_get_bot(self, alice):
        bot = create_bot(alice)
        assert alice.get(f"/api/bots/{bot['id']}").json() == bot

    def test_update_bot(self, alice):
        bot = create_bot(alice)
        response = alice.patch(f"/api/bots/{bot['id']}", json={"name": "Renamed", "is_active": True})
        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Renamed"
        assert data["is_active"] is True
        assert data["token"] == "t"

    def test_update_ignores_protected_fields(self, alice, bob):
        bot = create_bot(alice)
        response = alice.patch(f"/api/bots/{bot['id']}", json={"id": 99, "user_id": 2, "token": "new"})
        assert response.status_code == 200
        data = response.json()
        assert data["id"] == bot["id"]
        assert data["user_id"] == bot["user_id"]
        assert data["token"] == "new"
        assert bob.get("/api/bots").json() == []

    def test_empty_update_is_noop(self, alice):
        bot = create_bot(alice)
        response = alice.patch(f"/api/bots/{bot['id']}", json={})
        assert response.status_code == 200
        assert response.json() == bot

    def test_delete_bot(self, alice):
        bot = create_bot(alice)
        response = alice.delete(f"/api/bots/{bot['id']}")
        assert response.status_code == 204
        assert response.content == b""
        assert alice.get("/api/bots").json() == []

    def test_missing_bot_is_forbidden(self, alice):
        assert alice.get("/api/bots/999").status_code == 403
        assert alice.patch("/api/bots/999", json={"name": "x"}).status_code == 403
        assert alice.delete("/api/bots/999").status_code == 403


class TestOwnership:
    """Another user's bot cannot be read or changed."""

    def test_foreign_bot_forbidden(self, alice, bob):
        bot = create_bot(alice)
        path = f"/api/bots/{bot['id']}"

        assert bob.get(path).status_code == 403
        assert bob.patch(path, json={"name": "stolen"}).status_code == 403
        assert bob.delete(path).status_code == 403
        assert bob.get(f"{path}/commands").status_code == 403
        assert bob.post(f"{path}/commands", json={"name": "!x", "description": "d", "code": "c"}).status_code == 403
        assert bob.get(f"{path}/analytics").status_code == 403
        assert bob.post(f"{path}/analytics", json={"metrics": {}}).status_code == 403

        # Untouched
        assert alice.get(path).json() == bot


class TestCommands:
    """Test /api/bots/{id}/commands endpoints."""

    def test_create_and_list(self, alice):
        bot = create_bot(alice)
        response = alice.post(
            f"/api/bots/{bot['id']}/commands",
            json={"name": "!ping", "description": "d", "code": "reply('pong')"},
        )
        assert response.status_code == 201
        command = response.json()
        assert command["bot_id"] == bot["id"]

        listed = alice.get(f"/api/bots/{bot['id']}/commands").json()
        assert listed == [command]

    def test_create_validation(self, alice):
        bot = create_bot(alice)
        response = alice.post(f"/api/bots/{bot['id']}/commands", json={"name": "!ping"})
        assert response.status_code == 422
        fields = sorted(err["loc"][-1] for err in response.json()["detail"])
        assert fields == ["code", "description"]

    def test_update_and_delete(self, alice):
        bot = create_bot(alice)
        command = alice.post(
            f"/api/bots/{bot['id']}/commands",
            json={"name": "!ping", "description": "d", "code": "reply('pong')"},
        ).json()
        path = f"/api/bots/{bot['id']}/commands/{command['id']}"

        response = alice.patch(path, json={"code": "reply('PONG')", "bot_id": 99})
        assert response.status_code == 200
        assert response.json()["code"] == "reply('PONG')"
        assert response.json()["bot_id"] == bot["id"]

        assert alice.delete(path).status_code == 204
        assert alice.delete(path).status_code == 404
        assert alice.get(f"/api/bots/{bot['id']}/commands").json() == []

    def test_command_under_other_bot_not_found(self, alice):
        first = create_bot(alice, "B1")
        second = create_bot(alice, "B2")
        command = alice.post(
            f"/api/bots/{first['id']}/commands",
            json={"name": "!ping", "description": "d", "code": "c"},
        ).json()

        path = f"/api/bots/{second['id']}/commands/{command['id']}"
        assert alice.patch(path, json={"code": "x"}).status_code == 404
        assert alice.delete(path).status_code == 404


class TestAnalytics:
    """Test /api/bots/{id}/analytics endpoints."""

    def test_list_newest_first(self, alice):
        bot = create_bot(alice)
        path = f"/api/bots/{bot['id']}/analytics"
        for ts in ["2024-01-02T00:00:00Z", "2024-01-03T00:00:00Z", "2024-01-01T00:00:00Z"]:
            response = alice.post(path, json={"metrics": {"messages": 1}, "timestamp": ts})
            assert response.status_code == 201

        records = alice.get(path).json()
        assert [r["timestamp"] for r in records] == [
            "2024-01-03T00:00:00Z",
            "2024-01-02T00:00:00Z",
            "2024-01-01T00:00:00Z",
        ]

    def test_timestamp_defaults_to_now(self, alice):
        bot = create_bot(alice)
        response = alice.post(f"/api/bots/{bot['id']}/analytics", json={"metrics": {"guilds": 4}})
        assert response.status_code == 201
        data = response.json()
        assert data["metrics"] == {"guilds": 4}
        assert data["timestamp"]

    def test_invalid_timestamp_rejected(self, alice):
        bot = create_bot(alice)
        response = alice.post(
            f"/api/bots/{bot['id']}/analytics",
            json={"metrics": {}, "timestamp": "yesterday-ish"},
        )
        assert response.status_code == 400

    def test_metrics_accept_any_json_value(self, alice):
        bot = create_bot(alice)
        path = f"/api/bots/{bot['id']}/analytics"
        payload = [1, 2, {"a": 3}]
        response = alice.post(path, json={"metrics": payload, "timestamp": "2024-01-01T00:00:00Z"})
        assert response.status_code == 201
        assert response.json()["metrics"] == payload

        scalar = alice.post(path, json={"metrics": 42, "timestamp": "2024-01-02T00:00:00Z"})
        assert scalar.status_code == 201

        assert [r["metrics"] for r in alice.get(path).json()] == [42, payload]

    def test_empty_for_new_bot(self, alice):
        bot = create_bot(alice)
        assert alice.get(f"/api/bots/{bot['id']}/analytics").json() == []


class TestEndToEnd:
    """Full dashboard flow from registration to bot deletion."""

    def test_full_flow(self, client, make_client, storage):
        assert client.post("/api/register", json={"username": "alice", "password": "pw1"}).status_code == 201
        client.post("/api/logout")

        assert client.post("/api/login", json={"username": "alice", "password": "wrongpw"}).status_code == 401
        assert client.post("/api/login", json={"username": "alice", "password": "pw1"}).status_code == 200

        bot = client.post("/api/bots", json={"name": "B1", "token": "t"})
        assert bot.status_code == 201
        assert bot.json()["is_active"] is False
        bot_id = bot.json()["id"]

        command = client.post(
            f"/api/bots/{bot_id}/commands",
            json={"name": "!ping", "description": "d", "code": "reply('pong')"},
        )
        assert command.status_code == 201

        listed = client.get(f"/api/bots/{bot_id}/commands")
        assert listed.status_code == 200
        assert command.json() in listed.json()

        assert client.delete(f"/api/bots/{bot_id}").status_code == 204

        # Bot is gone, so the owner check fails; its commands were cascade-deleted
        assert client.get(f"/api/bots/{bot_id}/commands").status_code == 403
        assert storage.get_commands_by_bot(bot_id) == []
