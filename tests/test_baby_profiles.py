from __future__ import annotations

from babytracker.models.action import Action
from babytracker.models.user_baby_role import UserBabyRole


def _auth(client, name: str) -> dict:
    r = client.post("/auth/google", json={"access_token": f"google-{name}"})
    assert r.status_code == 200
    body = r.json()
    return {"id": body["user"]["id"], "headers": {"Authorization": f"Bearer {body['token']}"}}


def test_create_profile_makes_creator_admin(client) -> None:
    owner = _auth(client, "owner")

    r = client.post("/baby-profiles", json={"name": "  Baby1 ", "birthDate": "2024-03-01"}, headers=owner["headers"])
    assert r.status_code == 200
    profile = r.json()["profile"]
    assert profile["name"] == "Baby1"
    assert profile["birthDate"] == "2024-03-01"
    assert profile["role"] == "admin"
    assert profile["joinCodeEnabled"] is True
    assert len(profile["joinCode"]) == 6

    listed = client.get("/baby-profiles", headers=owner["headers"]).json()["profiles"]
    assert [p["id"] for p in listed] == [profile["id"]]

    read = client.get(f"/baby-profiles/{profile['id']}", headers=owner["headers"])
    assert read.status_code == 200
    assert read.json()["profile"]["role"] == "admin"


def test_create_profile_validation(client) -> None:
    owner = _auth(client, "owner")

    missing = client.post("/baby-profiles", json={}, headers=owner["headers"])
    assert missing.status_code == 400
    assert missing.json()["error"] == "name is required"

    bad_date = client.post("/baby-profiles", json={"name": "Baby1", "birthDate": "soon"}, headers=owner["headers"])
    assert bad_date.status_code == 400
    assert "errors" in bad_date.json()


def test_profile_codes_are_distinct(client) -> None:
    owner = _auth(client, "owner")
    codes = {
        client.post("/baby-profiles", json={"name": f"Baby{i}"}, headers=owner["headers"]).json()["profile"]["joinCode"]
        for i in range(5)
    }
    assert len(codes) == 5


def test_update_is_admin_only_and_partial(client) -> None:
    owner = _auth(client, "owner")
    guest = _auth(client, "guest")
    profile = client.post(
        "/baby-profiles", json={"name": "Baby1", "birthDate": "2024-03-01"}, headers=owner["headers"]
    ).json()["profile"]
    client.post("/baby-profiles/join", json={"joinCode": profile["joinCode"]}, headers=guest["headers"])

    denied = client.put(f"/baby-profiles/{profile['id']}", json={"name": "Hacked"}, headers=guest["headers"])
    assert denied.status_code == 403
    assert denied.json()["error"] == "Only admins can update baby profiles"

    r = client.put(f"/baby-profiles/{profile['id']}", json={"name": "Baby One"}, headers=owner["headers"])
    assert r.status_code == 200
    updated = r.json()["profile"]
    assert updated["name"] == "Baby One"
    assert updated["birthDate"] == "2024-03-01"

    blank = client.put(f"/baby-profiles/{profile['id']}", json={"name": "  "}, headers=owner["headers"])
    assert blank.status_code == 400
    assert blank.json()["error"] == "name is required"


def test_toggle_join_code_is_admin_only(client) -> None:
    owner = _auth(client, "owner")
    guest = _auth(client, "guest")
    profile = client.post("/baby-profiles", json={"name": "Baby1"}, headers=owner["headers"]).json()["profile"]
    client.post("/baby-profiles/join", json={"joinCode": profile["joinCode"]}, headers=guest["headers"])

    denied = client.put(f"/baby-profiles/{profile['id']}/toggle-join-code", headers=guest["headers"])
    assert denied.status_code == 403
    assert denied.json()["error"] == "Only admins can toggle join code status"

    off = client.put(f"/baby-profiles/{profile['id']}/toggle-join-code", headers=owner["headers"])
    assert off.json()["profile"]["joinCodeEnabled"] is False
    on = client.put(f"/baby-profiles/{profile['id']}/toggle-join-code", headers=owner["headers"])
    assert on.json()["profile"]["joinCodeEnabled"] is True


def test_delete_removes_memberships_and_keeps_actions(client, db) -> None:
    owner = _auth(client, "owner")
    guest = _auth(client, "guest")
    profile = client.post("/baby-profiles", json={"name": "Baby1"}, headers=owner["headers"]).json()["profile"]
    pid = profile["id"]
    client.post("/baby-profiles/join", json={"joinCode": profile["joinCode"]}, headers=guest["headers"])
    logged = client.post(
        "/actions",
        json={"babyProfileId": pid, "actionType": "other", "details": {"title": "Bath"}},
        headers=owner["headers"],
    )
    assert logged.status_code == 200

    denied = client.delete(f"/baby-profiles/{pid}", headers=guest["headers"])
    assert denied.status_code == 403
    assert denied.json()["error"] == "Only admins can delete baby profiles"

    r = client.delete(f"/baby-profiles/{pid}", headers=owner["headers"])
    assert r.status_code == 200
    assert r.json()["message"] == "Baby profile deleted successfully"

    assert db.query(UserBabyRole).filter(UserBabyRole.baby_profile_id == pid).count() == 0
    assert db.query(Action).filter(Action.baby_profile_id == pid).count() == 1

    gone = client.get(f"/baby-profiles/{pid}", headers=owner["headers"])
    assert gone.status_code == 403
    assert gone.json()["error"] == "You do not have access to this baby profile"
    assert client.get("/baby-profiles", headers=guest["headers"]).json()["profiles"] == []


def test_leave_profile(client) -> None:
    owner = _auth(client, "owner")
    guest = _auth(client, "guest")
    profile = client.post("/baby-profiles", json={"name": "Baby1"}, headers=owner["headers"]).json()["profile"]
    client.post("/baby-profiles/join", json={"joinCode": profile["joinCode"]}, headers=guest["headers"])

    admin_leave = client.post(f"/baby-profiles/{profile['id']}/leave", headers=owner["headers"])
    assert admin_leave.status_code == 403
    assert admin_leave.json()["error"] == "Admins cannot leave a profile. Please delete the profile instead."

    r = client.post(f"/baby-profiles/{profile['id']}/leave", headers=guest["headers"])
    assert r.status_code == 200
    assert r.json()["message"] == "Successfully left baby profile"
    assert client.get("/baby-profiles", headers=guest["headers"]).json()["profiles"] == []

    # Leaving is not blocking: the code still works afterwards.
    rejoin = client.post("/baby-profiles/join", json={"joinCode": profile["joinCode"]}, headers=guest["headers"])
    assert rejoin.status_code == 200


def test_family_scenario(client) -> None:
    alice = _auth(client, "alice")
    bob = _auth(client, "bob")

    profile = client.post("/baby-profiles", json={"name": "Baby1"}, headers=alice["headers"]).json()["profile"]
    pid = profile["id"]

    joined = client.post("/baby-profiles/join", json={"joinCode": profile["joinCode"]}, headers=bob["headers"])
    assert joined.json()["profile"]["role"] == "viewer"

    viewer_write = client.post(
        "/actions",
        json={"babyProfileId": pid, "actionType": "diaper", "details": {"type": "pee"}},
        headers=bob["headers"],
    )
    assert viewer_write.status_code == 403

    promoted = client.put(
        "/users/role",
        json={"babyProfileId": pid, "targetUserId": bob["id"], "newRole": "editor"},
        headers=alice["headers"],
    )
    assert promoted.status_code == 200
    assert promoted.json()["userRole"]["role"] == "editor"

    logged = client.post(
        "/actions",
        json={"babyProfileId": pid, "actionType": "diaper", "details": {"type": "pee"}},
        headers=bob["headers"],
    )
    assert logged.status_code == 200

    blocked = client.put(
        "/users/block",
        json={"babyProfileId": pid, "targetUserId": bob["id"], "blocked": True},
        headers=alice["headers"],
    )
    assert blocked.json()["message"] == "User blocked successfully"

    denied = client.post(
        "/actions",
        json={"babyProfileId": pid, "actionType": "diaper", "details": {"type": "poo"}},
        headers=bob["headers"],
    )
    assert denied.status_code == 403
    assert denied.json()["error"] == "You have been blocked from accessing this baby profile"

    backdated = client.post(
        "/actions",
        json={"babyProfileId": pid, "actionType": "other", "details": {"title": "Bath"}, "timestamp": "2023-06-15T10:00:00Z"},
        headers=alice["headers"],
    )
    assert backdated.status_code == 200
    stored = backdated.json()["action"]
    assert stored["details"]["timestamp"] == "2023-06-15T10:00:00Z"
    assert not stored["createdAt"].startswith("2023-06-15")

    rejoin = client.post("/baby-profiles/join", json={"joinCode": profile["joinCode"]}, headers=bob["headers"])
    assert rejoin.status_code == 403

    unblocked = client.put(
        "/users/block",
        json={"babyProfileId": pid, "targetUserId": bob["id"], "blocked": False},
        headers=alice["headers"],
    )
    assert unblocked.json()["message"] == "User unblocked successfully"
    assert unblocked.json()["userRole"]["role"] == "editor"

    actions = client.get("/actions", params={"babyProfileId": pid}, headers=bob["headers"]).json()["actions"]
    assert len(actions) == 2
