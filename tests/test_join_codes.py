from __future__ import annotations

import re

from babytracker.models.user_baby_role import UserBabyRole
from babytracker.services.join_codes import (
    JOIN_CODE_ALPHABET,
    CooldownTracker,
    generate_join_code,
    join_code_gate,
    normalize_join_code,
)


def _auth(client, name: str) -> dict:
    r = client.post("/auth/google", json={"access_token": f"google-{name}"})
    assert r.status_code == 200
    body = r.json()
    return {"id": body["user"]["id"], "headers": {"Authorization": f"Bearer {body['token']}"}}


def _create_profile(client, owner: dict, name: str = "Baby1") -> dict:
    r = client.post("/baby-profiles", json={"name": name}, headers=owner["headers"])
    assert r.status_code == 200
    return r.json()["profile"]


def _join(client, user: dict, code: str):
    return client.post("/baby-profiles/join", json={"joinCode": code}, headers=user["headers"])


def test_generated_codes_use_unambiguous_alphabet(db) -> None:
    pattern = re.compile(f"^[{JOIN_CODE_ALPHABET}]{{6}}$")
    codes = {generate_join_code(db) for _ in range(50)}
    assert all(pattern.match(code) for code in codes)
    assert not any(ch in code for code in codes for ch in "IO01")


def test_normalize_join_code() -> None:
    assert normalize_join_code("  abc2de ") == "ABC2DE"
    assert normalize_join_code(None) == ""


def test_join_grants_viewer_case_insensitively(client) -> None:
    owner = _auth(client, "owner")
    guest = _auth(client, "guest")
    profile = _create_profile(client, owner)

    r = _join(client, guest, f" {profile['joinCode'].lower()} ")
    assert r.status_code == 200
    joined = r.json()["profile"]
    assert joined["id"] == profile["id"]
    assert joined["role"] == "viewer"
    assert joined["joinedAt"] is not None

    listed = client.get("/baby-profiles", headers=guest["headers"]).json()["profiles"]
    assert [(p["id"], p["role"]) for p in listed] == [(profile["id"], "viewer")]


def test_join_requires_code(client) -> None:
    guest = _auth(client, "guest")
    r = client.post("/baby-profiles/join", json={}, headers=guest["headers"])
    assert r.status_code == 400
    assert r.json()["error"] == "joinCode is required"


def test_joining_twice_reports_existing_access(client) -> None:
    owner = _auth(client, "owner")
    guest = _auth(client, "guest")
    profile = _create_profile(client, owner)

    assert _join(client, guest, profile["joinCode"]).status_code == 200
    again = _join(client, guest, profile["joinCode"])
    assert again.status_code == 400
    body = again.json()
    assert body["error"] == "You already have access to this baby profile"
    assert body["profile"] == {"id": profile["id"], "name": "Baby1", "role": "viewer"}

    # Not a failed attempt: no cooldown afterwards.
    other = _create_profile(client, owner, "Baby2")
    assert _join(client, guest, other["joinCode"]).status_code == 200


def test_admin_redeeming_own_code_keeps_admin_role(client, db) -> None:
    owner = _auth(client, "owner")
    profile = _create_profile(client, owner)

    r = _join(client, owner, profile["joinCode"])
    assert r.status_code == 400
    assert r.json()["profile"]["role"] == "admin"
    rows = db.query(UserBabyRole).filter(UserBabyRole.baby_profile_id == profile["id"]).all()
    assert [(row.user_id, row.role) for row in rows] == [(owner["id"], "admin")]


def test_unknown_code_starts_cooldown(client, clock) -> None:
    owner = _auth(client, "owner")
    guest = _auth(client, "guest")
    profile = _create_profile(client, owner)

    # "O" is outside the alphabet, so this code can never exist.
    miss = _join(client, guest, "WRONG2")
    assert miss.status_code == 404
    assert miss.json()["error"] == "Baby profile not found with this join code"

    clock.advance_ms(2999)
    blocked = _join(client, guest, profile["joinCode"])
    assert blocked.status_code == 429
    assert blocked.json()["error"] == "You must wait 3 seconds before attempting to join again"

    clock.advance_ms(1)
    assert _join(client, guest, profile["joinCode"]).status_code == 200


def test_cooldown_is_per_user(client) -> None:
    owner = _auth(client, "owner")
    guest = _auth(client, "guest")
    other = _auth(client, "other")
    profile = _create_profile(client, owner)

    assert _join(client, guest, "WRONG2").status_code == 404
    assert _join(client, other, profile["joinCode"]).status_code == 200


def test_disabled_code_is_refused_and_counts_as_failure(client) -> None:
    owner = _auth(client, "owner")
    guest = _auth(client, "guest")
    profile = _create_profile(client, owner)

    toggled = client.put(f"/baby-profiles/{profile['id']}/toggle-join-code", headers=owner["headers"])
    assert toggled.json()["profile"]["joinCodeEnabled"] is False

    r = _join(client, guest, profile["joinCode"])
    assert r.status_code == 403
    assert r.json()["error"] == "Join code is disabled for this baby profile"

    client.put(f"/baby-profiles/{profile['id']}/toggle-join-code", headers=owner["headers"])
    assert _join(client, guest, profile["joinCode"]).status_code == 429


def test_pre_blocked_user_cannot_join(client) -> None:
    owner = _auth(client, "owner")
    guest = _auth(client, "guest")
    profile = _create_profile(client, owner)

    r = client.put(
        "/users/block",
        json={"babyProfileId": profile["id"], "targetUserId": guest["id"], "blocked": True},
        headers=owner["headers"],
    )
    assert r.status_code == 200

    denied = _join(client, guest, profile["joinCode"])
    assert denied.status_code == 403
    assert denied.json()["error"] == "You have been blocked from accessing this baby profile"
    assert client.get("/baby-profiles", headers=guest["headers"]).json()["profiles"] == []


def test_cooldown_tracker_window() -> None:
    now = [10.0]
    tracker = CooldownTracker(3000, clock=lambda: now[0])

    assert not tracker.is_cooling_down(1)
    tracker.record_failure(1)
    assert tracker.is_cooling_down(1)
    assert not tracker.is_cooling_down(2)

    now[0] += 3.0
    assert not tracker.is_cooling_down(1)

    tracker.record_failure(1)
    tracker.clear(1)
    assert not tracker.is_cooling_down(1)


def test_join_code_gate_uses_configured_window() -> None:
    assert join_code_gate.cooldown.window_ms == 3000
