from datetime import timedelta

from babytracker.data.emojis import EMOJIS
from babytracker.database import SessionLocal
from babytracker.models.user import User
from babytracker.utils.jwt_handler import create_access_token


def _sign_in(client, name: str) -> dict:
    r = client.post("/auth/google", json={"access_token": f"google-{name}"})
    assert r.status_code == 200
    return r.json()


def test_google_sign_in_creates_user_and_issues_token(client) -> None:
    body = _sign_in(client, "alice")
    assert body["tokenType"] == "bearer"
    user = body["user"]
    assert user["email"] == "alice@example.com"
    assert user["googleId"] == "g-alice"
    assert user["emoji"] in EMOJIS

    headers = {"Authorization": f"Bearer {body['token']}"}
    me = client.get("/auth/me", headers=headers)
    assert me.status_code == 200
    assert me.json()["user"]["id"] == user["id"]

    me2 = client.get("/users/me", headers=headers)
    assert me2.status_code == 200
    assert me2.json()["user"]["email"] == "alice@example.com"


def test_second_sign_in_refreshes_profile_and_keeps_emoji(client) -> None:
    first = _sign_in(client, "bob")["user"]

    with SessionLocal() as db:
        user = db.get(User, first["id"])
        user.name = "Old Name"
        db.commit()

    second = _sign_in(client, "bob")["user"]
    assert second["id"] == first["id"]
    assert second["name"] == "Bob"
    assert second["emoji"] == first["emoji"]

    with SessionLocal() as db:
        assert db.query(User).count() == 1


def test_sign_in_accepts_camel_case_token_field(client) -> None:
    r = client.post("/auth/google", json={"accessToken": "google-carol"})
    assert r.status_code == 200
    assert r.json()["user"]["email"] == "carol@example.com"


def test_sign_in_requires_access_token(client) -> None:
    r = client.post("/auth/google", json={})
    assert r.status_code == 400
    assert r.json()["error"] == "Access token is required"


def test_sign_in_rejects_token_google_does_not_accept(client) -> None:
    r = client.post("/auth/google", json={"access_token": "bogus"})
    assert r.status_code == 401
    assert r.json()["error"].startswith("Failed to fetch user info from Google")


def test_missing_and_invalid_credentials_have_distinct_messages(client) -> None:
    missing = client.get("/users/me")
    assert missing.status_code == 401
    assert missing.json()["error"] == "Authentication required"

    invalid = client.get("/users/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert invalid.status_code == 401
    assert invalid.json()["error"] == "Invalid or expired token"


def test_expired_token_is_rejected(client) -> None:
    user = _sign_in(client, "dave")["user"]
    expired = create_access_token({"sub": str(user["id"])}, timedelta(minutes=-5))

    r = client.get("/users/me", headers={"Authorization": f"Bearer {expired}"})
    assert r.status_code == 401
    assert r.json()["error"] == "Invalid or expired token"


def test_token_for_unknown_user_is_rejected(client) -> None:
    token = create_access_token({"sub": "999"}, timedelta(minutes=5))
    r = client.get("/users/me", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 401
    assert r.json()["error"] == "User not found"


def test_emoji_catalogue_is_public(client) -> None:
    r = client.get("/emojis")
    assert r.status_code == 200
    assert r.json()["emojis"] == list(EMOJIS)


def test_health(client) -> None:
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"
    assert r.json()["service"] == "Baby Tracker API"

    db_status = client.get("/health/db")
    assert db_status.status_code == 200
    body = db_status.json()
    assert body["status"] == "ok"
    assert body["missing_tables"] == []
    assert body["db_url"].startswith("sqlite")
