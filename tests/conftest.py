from __future__ import annotations

import os
from typing import Any

import pytest
from fastapi.testclient import TestClient


def pytest_configure() -> None:
    # Ensure the SQLAlchemy engine is created against sqlite for tests.
    os.environ["DB_URL"] = "sqlite:///./test.db"
    os.environ["ENVIRONMENT"] = "test"
    os.environ["JWT_SECRET"] = "test-secret"
    os.environ["JOIN_CODE_COOLDOWN_MS"] = "3000"


class FakeClock:
    """Monotonic clock stand-in for the join-code cooldown, in seconds."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance_ms(self, ms: float) -> None:
        self.now += ms / 1000.0


def fake_google_userinfo(access_token: str) -> Any:
    # "google-alice" signs in as alice@example.com; anything else is rejected like Google would.
    from babytracker.errors import AuthenticationError
    from babytracker.services.identity import GoogleIdentity

    if not access_token.startswith("google-"):
        raise AuthenticationError("Failed to fetch user info from Google: 401")
    name = access_token[len("google-"):]
    return GoogleIdentity(
        google_id=f"g-{name}",
        email=f"{name}@example.com",
        name=name.title(),
        given_name=name.title(),
        family_name="Tester",
    )


def reset_database() -> None:
    from babytracker.database import Base, engine
    import babytracker.models  # noqa: F401  # ensure all models are registered

    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)


@pytest.fixture(autouse=True)
def clock(monkeypatch: pytest.MonkeyPatch) -> FakeClock:
    from babytracker.services.join_codes import join_code_gate

    fake = FakeClock()
    join_code_gate.cooldown.reset()
    monkeypatch.setattr(join_code_gate.cooldown, "clock", fake)
    yield fake
    join_code_gate.cooldown.reset()


@pytest.fixture()
def client(monkeypatch: pytest.MonkeyPatch) -> Any:
    from babytracker.main import create_app
    from babytracker.services import identity

    # No network calls to Google in tests.
    monkeypatch.setattr(identity, "fetch_google_userinfo", fake_google_userinfo)

    reset_database()

    app = create_app()
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def db() -> Any:
    from babytracker.database import SessionLocal

    reset_database()
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
