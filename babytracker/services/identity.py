# identity.py
"""Google sign-in.

The web client runs the OAuth flow and sends us the Google access token. We
ask Google who it belongs to, mirror that identity into ``users`` and hand
back our own signed token.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta

import httpx
from sqlalchemy.orm import Session

from babytracker.config import settings
from babytracker.data.emojis import random_emoji
from babytracker.errors import AppError, AuthenticationError, BadRequestError
from babytracker.models.user import User
from babytracker.utils.jwt_handler import create_access_token


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GoogleIdentity:
    google_id: str
    email: str
    name: str | None = None
    given_name: str | None = None
    family_name: str | None = None


def fetch_google_userinfo(access_token: str) -> GoogleIdentity:
    try:
        response = httpx.get(
            settings.google_userinfo_url,
            headers={"Authorization": f"Bearer {access_token}"},
            timeout=settings.google_timeout_seconds,
        )
    except httpx.HTTPError as exc:
        logger.warning("google.userinfo request failed: %s", exc)
        raise AuthenticationError("Failed to fetch user info from Google") from exc

    if response.status_code != 200:
        logger.warning("google.userinfo status=%s body=%s", response.status_code, response.text[:200])
        raise AuthenticationError(f"Failed to fetch user info from Google: {response.status_code}")

    data = response.json()
    google_id = data.get("id")
    email = data.get("email")
    if not google_id or not email:
        raise AppError("Authentication failed")

    return GoogleIdentity(
        google_id=str(google_id),
        email=email,
        name=data.get("name"),
        given_name=data.get("given_name"),
        family_name=data.get("family_name"),
    )


def sync_user(db: Session, identity: GoogleIdentity) -> User:
    """Create the user on first sign-in; refresh their Google fields afterwards."""

    user = db.query(User).filter(User.google_id == identity.google_id).first()
    if user is None:
        user = User(
            google_id=identity.google_id,
            email=identity.email,
            name=identity.name,
            given_name=identity.given_name,
            family_name=identity.family_name,
            emoji=random_emoji(),
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        logger.info("user.create user=%s", user.id)
        return user

    user.email = identity.email
    user.name = identity.name
    user.given_name = identity.given_name
    user.family_name = identity.family_name
    if not user.emoji:
        user.emoji = random_emoji()
    db.commit()
    db.refresh(user)
    return user


def issue_token(user: User) -> str:
    expires_delta = timedelta(minutes=settings.access_token_expire_minutes)
    return create_access_token({"sub": str(user.id)}, expires_delta)


def sign_in_with_google(db: Session, access_token: str | None) -> tuple[str, User]:
    if not access_token:
        raise BadRequestError("Access token is required")
    identity = fetch_google_userinfo(access_token)
    user = sync_user(db, identity)
    return issue_token(user), user
