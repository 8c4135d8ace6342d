from __future__ import annotations

import logging
from datetime import date
from typing import Any

from sqlalchemy.orm import Session

from babytracker.errors import BadRequestError, NotFoundError
from babytracker.models.baby_profile import BabyProfile
from babytracker.models.user import User
from babytracker.models.user_baby_role import ROLE_ADMIN, UserBabyRole
from babytracker.schemas.baby_profile import BabyProfileRead
from babytracker.services import role_store
from babytracker.services.join_codes import generate_join_code


logger = logging.getLogger(__name__)

PROFILE_NOT_FOUND = "Baby profile not found"


def to_profile_read(profile: BabyProfile, role: UserBabyRole | str | None = None) -> BabyProfileRead:
    joined_at = None
    if isinstance(role, UserBabyRole):
        joined_at = role.created_at
        role = role.role
    return BabyProfileRead(
        id=profile.id,
        name=profile.name,
        birth_date=profile.birth_date,
        join_code=profile.join_code,
        join_code_enabled=profile.join_code_enabled is not False,
        role=role,
        joined_at=joined_at,
        created_at=profile.created_at,
        updated_at=profile.updated_at,
    )


def _get_profile_or_404(db: Session, baby_profile_id: int) -> BabyProfile:
    profile = db.get(BabyProfile, baby_profile_id)
    if profile is None:
        raise NotFoundError(PROFILE_NOT_FOUND)
    return profile


def list_profiles_for_user(db: Session, user_id: int) -> list[BabyProfileRead]:
    rows = (
        db.query(UserBabyRole, BabyProfile)
        .join(BabyProfile, BabyProfile.id == UserBabyRole.baby_profile_id)
        .filter(UserBabyRole.user_id == user_id, UserBabyRole.blocked.is_(False))
        .order_by(UserBabyRole.created_at.asc(), UserBabyRole.id.asc())
        .all()
    )
    return [to_profile_read(profile, role) for role, profile in rows]


def create_profile(db: Session, *, user: User, name: str | None, birth_date: date | None) -> BabyProfileRead:
    if not name or not name.strip():
        raise BadRequestError("name is required")

    profile = BabyProfile(
        name=name.strip(),
        birth_date=birth_date,
        join_code=generate_join_code(db),
        join_code_enabled=True,
    )
    db.add(profile)
    db.flush()
    # Creator becomes the first admin in the same transaction.
    role = role_store.grant_role(db, user.id, profile.id, ROLE_ADMIN, commit=False)
    db.commit()
    db.refresh(profile)
    db.refresh(role)
    logger.info("profile.create profile=%s by=%s", profile.id, user.id)
    return to_profile_read(profile, role)


def get_profile(db: Session, baby_profile_id: int, role: UserBabyRole | str | None = None) -> BabyProfileRead:
    return to_profile_read(_get_profile_or_404(db, baby_profile_id), role)


def update_profile(db: Session, baby_profile_id: int, changes: dict[str, Any], *, role: str | None = None) -> BabyProfileRead:
    """Partial update; ``changes`` holds only the fields the client sent."""

    profile = _get_profile_or_404(db, baby_profile_id)

    if "name" in changes:
        name = changes["name"]
        if not name or not str(name).strip():
            raise BadRequestError("name is required")
        profile.name = str(name).strip()
    if "birth_date" in changes:
        profile.birth_date = changes["birth_date"]
    if "join_code_enabled" in changes and changes["join_code_enabled"] is not None:
        profile.join_code_enabled = bool(changes["join_code_enabled"])

    db.commit()
    db.refresh(profile)
    return to_profile_read(profile, role)


def delete_profile(db: Session, baby_profile_id: int, *, deleted_by: int | None = None) -> None:
    """Delete the profile and every membership row. Actions are left in place."""

    profile = _get_profile_or_404(db, baby_profile_id)
    removed = role_store.delete_roles_for_profile(db, baby_profile_id)
    db.delete(profile)
    db.commit()
    logger.info("profile.delete profile=%s by=%s roles_removed=%s", baby_profile_id, deleted_by, removed)


def toggle_join_code(db: Session, baby_profile_id: int, *, role: str | None = None) -> BabyProfileRead:
    profile = _get_profile_or_404(db, baby_profile_id)
    profile.join_code_enabled = not profile.join_code_enabled
    db.commit()
    db.refresh(profile)
    logger.info("profile.join_code profile=%s enabled=%s", baby_profile_id, profile.join_code_enabled)
    return to_profile_read(profile, role)


def leave_profile(db: Session, baby_profile_id: int, user_id: int) -> None:
    role_store.leave(db, user_id, baby_profile_id)
