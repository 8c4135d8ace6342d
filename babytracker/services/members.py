from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from babytracker.errors import BadRequestError, ForbiddenError, NotFoundError
from babytracker.models.user import User
from babytracker.models.user_baby_role import UserBabyRole
from babytracker.schemas.member import MemberRead, MembershipRead
from babytracker.schemas.user import UserRead


logger = logging.getLogger(__name__)

MAX_EMOJI_LENGTH = 10


def to_membership_read(record: UserBabyRole) -> MembershipRead:
    return MembershipRead(
        user_id=record.user_id,
        baby_profile_id=record.baby_profile_id,
        role=record.role,
        blocked=bool(record.blocked),
    )


def list_members(db: Session, baby_profile_id: int) -> list[MemberRead]:
    """Everyone with a row for the profile, blocked users included, newest first."""

    rows = (
        db.query(UserBabyRole, User)
        .join(User, User.id == UserBabyRole.user_id)
        .filter(UserBabyRole.baby_profile_id == baby_profile_id)
        .order_by(UserBabyRole.created_at.desc(), UserBabyRole.id.desc())
        .all()
    )
    members: list[MemberRead] = []
    for record, user in rows:
        base = UserRead.model_validate(user).model_dump()
        members.append(
            MemberRead(
                **base,
                role=record.role,
                blocked=bool(record.blocked),
                joined_at=record.created_at,
            )
        )
    return members


def get_user(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


def _shares_profile(db: Session, user_id: int, other_id: int) -> bool:
    # The caller must be an active member; the other side may be blocked.
    mine = select(UserBabyRole.baby_profile_id).where(
        UserBabyRole.user_id == user_id, UserBabyRole.blocked.is_(False)
    )
    shared = (
        db.query(UserBabyRole.id)
        .filter(UserBabyRole.user_id == other_id, UserBabyRole.baby_profile_id.in_(mine))
        .first()
    )
    return shared is not None


def get_visible_user(db: Session, *, acting_user_id: int, user_id: int) -> User:
    """Look up a user the caller may see: themselves or someone in one of their profiles.

    Anyone else answers "User not found" so the endpoint cannot be used to enumerate accounts.
    """

    if acting_user_id != user_id and not _shares_profile(db, acting_user_id, user_id):
        raise NotFoundError("User not found")
    return get_user(db, user_id)


def update_emoji(db: Session, *, acting_user_id: int, target_user_id: int, emoji: str | None) -> User:
    if not emoji:
        raise BadRequestError("Emoji is required")
    if len(emoji) > MAX_EMOJI_LENGTH:
        raise BadRequestError("Invalid emoji format")
    if acting_user_id != target_user_id:
        raise ForbiddenError("You can only update your own emoji")

    user = get_user(db, target_user_id)
    user.emoji = emoji
    db.commit()
    db.refresh(user)
    logger.info("user.emoji user=%s", user.id)
    return user
