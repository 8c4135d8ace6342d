# role_store.py
"""Membership of users in baby profiles.

Each (user, profile) pair is in one of three states:

    absent --grant--> active(role) --block--> blocked
    absent --block--> blocked      --unblock--> active(role)
    active --revoke/leave--> absent
    active --change_role--> active(new role)

A blocked pair keeps its row (and its role) so the user cannot redeem the
join code again. All authorization decisions go through ``resolve_role``.
"""
from __future__ import annotations

import enum
import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from babytracker.errors import BadRequestError, DuplicateRoleError, ForbiddenError, NotFoundError
from babytracker.models.user import User
from babytracker.models.user_baby_role import ROLE_ADMIN, ROLE_VIEWER, ROLES, UserBabyRole


logger = logging.getLogger(__name__)

NOT_A_MEMBER = "User is not part of this baby profile"


class MembershipState(str, enum.Enum):
    ABSENT = "absent"
    ACTIVE = "active"
    BLOCKED = "blocked"


def membership_state(role: UserBabyRole | None) -> MembershipState:
    if role is None:
        return MembershipState.ABSENT
    if role.blocked:
        return MembershipState.BLOCKED
    return MembershipState.ACTIVE


def resolve_role(db: Session, user_id: int, baby_profile_id: int) -> UserBabyRole | None:
    return (
        db.query(UserBabyRole)
        .filter(UserBabyRole.user_id == user_id, UserBabyRole.baby_profile_id == baby_profile_id)
        .one_or_none()
    )


def grant_role(db: Session, user_id: int, baby_profile_id: int, role: str, *, commit: bool = True) -> UserBabyRole:
    """absent -> active. Raises DuplicateRoleError if the pair already has a row."""

    if role not in ROLES:
        raise BadRequestError("Invalid role. Must be admin, editor, or viewer")
    if resolve_role(db, user_id, baby_profile_id) is not None:
        raise DuplicateRoleError()

    record = UserBabyRole(user_id=user_id, baby_profile_id=baby_profile_id, role=role, blocked=False)
    db.add(record)
    try:
        if commit:
            db.commit()
        else:
            db.flush()
    except IntegrityError as exc:
        # A concurrent insert for the same pair won the race.
        db.rollback()
        raise DuplicateRoleError() from exc
    db.refresh(record)
    return record


def change_role(
    db: Session,
    *,
    acting_user_id: int,
    target_user_id: int | None,
    baby_profile_id: int,
    new_role: str | None,
) -> UserBabyRole:
    if not target_user_id or not new_role:
        raise BadRequestError("targetUserId and newRole are required")
    if new_role not in ROLES:
        raise BadRequestError("Invalid role. Must be admin, editor, or viewer")
    if acting_user_id == target_user_id:
        raise BadRequestError("You cannot change your own role")

    record = resolve_role(db, target_user_id, baby_profile_id)
    if record is None:
        raise NotFoundError(NOT_A_MEMBER)

    previous = record.role
    record.role = new_role
    db.commit()
    db.refresh(record)
    logger.info(
        "role.change profile=%s target=%s by=%s %s->%s",
        baby_profile_id, target_user_id, acting_user_id, previous, new_role,
    )
    return record


def revoke_role(db: Session, *, acting_user_id: int, target_user_id: int | None, baby_profile_id: int) -> None:
    """Admin removes another member. Admins cannot remove themselves; they delete the profile."""

    if not target_user_id:
        raise BadRequestError("targetUserId is required")
    if acting_user_id == target_user_id:
        raise BadRequestError("You cannot remove yourself from the baby profile")

    record = resolve_role(db, target_user_id, baby_profile_id)
    if record is None:
        raise NotFoundError(NOT_A_MEMBER)

    db.delete(record)
    db.commit()
    logger.info("role.revoke profile=%s target=%s by=%s", baby_profile_id, target_user_id, acting_user_id)


def leave(db: Session, user_id: int, baby_profile_id: int) -> None:
    """Self-service exit for editors and viewers."""

    record = resolve_role(db, user_id, baby_profile_id)
    if record is None:
        raise NotFoundError(NOT_A_MEMBER)
    if record.role == ROLE_ADMIN:
        raise ForbiddenError("Admins cannot leave a profile. Please delete the profile instead.")

    db.delete(record)
    db.commit()
    logger.info("role.leave profile=%s user=%s", baby_profile_id, user_id)


def set_blocked(
    db: Session,
    *,
    acting_user_id: int,
    target_user_id: int | None,
    baby_profile_id: int,
    blocked: bool | None,
) -> UserBabyRole:
    """block: absent/active/blocked -> blocked. unblock: blocked -> active."""

    if not target_user_id or blocked is None:
        raise BadRequestError("targetUserId and blocked (boolean) are required")
    if acting_user_id == target_user_id:
        raise BadRequestError("You cannot block yourself")

    record = resolve_role(db, target_user_id, baby_profile_id)
    state = membership_state(record)

    if blocked:
        if state is MembershipState.ABSENT:
            if db.get(User, target_user_id) is None:
                raise NotFoundError("User not found")
            # Pre-block a user who never joined so the join code cannot let them in.
            record = UserBabyRole(
                user_id=target_user_id,
                baby_profile_id=baby_profile_id,
                role=ROLE_VIEWER,
                blocked=True,
            )
            db.add(record)
        else:
            record.blocked = True
    else:
        if state is MembershipState.ABSENT:
            raise NotFoundError("User is not blocked for this baby profile")
        if state is MembershipState.ACTIVE:
            raise BadRequestError("User is not blocked")
        record.blocked = False

    try:
        db.commit()
    except IntegrityError:
        # Two concurrent pre-blocks: the other insert created the row; block it instead.
        db.rollback()
        record = resolve_role(db, target_user_id, baby_profile_id)
        if record is None:
            raise
        record.blocked = True
        db.commit()
    db.refresh(record)
    logger.info(
        "role.%s profile=%s target=%s by=%s",
        "block" if blocked else "unblock", baby_profile_id, target_user_id, acting_user_id,
    )
    return record


def delete_roles_for_profile(db: Session, baby_profile_id: int) -> int:
    return (
        db.query(UserBabyRole)
        .filter(UserBabyRole.baby_profile_id == baby_profile_id)
        .delete(synchronize_session=False)
    )
