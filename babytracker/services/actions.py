# actions.py
from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from pydantic import ValidationError
from sqlalchemy.orm import Session
from sqlalchemy.sql import func

from babytracker.errors import BadRequestError, ForbiddenError, NotFoundError
from babytracker.models.action import ACTION_TYPES, Action
from babytracker.models.user import User
from babytracker.models.user_baby_role import ROLE_ADMIN, ROLE_EDITOR, UserBabyRole
from babytracker.schemas.action import ActionRead
from babytracker.schemas.action_details import DETAILS_MODELS, TimedSessionDetails, as_utc
from babytracker.schemas.user import UserPublic
from babytracker.services.access import NO_ACCESS
from babytracker.services.role_store import resolve_role


logger = logging.getLogger(__name__)

ACTION_NOT_FOUND = "Action not found"
NO_EDIT_PERMISSION = "You do not have permission to edit this action"
ADMIN_ONLY_DELETE = "Only admins can delete actions"


def _validation_reason(exc: ValidationError) -> str:
    for err in exc.errors():
        loc = ".".join(str(part) for part in err.get("loc", ()))
        msg = err.get("msg") or "invalid value"
        return f"{loc}: {msg}" if loc else msg
    return "invalid value"


def validate_details(action_type: str, raw: Any) -> dict[str, Any]:
    """Check ``raw`` against the payload model for ``action_type`` and return the stored JSON form."""

    model_cls = DETAILS_MODELS[action_type]
    try:
        parsed = model_cls.model_validate(raw if raw is not None else {})
    except ValidationError as exc:
        raise BadRequestError(f"Invalid details for {action_type} action: {_validation_reason(exc)}") from exc

    payload = parsed.model_dump(mode="json", by_alias=True, exclude_none=True)
    if isinstance(parsed, TimedSessionDetails):
        # null endTime marks an in-progress session; keep it explicit.
        payload.setdefault("endTime", None)
    return payload


def _parse_time(value: Any) -> datetime | None:
    if isinstance(value, datetime):
        return as_utc(value)
    if not isinstance(value, str) or not value:
        return None
    try:
        return as_utc(datetime.fromisoformat(value.replace("Z", "+00:00")))
    except ValueError:
        return None


def event_time(action: Action) -> datetime | None:
    """When the event happened: startTime, else timestamp. None if the client gave neither."""

    details = action.details or {}
    for key in ("startTime", "timestamp"):
        parsed = _parse_time(details.get(key))
        if parsed is not None:
            return parsed
    return None


def _sort_time(action: Action, at: datetime | None) -> datetime | None:
    # Untimed actions still need a place in the list; use when they were logged.
    if at is not None:
        return at
    if action.created_at is not None:
        return as_utc(action.created_at)
    return None


def to_action_read(action: Action, user: User | None = None) -> ActionRead:
    return ActionRead(
        id=action.id,
        baby_profile_id=action.baby_profile_id,
        user_id=action.user_id,
        action_type=action.action_type,
        details=action.details or {},
        user_emoji=action.user_emoji,
        created_at=action.created_at,
        updated_at=action.updated_at,
        user=UserPublic.model_validate(user) if user is not None else None,
    )


def create_action(
    db: Session,
    *,
    baby_profile_id: int,
    user: User,
    action_type: str | None,
    details: dict[str, Any] | None = None,
    user_emoji: str | None = None,
    timestamp: datetime | None = None,
) -> ActionRead:
    """Caller must already be admitted as admin or editor of the profile."""

    if not action_type:
        raise BadRequestError("actionType is required")
    if action_type not in ACTION_TYPES:
        raise BadRequestError("Invalid actionType. Must be diaper, sleep, feed, or other")

    merged = dict(details or {})
    if timestamp is not None:
        merged["timestamp"] = timestamp

    action = Action(
        baby_profile_id=baby_profile_id,
        user_id=user.id,
        action_type=action_type,
        details=validate_details(action_type, merged),
        user_emoji=user_emoji or user.emoji,
    )
    db.add(action)
    db.commit()
    db.refresh(action)
    return to_action_read(action)


def list_actions(
    db: Session,
    *,
    baby_profile_id: int,
    start_date: datetime | None = None,
    end_date: datetime | None = None,
) -> list[ActionRead]:
    rows = (
        db.query(Action, User)
        .outerjoin(User, User.id == Action.user_id)
        .filter(Action.baby_profile_id == baby_profile_id)
        .all()
    )

    start = as_utc(start_date) if start_date else None
    end = as_utc(end_date) if end_date else None

    timed: list[tuple[datetime | None, Action, User | None]] = []
    for action, user in rows:
        at = event_time(action)
        if start or end:
            if at is None:
                continue
            if start and at < start:
                continue
            if end and at > end:
                continue
        timed.append((_sort_time(action, at), action, user))

    timed.sort(key=lambda item: (item[0] is not None, item[0] or datetime.min, item[1].id), reverse=True)
    return [to_action_read(action, user) for _at, action, user in timed]


def _get_action_or_404(db: Session, action_id: int) -> Action:
    action = db.get(Action, action_id)
    if action is None:
        raise NotFoundError(ACTION_NOT_FOUND)
    return action


def _resolve_member(db: Session, user_id: int, action: Action) -> UserBabyRole:
    record = resolve_role(db, user_id, action.baby_profile_id)
    if record is None or record.blocked:
        raise ForbiddenError(NO_ACCESS)
    return record


def can_edit(record: UserBabyRole, action: Action, user_id: int) -> bool:
    if record.role == ROLE_ADMIN:
        return True
    return record.role == ROLE_EDITOR and action.user_id == user_id


def update_action(db: Session, *, action_id: int, user_id: int, details: dict[str, Any] | None) -> ActionRead:
    """Replace an action's details. Ending a running sleep/feed is an update that sets endTime."""

    action = _get_action_or_404(db, action_id)
    record = _resolve_member(db, user_id, action)
    if not can_edit(record, action, user_id):
        raise ForbiddenError(NO_EDIT_PERMISSION)

    action.details = validate_details(action.action_type, details or {})
    action.updated_at = func.now()
    db.commit()
    db.refresh(action)
    return to_action_read(action)


def delete_action(db: Session, *, action_id: int, user_id: int) -> None:
    action = _get_action_or_404(db, action_id)
    record = _resolve_member(db, user_id, action)
    if record.role != ROLE_ADMIN:
        raise ForbiddenError(ADMIN_ONLY_DELETE)

    baby_profile_id = action.baby_profile_id
    db.delete(action)
    db.commit()
    logger.info("action.delete action=%s profile=%s by=%s", action_id, baby_profile_id, user_id)
