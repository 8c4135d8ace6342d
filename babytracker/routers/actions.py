from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from babytracker.database import get_db
from babytracker.models.user import User
from babytracker.routers.dependencies import BODY_PROFILE_ID, QUERY_PROFILE_ID, get_current_user, require_profile_role
from babytracker.schemas.action import ActionCreateRequest, ActionListResponse, ActionResponse, ActionUpdateRequest
from babytracker.schemas.common import MessageResponse
from babytracker.services import actions as action_service
from babytracker.services.access import READ_ROLES, WRITE_ROLES, ProfileAccess


router = APIRouter(prefix="/actions", tags=["actions"])


@router.post("", response_model=ActionResponse)
def create_action(
    payload: ActionCreateRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    access: ProfileAccess = Depends(require_profile_role(*WRITE_ROLES, source=BODY_PROFILE_ID)),
) -> ActionResponse:
    action = action_service.create_action(
        db,
        baby_profile_id=access.baby_profile_id,
        user=current_user,
        action_type=payload.action_type,
        details=payload.details,
        user_emoji=payload.user_emoji,
        timestamp=payload.timestamp,
    )
    return ActionResponse(action=action)


@router.get("", response_model=ActionListResponse)
def list_actions(
    start_date: datetime | None = Query(default=None, alias="startDate"),
    end_date: datetime | None = Query(default=None, alias="endDate"),
    db: Session = Depends(get_db),
    access: ProfileAccess = Depends(require_profile_role(*READ_ROLES, source=QUERY_PROFILE_ID)),
) -> ActionListResponse:
    actions = action_service.list_actions(
        db,
        baby_profile_id=access.baby_profile_id,
        start_date=start_date,
        end_date=end_date,
    )
    return ActionListResponse(actions=actions)


# Update and delete resolve the caller's role against the action's own profile.
@router.put("/{action_id}", response_model=ActionResponse)
def update_action(
    action_id: int,
    payload: ActionUpdateRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ActionResponse:
    action = action_service.update_action(db, action_id=action_id, user_id=current_user.id, details=payload.details)
    return ActionResponse(action=action)


@router.delete("/{action_id}", response_model=MessageResponse)
def delete_action(
    action_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> MessageResponse:
    action_service.delete_action(db, action_id=action_id, user_id=current_user.id)
    return MessageResponse(message="Action deleted successfully")
