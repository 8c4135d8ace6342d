# users.py
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from babytracker.database import get_db
from babytracker.models.user import User
from babytracker.routers.dependencies import BODY_PROFILE_ID, QUERY_PROFILE_ID, get_current_user, require_profile_role
from babytracker.schemas.common import MessageResponse
from babytracker.schemas.member import BlockRequest, MemberListResponse, MembershipResponse, RoleUpdateRequest
from babytracker.schemas.user import EmojiRead, EmojiUpdateRequest, EmojiUpdateResponse, UserRead, UserResponse
from babytracker.services import members as member_service
from babytracker.services import role_store
from babytracker.services.access import ADMIN_ROLES, ProfileAccess


router = APIRouter()


@router.get("", response_model=MemberListResponse)
def list_profile_members(
    db: Session = Depends(get_db),
    access: ProfileAccess = Depends(require_profile_role(*ADMIN_ROLES, source=QUERY_PROFILE_ID)),
) -> MemberListResponse:
    members = member_service.list_members(db, access.baby_profile_id)
    return MemberListResponse(users=members, count=len(members))


@router.get("/me", response_model=UserResponse)
def read_current_user(current_user: User = Depends(get_current_user)) -> UserResponse:
    return UserResponse(user=UserRead.model_validate(current_user))


@router.put("/role", response_model=MembershipResponse)
def change_member_role(
    payload: RoleUpdateRequest,
    db: Session = Depends(get_db),
    access: ProfileAccess = Depends(
        require_profile_role(*ADMIN_ROLES, source=BODY_PROFILE_ID, message="Only admins can change user roles")
    ),
) -> MembershipResponse:
    record = role_store.change_role(
        db,
        acting_user_id=access.user_id,
        target_user_id=payload.target_user_id,
        baby_profile_id=access.baby_profile_id,
        new_role=payload.new_role,
    )
    return MembershipResponse(message="User role updated successfully", user_role=member_service.to_membership_read(record))


@router.put("/block", response_model=MembershipResponse)
def block_member(
    payload: BlockRequest,
    db: Session = Depends(get_db),
    access: ProfileAccess = Depends(
        require_profile_role(*ADMIN_ROLES, source=BODY_PROFILE_ID, message="Only admins can block users")
    ),
) -> MembershipResponse:
    record = role_store.set_blocked(
        db,
        acting_user_id=access.user_id,
        target_user_id=payload.target_user_id,
        baby_profile_id=access.baby_profile_id,
        blocked=payload.blocked,
    )
    message = "User blocked successfully" if record.blocked else "User unblocked successfully"
    return MembershipResponse(message=message, user_role=member_service.to_membership_read(record))


@router.delete("", response_model=MessageResponse)
def remove_member(
    target_user_id: int | None = Query(default=None, alias="targetUserId"),
    db: Session = Depends(get_db),
    access: ProfileAccess = Depends(
        require_profile_role(*ADMIN_ROLES, source=QUERY_PROFILE_ID, message="Only admins can remove users")
    ),
) -> MessageResponse:
    role_store.revoke_role(
        db,
        acting_user_id=access.user_id,
        target_user_id=target_user_id,
        baby_profile_id=access.baby_profile_id,
    )
    return MessageResponse(message="User removed from baby profile successfully")


@router.get("/{user_id}", response_model=UserResponse)
def read_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> UserResponse:
    user = member_service.get_visible_user(db, acting_user_id=current_user.id, user_id=user_id)
    return UserResponse(user=UserRead.model_validate(user))


@router.put("/{user_id}/emoji", response_model=EmojiUpdateResponse)
def update_user_emoji(
    user_id: int,
    payload: EmojiUpdateRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> EmojiUpdateResponse:
    user = member_service.update_emoji(db, acting_user_id=current_user.id, target_user_id=user_id, emoji=payload.emoji)
    return EmojiUpdateResponse(message="Emoji updated successfully", user=EmojiRead.model_validate(user))
