from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from babytracker.database import get_db
from babytracker.models.user import User
from babytracker.routers.dependencies import get_current_user, require_profile_role
from babytracker.schemas.baby_profile import (
    BabyProfileCreateRequest,
    BabyProfileListResponse,
    BabyProfileResponse,
    BabyProfileUpdateRequest,
    JoinRequest,
)
from babytracker.schemas.common import MessageResponse
from babytracker.services import baby_profiles as profile_service
from babytracker.services.access import ADMIN_ROLES, READ_ROLES, ProfileAccess
from babytracker.services.join_codes import join_code_gate


router = APIRouter(prefix="/baby-profiles", tags=["baby-profiles"])


@router.get("", response_model=BabyProfileListResponse)
def list_my_profiles(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> BabyProfileListResponse:
    return BabyProfileListResponse(profiles=profile_service.list_profiles_for_user(db, current_user.id))


@router.post("", response_model=BabyProfileResponse)
def create_profile(
    payload: BabyProfileCreateRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> BabyProfileResponse:
    profile = profile_service.create_profile(db, user=current_user, name=payload.name, birth_date=payload.birth_date)
    return BabyProfileResponse(profile=profile)


@router.post("/join", response_model=BabyProfileResponse)
def join_profile(
    payload: JoinRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> BabyProfileResponse:
    profile, role = join_code_gate.redeem(db, current_user.id, payload.join_code)
    return BabyProfileResponse(profile=profile_service.to_profile_read(profile, role))


@router.get("/{profile_id}", response_model=BabyProfileResponse)
def read_profile(
    profile_id: int,
    db: Session = Depends(get_db),
    access: ProfileAccess = Depends(require_profile_role(*READ_ROLES)),
) -> BabyProfileResponse:
    return BabyProfileResponse(profile=profile_service.get_profile(db, access.baby_profile_id, access.role))


@router.put("/{profile_id}", response_model=BabyProfileResponse)
def update_profile(
    profile_id: int,
    payload: BabyProfileUpdateRequest,
    db: Session = Depends(get_db),
    access: ProfileAccess = Depends(require_profile_role(*ADMIN_ROLES, message="Only admins can update baby profiles")),
) -> BabyProfileResponse:
    changes = payload.model_dump(exclude_unset=True)
    profile = profile_service.update_profile(db, access.baby_profile_id, changes, role=access.role)
    return BabyProfileResponse(profile=profile)


@router.delete("/{profile_id}", response_model=MessageResponse)
def delete_profile(
    profile_id: int,
    db: Session = Depends(get_db),
    access: ProfileAccess = Depends(require_profile_role(*ADMIN_ROLES, message="Only admins can delete baby profiles")),
) -> MessageResponse:
    profile_service.delete_profile(db, access.baby_profile_id, deleted_by=access.user_id)
    return MessageResponse(message="Baby profile deleted successfully")


@router.put("/{profile_id}/toggle-join-code", response_model=BabyProfileResponse)
def toggle_join_code(
    profile_id: int,
    db: Session = Depends(get_db),
    access: ProfileAccess = Depends(
        require_profile_role(*ADMIN_ROLES, message="Only admins can toggle join code status")
    ),
) -> BabyProfileResponse:
    return BabyProfileResponse(profile=profile_service.toggle_join_code(db, access.baby_profile_id, role=access.role))


@router.post("/{profile_id}/leave", response_model=MessageResponse)
def leave_profile(
    profile_id: int,
    db: Session = Depends(get_db),
    access: ProfileAccess = Depends(require_profile_role(*READ_ROLES)),
) -> MessageResponse:
    profile_service.leave_profile(db, access.baby_profile_id, access.user_id)
    return MessageResponse(message="Successfully left baby profile")
