from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, StrictBool

from babytracker.schemas.common import CamelModel
from babytracker.schemas.user import UserRead


class MemberRead(UserRead):
    role: str
    blocked: bool = False
    joined_at: datetime | None = None


class MemberListResponse(BaseModel):
    users: list[MemberRead]
    count: int


# Field presence and role values are checked by the role store so the
# client gets its specific messages rather than generic validation errors.
class RoleUpdateRequest(CamelModel):
    baby_profile_id: int | None = None
    target_user_id: int | None = None
    new_role: str | None = None


class BlockRequest(CamelModel):
    baby_profile_id: int | None = None
    target_user_id: int | None = None
    blocked: StrictBool | None = None


class MembershipRead(CamelModel):
    user_id: int
    baby_profile_id: int
    role: str
    blocked: bool = False


class MembershipResponse(CamelModel):
    message: str
    user_role: MembershipRead
