# __init__.py
from babytracker.schemas.action import ActionCreateRequest, ActionListResponse, ActionRead, ActionResponse, ActionUpdateRequest
from babytracker.schemas.auth import AuthResponse, GoogleAuthRequest
from babytracker.schemas.baby_profile import (
	BabyProfileCreateRequest,
	BabyProfileListResponse,
	BabyProfileRead,
	BabyProfileResponse,
	BabyProfileUpdateRequest,
	JoinRequest,
)
from babytracker.schemas.common import CamelModel, MessageResponse
from babytracker.schemas.member import BlockRequest, MemberListResponse, MemberRead, MembershipRead, MembershipResponse, RoleUpdateRequest
from babytracker.schemas.user import EmojiListResponse, EmojiUpdateRequest, EmojiUpdateResponse, TokenData, UserPublic, UserRead, UserResponse

__all__ = [
	"ActionCreateRequest",
	"ActionListResponse",
	"ActionRead",
	"ActionResponse",
	"ActionUpdateRequest",
	"AuthResponse",
	"GoogleAuthRequest",
	"BabyProfileCreateRequest",
	"BabyProfileListResponse",
	"BabyProfileRead",
	"BabyProfileResponse",
	"BabyProfileUpdateRequest",
	"JoinRequest",
	"CamelModel",
	"MessageResponse",
	"BlockRequest",
	"MemberListResponse",
	"MemberRead",
	"MembershipRead",
	"MembershipResponse",
	"RoleUpdateRequest",
	"EmojiListResponse",
	"EmojiUpdateRequest",
	"EmojiUpdateResponse",
	"TokenData",
	"UserPublic",
	"UserRead",
	"UserResponse",
]
