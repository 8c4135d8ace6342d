# user.py
from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from babytracker.schemas.common import CamelModel


class UserPublic(CamelModel):
    id: int
    name: Optional[str] = None
    email: str
    emoji: Optional[str] = None


class UserRead(UserPublic):
    google_id: str
    given_name: Optional[str] = None
    family_name: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class UserResponse(BaseModel):
    user: UserRead


class EmojiUpdateRequest(CamelModel):
    emoji: Optional[str] = None


class EmojiRead(CamelModel):
    id: int
    emoji: Optional[str] = None


class EmojiUpdateResponse(BaseModel):
    message: str
    user: EmojiRead


class EmojiListResponse(BaseModel):
    emojis: list[str]


class TokenData(BaseModel):
    user_id: int
