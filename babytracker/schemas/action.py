from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel

from babytracker.schemas.common import CamelModel
from babytracker.schemas.user import UserPublic


class ActionCreateRequest(CamelModel):
    baby_profile_id: int | None = None
    action_type: str | None = None
    details: dict[str, Any] | None = None
    user_emoji: str | None = None
    # Backdates the entry: stored as details.timestamp.
    timestamp: datetime | None = None


class ActionUpdateRequest(CamelModel):
    details: dict[str, Any] | None = None


class ActionRead(CamelModel):
    id: int
    baby_profile_id: int
    user_id: int
    action_type: str
    details: dict[str, Any]
    user_emoji: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    user: UserPublic | None = None


class ActionResponse(BaseModel):
    action: ActionRead


class ActionListResponse(BaseModel):
    actions: list[ActionRead]
