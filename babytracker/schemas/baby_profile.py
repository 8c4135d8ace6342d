from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel

from babytracker.schemas.common import CamelModel


class BabyProfileRead(CamelModel):
    id: int
    name: str
    birth_date: date | None = None
    join_code: str | None = None
    join_code_enabled: bool = True
    role: str | None = None
    joined_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class BabyProfileResponse(BaseModel):
    profile: BabyProfileRead


class BabyProfileListResponse(BaseModel):
    profiles: list[BabyProfileRead]


class BabyProfileCreateRequest(CamelModel):
    name: str | None = None
    birth_date: date | None = None


class BabyProfileUpdateRequest(CamelModel):
    name: str | None = None
    birth_date: date | None = None
    join_code_enabled: bool | None = None


class JoinRequest(CamelModel):
    join_code: str | None = None
