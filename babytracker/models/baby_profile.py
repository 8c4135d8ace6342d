from __future__ import annotations

from sqlalchemy import Boolean, Column, Date, DateTime, Integer, String, true
from sqlalchemy.sql import func

from babytracker.database import Base


class BabyProfile(Base):
    __tablename__ = "baby_profiles"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    birth_date = Column(Date, nullable=True)

    # 6 chars from JOIN_CODE_ALPHABET; unique while the profile exists.
    join_code = Column(String(6), unique=True, index=True, nullable=True)
    join_code_enabled = Column(Boolean, nullable=False, default=True, server_default=true())

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
