from __future__ import annotations

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from babytracker.database import Base


ACTION_TYPES = ("diaper", "sleep", "feed", "other")


class Action(Base):
    __tablename__ = "actions"

    id = Column(Integer, primary_key=True, index=True)

    # Plain indexed column, not a foreign key: actions outlive a deleted profile.
    baby_profile_id = Column(Integer, nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    action_type = Column(String(16), nullable=False)
    # Shape depends on action_type; validated by babytracker.schemas.action_details.
    details = Column(JSON, nullable=False, default=dict)
    # Author's emoji at the time of logging.
    user_emoji = Column(String(16), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    user = relationship("User")
