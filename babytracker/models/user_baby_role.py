from __future__ import annotations

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, UniqueConstraint, false
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from babytracker.database import Base


ROLE_ADMIN = "admin"
ROLE_EDITOR = "editor"
ROLE_VIEWER = "viewer"
ROLES = (ROLE_ADMIN, ROLE_EDITOR, ROLE_VIEWER)


class UserBabyRole(Base):
    __tablename__ = "user_baby_roles"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    baby_profile_id = Column(
        Integer,
        ForeignKey("baby_profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    role = Column(String(16), nullable=False, default=ROLE_VIEWER)
    blocked = Column(Boolean, nullable=False, default=False, server_default=false())

    # Doubles as "joined at" for the member.
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    user = relationship("User")
    baby_profile = relationship("BabyProfile")

    __table_args__ = (
        UniqueConstraint("user_id", "baby_profile_id", name="uq_user_baby_roles_user_profile"),
    )
