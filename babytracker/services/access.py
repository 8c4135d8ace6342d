from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from sqlalchemy.orm import Session

from babytracker.errors import ForbiddenError
from babytracker.models.user_baby_role import ROLE_ADMIN, ROLE_EDITOR, ROLE_VIEWER
from babytracker.services.role_store import resolve_role


READ_ROLES = (ROLE_ADMIN, ROLE_EDITOR, ROLE_VIEWER)
WRITE_ROLES = (ROLE_ADMIN, ROLE_EDITOR)
ADMIN_ROLES = (ROLE_ADMIN,)

NO_ACCESS = "You do not have access to this baby profile"
BLOCKED = "You have been blocked from accessing this baby profile"


@dataclass(frozen=True)
class ProfileAccess:
    role: str
    baby_profile_id: int
    user_id: int

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN


def insufficient_role_message(required_roles: Iterable[str]) -> str:
    return f"This action requires one of the following roles: {', '.join(required_roles)}"


def authorize(
    db: Session,
    user_id: int,
    baby_profile_id: int,
    required_roles: Iterable[str],
    *,
    insufficient_message: str | None = None,
) -> ProfileAccess:
    """Admit or reject a caller for a profile-scoped operation. Read-only."""

    required = tuple(required_roles)
    record = resolve_role(db, user_id, baby_profile_id)
    if record is None:
        raise ForbiddenError(NO_ACCESS)
    if record.blocked:
        raise ForbiddenError(BLOCKED)
    if record.role not in required:
        raise ForbiddenError(insufficient_message or insufficient_role_message(required))
    return ProfileAccess(role=record.role, baby_profile_id=record.baby_profile_id, user_id=user_id)
