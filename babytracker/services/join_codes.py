# join_codes.py
"""Join-code invitations.

Codes are short enough to brute force, so every failed redemption (unknown
or disabled code) puts the user on a cooldown. Redeeming a code you already
hold is not a failure. The cooldown map lives in this process only; with
several API instances each one throttles independently.
"""
from __future__ import annotations

import logging
import secrets
import threading
import time
from typing import Callable

from sqlalchemy.orm import Session

from babytracker.config import settings
from babytracker.errors import BadRequestError, DuplicateRoleError, ForbiddenError, NotFoundError, TooManyRequestsError
from babytracker.models.baby_profile import BabyProfile
from babytracker.models.user_baby_role import ROLE_VIEWER, UserBabyRole
from babytracker.services.access import BLOCKED
from babytracker.services.role_store import grant_role, resolve_role


logger = logging.getLogger(__name__)

# No I, O, 0 or 1: they are easy to misread when a code is passed on by hand.
JOIN_CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
JOIN_CODE_LENGTH = 6


def normalize_join_code(code: str | None) -> str:
    return (code or "").strip().upper()


def generate_join_code(db: Session) -> str:
    while True:
        code = "".join(secrets.choice(JOIN_CODE_ALPHABET) for _ in range(JOIN_CODE_LENGTH))
        exists = db.query(BabyProfile.id).filter(BabyProfile.join_code == code).first()
        if exists is None:
            return code


class CooldownTracker:
    """Last failure time per user, measured on a monotonic clock in milliseconds."""

    def __init__(self, window_ms: int, clock: Callable[[], float] = time.monotonic):
        self.window_ms = window_ms
        self.clock = clock
        self._failures: dict[int, float] = {}
        self._lock = threading.Lock()

    def _now_ms(self) -> float:
        return self.clock() * 1000.0

    def is_cooling_down(self, user_id: int) -> bool:
        with self._lock:
            last = self._failures.get(user_id)
            if last is None:
                return False
            if self._now_ms() - last < self.window_ms:
                return True
            del self._failures[user_id]
            return False

    def record_failure(self, user_id: int) -> None:
        with self._lock:
            self._failures[user_id] = self._now_ms()

    def clear(self, user_id: int) -> None:
        with self._lock:
            self._failures.pop(user_id, None)

    def reset(self) -> None:
        with self._lock:
            self._failures.clear()


class JoinCodeGate:
    def __init__(self, cooldown: CooldownTracker):
        self.cooldown = cooldown

    def _cooldown_message(self) -> str:
        seconds = self.cooldown.window_ms / 1000
        shown = int(seconds) if seconds == int(seconds) else seconds
        return f"You must wait {shown} seconds before attempting to join again"

    def _already_member(self, profile: BabyProfile, record: UserBabyRole) -> BadRequestError:
        return DuplicateRoleError(
            payload={"profile": {"id": profile.id, "name": profile.name, "role": record.role}},
        )

    def redeem(self, db: Session, user_id: int, code: str | None) -> tuple[BabyProfile, UserBabyRole]:
        normalized = normalize_join_code(code)
        if not normalized:
            raise BadRequestError("joinCode is required")

        if self.cooldown.is_cooling_down(user_id):
            raise TooManyRequestsError(self._cooldown_message())

        profile = db.query(BabyProfile).filter(BabyProfile.join_code == normalized).one_or_none()
        if profile is None:
            self.cooldown.record_failure(user_id)
            logger.info("join.failed user=%s reason=not_found", user_id)
            raise NotFoundError("Baby profile not found with this join code")

        if not profile.join_code_enabled:
            self.cooldown.record_failure(user_id)
            logger.info("join.failed user=%s profile=%s reason=disabled", user_id, profile.id)
            raise ForbiddenError("Join code is disabled for this baby profile")

        existing = resolve_role(db, user_id, profile.id)
        if existing is not None:
            if existing.blocked:
                raise ForbiddenError(BLOCKED)
            raise self._already_member(profile, existing)

        try:
            record = grant_role(db, user_id, profile.id, ROLE_VIEWER)
        except DuplicateRoleError:
            existing = resolve_role(db, user_id, profile.id)
            if existing is None:
                raise
            if existing.blocked:
                raise ForbiddenError(BLOCKED)
            raise self._already_member(profile, existing)

        self.cooldown.clear(user_id)
        logger.info("join.ok user=%s profile=%s", user_id, profile.id)
        return profile, record


join_code_gate = JoinCodeGate(CooldownTracker(settings.join_code_cooldown_ms))
