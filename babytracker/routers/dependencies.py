# dependencies.py
from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Callable, Literal

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from babytracker.database import get_db
from babytracker.errors import AuthenticationError, BadRequestError
from babytracker.models.user import User
from babytracker.schemas.user import TokenData
from babytracker.services.access import ProfileAccess, authorize
from babytracker.utils.jwt_handler import INVALID_TOKEN, decode_access_token


bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user(
    db: Session = Depends(get_db),
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> User:
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Authentication required")
    payload = decode_access_token(credentials.credentials)
    user_id = payload.get("sub")
    if user_id is None:
        raise AuthenticationError(INVALID_TOKEN)
    try:
        token_data = TokenData(user_id=int(user_id))
    except ValueError as exc:
        raise AuthenticationError(INVALID_TOKEN) from exc
    user = db.query(User).filter(User.id == token_data.user_id).first()
    if not user:
        raise AuthenticationError("User not found")
    return user


@dataclass(frozen=True)
class ProfileIdSource:
    """Where a route carries the baby profile id."""

    location: Literal["path", "query", "body"]
    names: tuple[str, ...]


PATH_PROFILE_ID = ProfileIdSource("path", ("profile_id",))
QUERY_PROFILE_ID = ProfileIdSource("query", ("babyProfileId", "baby_profile_id"))
# Request bodies accept snake_case too, like the schemas they are parsed into.
BODY_PROFILE_ID = ProfileIdSource("body", ("babyProfileId", "baby_profile_id"))


async def _read_profile_id(request: Request, source: ProfileIdSource) -> Any:
    if source.location == "path":
        params: Any = request.path_params
    elif source.location == "query":
        params = request.query_params
    else:
        try:
            params = await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            return None
        if not isinstance(params, dict):
            return None
    for name in source.names:
        value = params.get(name)
        if value is not None:
            return value
    return None


def require_profile_role(
    *roles: str,
    source: ProfileIdSource = PATH_PROFILE_ID,
    message: str | None = None,
) -> Callable[..., Any]:
    """Build a dependency that admits the current user only with one of ``roles`` on the target profile."""

    async def _guard(
        request: Request,
        db: Session = Depends(get_db),
        current_user: User = Depends(get_current_user),
    ) -> ProfileAccess:
        raw = await _read_profile_id(request, source)
        try:
            baby_profile_id = int(raw)
        except (TypeError, ValueError) as exc:
            raise BadRequestError("babyProfileId is required") from exc
        return authorize(db, current_user.id, baby_profile_id, roles, insufficient_message=message)

    return _guard
