# auth.py
from typing import Optional

from babytracker.schemas.common import CamelModel
from babytracker.schemas.user import UserRead


class GoogleAuthRequest(CamelModel):
    # Accepted as either access_token or accessToken.
    access_token: Optional[str] = None


class AuthResponse(CamelModel):
    token: str
    token_type: str = "bearer"
    user: UserRead
