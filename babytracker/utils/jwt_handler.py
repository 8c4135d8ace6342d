# jwt_handler.py
from datetime import datetime, timedelta, timezone
from jose import JWTError, jwt
from babytracker.config import settings
from babytracker.errors import AuthenticationError


INVALID_TOKEN = "Invalid or expired token"


def create_access_token(data: dict, expires_delta: timedelta) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + expires_delta
    to_encode["exp"] = expire
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> dict:
    # ExpiredSignatureError is a JWTError; both get the same answer.
    try:
        return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError as exc:
        raise AuthenticationError(INVALID_TOKEN) from exc
