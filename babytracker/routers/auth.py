# auth.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from babytracker.database import get_db
from babytracker.models.user import User
from babytracker.routers.dependencies import get_current_user
from babytracker.schemas.auth import AuthResponse, GoogleAuthRequest
from babytracker.schemas.user import UserRead, UserResponse
from babytracker.services.identity import sign_in_with_google


router = APIRouter()


@router.post("/google", response_model=AuthResponse)
def google_sign_in(payload: GoogleAuthRequest, db: Session = Depends(get_db)) -> AuthResponse:
    token, user = sign_in_with_google(db, payload.access_token)
    return AuthResponse(token=token, user=UserRead.model_validate(user))


@router.get("/me", response_model=UserResponse)
def read_session_user(current_user: User = Depends(get_current_user)) -> UserResponse:
    return UserResponse(user=UserRead.model_validate(current_user))
