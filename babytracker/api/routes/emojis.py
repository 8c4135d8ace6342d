from fastapi import APIRouter

from babytracker.data.emojis import EMOJIS
from babytracker.schemas.user import EmojiListResponse


router = APIRouter(prefix="/emojis", tags=["emojis"])


# Public: the emoji picker loads before sign-in.
@router.get("", response_model=EmojiListResponse)
def list_emojis() -> EmojiListResponse:
    return EmojiListResponse(emojis=list(EMOJIS))
