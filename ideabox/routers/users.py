"""Users router – current actor profile."""

from fastapi import APIRouter, Depends

from ideabox.models.user import User
from ideabox.routers.auth import require_user
from ideabox.schemas.user import UserOut

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=UserOut)
async def read_me(current_user: User = Depends(require_user)):
    """Return the authenticated user's profile."""
    return current_user
