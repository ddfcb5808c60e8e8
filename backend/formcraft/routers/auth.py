"""Authentication router."""

from fastapi import APIRouter, Depends

from formcraft.models.user import User
from formcraft.schemas.user import UserResponse
from formcraft.services.auth import get_current_active_user

router = APIRouter()


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: User = Depends(get_current_active_user)):
    """Get current user info."""
    return current_user
