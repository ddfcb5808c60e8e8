"""User-related Pydantic schemas."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from formcraft.models.user import PlanType


class UserResponse(BaseModel):
    """Schema for user responses."""
    id: int
    email: str
    username: str
    plan_type: PlanType
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True


class TokenData(BaseModel):
    """Schema for decoded token data."""
    user_id: Optional[int] = None
