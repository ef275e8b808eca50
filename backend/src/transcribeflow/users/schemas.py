"""Pydantic schemas for user management endpoints"""

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from ..auth.schemas import UserResponse


class ProfileUpdate(BaseModel):
    """Self-service profile edit. Omitted fields stay unchanged."""
    phone: Optional[str] = Field(None, min_length=10, max_length=20)
    profile_image: Optional[str] = None

    @field_validator('phone', mode='before')
    @classmethod
    def strip_text(cls, v):
        """Trim whitespace before the length checks run"""
        return v.strip() if isinstance(v, str) else v


class ActiveUpdate(BaseModel):
    active: bool


class UserListResponse(BaseModel):
    users: List[UserResponse]
    total: int
