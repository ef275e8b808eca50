"""Pydantic schemas for authentication endpoints"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator

from ..domain.users.roles import UserRole


class SignupRequest(BaseModel):
    """Request schema for account creation.

    Attributes:
        name: Display name
        phone: Contact phone, at least 10 characters
        email: Login email, unique across accounts
        password: Plain-text password
        confirm_password: Must equal ``password``
    """
    name: str = Field(..., min_length=1, max_length=50)
    phone: str = Field(..., min_length=10, max_length=20)
    email: EmailStr
    password: str = Field(..., min_length=1)
    confirm_password: str = Field(..., min_length=1)

    @field_validator('name', 'phone', mode='before')
    @classmethod
    def strip_text(cls, v):
        """Trim whitespace before the length checks run"""
        return v.strip() if isinstance(v, str) else v

    @model_validator(mode="after")
    def passwords_match(self):
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class LoginResponse(BaseModel):
    """Response schema for successful login.

    Attributes:
        access_token: JWT access token
        token_type: Token type (always "bearer")
        expires_in: Token expiry in seconds
        must_change_password: Client should route to the change-password form
    """
    access_token: str
    token_type: str = "bearer"
    expires_in: int = 3600
    must_change_password: bool = False


class ChangePasswordRequest(BaseModel):
    new_password: str = Field(..., min_length=1)
    confirm_password: str = Field(..., min_length=1)

    @model_validator(mode="after")
    def passwords_match(self):
        if self.new_password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self


class UserResponse(BaseModel):
    """User information response (excludes the password)."""
    id: int
    name: str
    phone: str
    email: str
    role: UserRole
    must_change_password: bool
    active: bool
    profile_image: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)
