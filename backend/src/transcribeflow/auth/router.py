"""Authentication endpoints

Signup, login/logout against persisted login sessions, the current-user
view and password changes.
"""

import logging

from fastapi import APIRouter, Response, status

from ..domain.users.records import ChangePassword, NewUser
from ..infrastructure.repositories.user_repository import UserRepository
from .dependencies import CurrentUserRecord, Identity
from .jwt import get_jwt_expiry_minutes
from .password import hash_password
from .schemas import (
    ChangePasswordRequest,
    LoginRequest,
    LoginResponse,
    SignupRequest,
    UserResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/signup", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def signup(payload: SignupRequest, identity: Identity):
    """Create a regular, active account.

    Raises:
        Conflict: Mapped to 409 if the email is already registered
    """
    user = identity.users.create(
        NewUser(
            name=payload.name,
            phone=payload.phone,
            email=payload.email.lower(),
            password_hash=hash_password(payload.password),
        )
    )
    return UserResponse.model_validate(user)


@router.post("/login", response_model=LoginResponse)
def login(credentials: LoginRequest, identity: Identity):
    """Authenticate and return a JWT access token.

    Raises:
        AuthError: Mapped to 401 for bad credentials or a disabled account
    """
    actor = identity.login(credentials.email, credentials.password)
    return LoginResponse(
        access_token=identity.token,
        expires_in=get_jwt_expiry_minutes() * 60,
        must_change_password=actor.must_change_password,
    )


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
def logout(identity: Identity, user: CurrentUserRecord):
    identity.logout()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/me", response_model=UserResponse)
def get_me(user: CurrentUserRecord):
    return UserResponse.model_validate(user)


@router.post("/change-password", response_model=UserResponse)
def change_password(payload: ChangePasswordRequest, identity: Identity, user: CurrentUserRecord):
    """Replace the caller's password and clear the forced-change flag."""
    users: UserRepository = identity.users
    updated = users.update_fields(user.id, ChangePassword(password_hash=hash_password(payload.new_password)))
    logger.info("Password changed", extra={"user_id": user.id})
    return UserResponse.model_validate(updated)
