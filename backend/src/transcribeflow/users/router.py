"""User management endpoints.

``PATCH /users/me`` is open to every logged-in user, including those who
still have to change their password. Everything else requires the ADMIN
role. Users are never deleted; deactivation is the only removal.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ..auth.dependencies import AdminActor, CurrentUserRecord
from ..auth.schemas import UserResponse
from ..database import get_db
from ..domain.users.records import RequirePasswordChange, UpdateProfile
from ..infrastructure.repositories.user_repository import UserRepository
from .schemas import ActiveUpdate, ProfileUpdate, UserListResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["User Management"])


def get_user_repository(db: Session = Depends(get_db)) -> UserRepository:
    return UserRepository(db)


Users = Annotated[UserRepository, Depends(get_user_repository)]


@router.patch("/me", response_model=UserResponse)
def update_profile(payload: ProfileUpdate, user: CurrentUserRecord, users: Users):
    """Change the caller's phone and/or profile image."""
    updated = users.update_fields(
        user.id,
        UpdateProfile(
            phone=payload.phone,
            profile_image=payload.profile_image,
        ),
    )
    logger.info("Profile updated", extra={"user_id": user.id})
    return UserResponse.model_validate(updated)


@router.get("", response_model=UserListResponse)
def list_users(actor: AdminActor, users: Users):
    """List every account except the caller's own."""
    others = [user for user in users.list_all() if user.id != actor.id]
    return UserListResponse(
        users=[UserResponse.model_validate(user) for user in others],
        total=len(others),
    )


@router.get("/{user_id}", response_model=UserResponse)
def get_user(user_id: int, actor: AdminActor, users: Users):
    user = users.find_by_id(user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"User {user_id} not found",
        )
    return UserResponse.model_validate(user)


@router.patch("/{user_id}/active", response_model=UserResponse)
def set_active(user_id: int, payload: ActiveUpdate, actor: AdminActor, users: Users):
    """Activate or deactivate an account.

    Raises:
        HTTPException 400: If an admin tries to deactivate themselves
    """
    if user_id == actor.id and not payload.active:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Cannot deactivate your own account",
        )
    updated = users.set_active(user_id, payload.active)
    logger.info(
        f"User {'activated' if payload.active else 'deactivated'}",
        extra={"user_id": user_id},
    )
    return UserResponse.model_validate(updated)


@router.post("/{user_id}/require-password-change", response_model=UserResponse)
def require_password_change(user_id: int, actor: AdminActor, users: Users):
    updated = users.update_fields(user_id, RequirePasswordChange())
    logger.info("Password change required", extra={"user_id": user_id})
    return UserResponse.model_validate(updated)
