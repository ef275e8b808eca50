"""FastAPI dependencies for authentication and authorization.

This module provides dependency injection functions for:
- Building the identity provider from the Authorization header
- Resolving the current actor
- Blocking workflow access while a password change is pending
- Enforcing the admin role

Usage:
    @router.post("/files/{file_id}/claim")
    def claim(file_id: int, actor: ActiveActor):
        ...
"""

from typing import Annotated, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from ..database import get_db
from ..domain.users.records import UserRecord
from ..domain.workflow.actor import Actor
from ..infrastructure.repositories.session_repository import LoginSessionRepository
from ..infrastructure.repositories.user_repository import UserRepository
from .session import IdentityProvider


# Missing credentials are reported by get_current_actor, not by the scheme
security = HTTPBearer(auto_error=False)


def get_identity_provider(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> IdentityProvider:
    token = credentials.credentials if credentials else None
    return IdentityProvider(
        users=UserRepository(db),
        sessions=LoginSessionRepository(db),
        token=token,
    )


def get_current_user_record(
    identity: IdentityProvider = Depends(get_identity_provider),
) -> UserRecord:
    """Return the logged-in user.

    Raises:
        HTTPException 401: If the token is missing, invalid, expired, belongs
            to an ended session, or the account is inactive
    """
    user = identity.current_user()
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def get_current_actor(
    user: UserRecord = Depends(get_current_user_record),
) -> Actor:
    return Actor.from_user(user)


def get_active_actor(actor: Actor = Depends(get_current_actor)) -> Actor:
    """Actor allowed to use workflow endpoints.

    Raises:
        HTTPException 403: If the user must change their password first
    """
    if actor.must_change_password:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Password change required",
        )
    return actor


def get_admin_actor(actor: Actor = Depends(get_active_actor)) -> Actor:
    if not actor.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Administrator role required",
        )
    return actor


Identity = Annotated[IdentityProvider, Depends(get_identity_provider)]
CurrentUserRecord = Annotated[UserRecord, Depends(get_current_user_record)]
ActiveActor = Annotated[Actor, Depends(get_active_actor)]
AdminActor = Annotated[Actor, Depends(get_admin_actor)]
