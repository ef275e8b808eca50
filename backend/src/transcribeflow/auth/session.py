"""Session/identity provider backed by the login_session table.

Resolves the current actor from a bearer token. The workflow engine never
authenticates; routers ask this provider for an ``Actor`` and pass it on.
"""

import logging
from typing import Optional

import jwt

from ..domain.users.records import UserRecord
from ..domain.workflow.actor import Actor
from ..domain.workflow.ports import UserDirectoryPort
from ..infrastructure.repositories.session_repository import LoginSessionRepository
from .jwt import create_access_token, decode_token
from .password import verify_password

logger = logging.getLogger(__name__)


class AuthError(Exception):
    """Authentication failed: bad credentials or disabled account."""

    code = "auth_error"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class IdentityProvider:
    """Login state for one caller.

    Args:
        users: User directory used to verify credentials and reload roles
        sessions: Store for login_session rows
        token: Bearer token presented by the caller, if any
    """

    def __init__(
        self,
        users: UserDirectoryPort,
        sessions: LoginSessionRepository,
        token: Optional[str] = None,
    ):
        self.users = users
        self.sessions = sessions
        self._token = token

    @property
    def token(self) -> Optional[str]:
        return self._token

    def login(self, email: str, password: str) -> Actor:
        """Verify credentials, open a login session and issue a token.

        Raises:
            AuthError: If the credentials are wrong or the account is inactive
        """
        user = self.users.find_by_email(email)
        if user is None or not verify_password(password, user.password_hash):
            logger.warning("Login failed: invalid credentials")
            raise AuthError("Invalid email or password")

        if not user.active:
            logger.warning("Login failed: account disabled", extra={"user_id": user.id})
            raise AuthError("Account is disabled")

        session_id = self.sessions.open(user.id)
        self._token = create_access_token(
            user_id=user.id,
            session_id=session_id,
            role=user.role.value,
            email=user.email,
        )
        logger.info("User logged in", extra={"user_id": user.id})
        return Actor.from_user(user)

    def _claims(self) -> Optional[dict]:
        if not self._token:
            return None
        try:
            return decode_token(self._token)
        except jwt.InvalidTokenError:
            return None

    def current_user(self) -> Optional[UserRecord]:
        """Return the logged-in user, or None when no valid session exists.

        The role and flags are re-read from the directory, so a deactivation
        or role change takes effect on the next request.
        """
        claims = self._claims()
        if claims is None:
            return None

        try:
            user_id = int(claims["sub"])
            session_id = claims["sid"]
        except (KeyError, TypeError, ValueError):
            return None

        if not self.sessions.is_open(session_id, user_id):
            return None

        user = self.users.find_by_id(user_id)
        if user is None or not user.active:
            return None
        return user

    def current_actor(self) -> Optional[Actor]:
        user = self.current_user()
        return Actor.from_user(user) if user else None

    def logout(self) -> None:
        """End the current login session. Safe to call when logged out."""
        claims = self._claims()
        if claims and claims.get("sid"):
            self.sessions.close(claims["sid"])
            logger.info("User logged out", extra={"user_id": claims.get("sub")})
        self._token = None
