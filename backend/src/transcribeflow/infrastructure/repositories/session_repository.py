"""Login session repository"""

import secrets
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...domain.errors import StoreError
from ...models.login_session import LoginSession


class LoginSessionRepository:
    """Open and close rows of the login_session table."""

    def __init__(self, db: Session):
        self.db = db

    def open(self, user_id: int) -> str:
        """Start a session for ``user_id`` and return its id."""
        session_id = secrets.token_hex(16)
        self.db.add(LoginSession(id=session_id, user_id=user_id))
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreError("Could not start the session") from e
        return session_id

    def is_open(self, session_id: str, user_id: int) -> bool:
        row = self.db.get(LoginSession, session_id)
        return row is not None and row.user_id == user_id and row.ended_at is None

    def close(self, session_id: str, now: Optional[datetime] = None) -> None:
        """End the session. Closing an unknown or ended session is a no-op."""
        row = self.db.get(LoginSession, session_id)
        if row is None or row.ended_at is not None:
            return
        row.ended_at = now or datetime.now(timezone.utc)
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreError("Could not end the session") from e
