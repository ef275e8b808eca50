"""LoginSession SQLAlchemy model

Persisted login state. A JWT is only honoured while the session row it
names is still open.
"""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String

from .base import Base, utcnow


class LoginSession(Base):
    __tablename__ = "login_session"

    id = Column(String(32), primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    ended_at = Column(DateTime(timezone=True), nullable=True)
