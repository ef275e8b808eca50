"""User SQLAlchemy model"""

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, Integer, String, Text, false, true
from sqlalchemy.orm import validates

from .base import Base, utcnow


class User(Base):
    """User model representing accounts of the transcription app.

    Regular users upload and transcribe files; admins review transcriptions
    and manage accounts. Passwords are hashed using Argon2id and stored in the
    ``password`` column. Users are deactivated, never deleted.
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(50), nullable=False)
    phone = Column(String(20), nullable=False)
    profile_image = Column(Text, nullable=True)
    role = Column(Text, nullable=False, server_default="regular")
    email = Column(String(254), nullable=False, unique=True)
    password_hash = Column("password", Text, nullable=False)
    must_change_password = Column("change_password", Boolean, nullable=False, default=False, server_default=false())
    active = Column(Boolean, nullable=False, default=True, server_default=true())
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        CheckConstraint(
            "role IN ('regular', 'admin')",
            name='ck_users_role'
        ),
    )

    @validates('email')
    def validate_email(self, key, value):
        """Normalize to lowercase; format is checked at the API boundary"""
        return value.strip().lower()
