"""SQLAlchemy Models for TranscribeFlow"""

from .base import Base
from .user import User
from .file import File
from .login_session import LoginSession

__all__ = [
    "Base",
    "User",
    "File",
    "LoginSession",
]
