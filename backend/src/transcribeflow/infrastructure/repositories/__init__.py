"""SQLAlchemy repositories"""

from .file_repository import FileRepository
from .session_repository import LoginSessionRepository
from .user_repository import UserRepository

__all__ = ["FileRepository", "LoginSessionRepository", "UserRepository"]
