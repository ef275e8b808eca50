"""Users domain module - roles and user snapshots"""

from .roles import UserRole, is_admin
from .records import (
    UserRecord,
    NewUser,
    UpdateProfile,
    ChangePassword,
    RequirePasswordChange,
    UserUpdate,
)

__all__ = [
    "UserRole",
    "is_admin",
    "UserRecord",
    "NewUser",
    "UpdateProfile",
    "ChangePassword",
    "RequirePasswordChange",
    "UserUpdate",
]
