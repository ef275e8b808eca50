"""User snapshots and the typed updates the user directory accepts.

Each update command carries exactly the columns its operation may change,
so a profile edit can never touch the role, the password or the active flag.
"""

from dataclasses import dataclass, field
from typing import Optional

from .roles import UserRole


@dataclass(frozen=True)
class UserRecord:
    """Read-only snapshot of a user row."""
    id: int
    name: str
    phone: str
    email: str
    role: UserRole
    must_change_password: bool
    active: bool
    profile_image: Optional[str] = None
    password_hash: str = field(default="", repr=False, compare=False)


@dataclass(frozen=True)
class NewUser:
    """Account to insert. Signup always produces an active regular user."""
    name: str
    phone: str
    email: str
    password_hash: str = field(repr=False)
    role: UserRole = UserRole.REGULAR
    must_change_password: bool = False
    active: bool = True
    profile_image: Optional[str] = None


@dataclass(frozen=True)
class UpdateProfile:
    """Self-service profile edit. ``None`` leaves the field untouched."""
    phone: Optional[str] = None
    profile_image: Optional[str] = None


@dataclass(frozen=True)
class ChangePassword:
    """Replace the credential; always clears the forced-change flag."""
    password_hash: str = field(repr=False)


@dataclass(frozen=True)
class RequirePasswordChange:
    """Admin request that the user picks a new password at next use."""


UserUpdate = UpdateProfile | ChangePassword | RequirePasswordChange
