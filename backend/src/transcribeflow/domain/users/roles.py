"""User roles for TranscribeFlow.

Two roles exist and there is no hierarchy between them:

┌──────────────────────┬─────────┬───────┐
│ Action               │ REGULAR │ ADMIN │
├──────────────────────┼─────────┼───────┤
│ Upload files         │    ✓    │   ✓   │
│ Claim / transcribe   │    ✓    │       │
│ Approve / reject     │         │   ✓   │
│ Rename / delete file │         │   ✓   │
│ See every file       │         │   ✓   │
│ Manage users         │         │   ✓   │
└──────────────────────┴─────────┴───────┘

Values are stored as TEXT in the database and must match exactly.
"""

from enum import Enum


class UserRole(str, Enum):
    """User roles. REGULAR users upload and transcribe, ADMIN users review."""
    REGULAR = "regular"
    ADMIN = "admin"


def is_admin(role: UserRole) -> bool:
    return role is UserRole.ADMIN
