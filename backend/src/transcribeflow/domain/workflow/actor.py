"""The identity on whose behalf a workflow operation runs."""

from dataclasses import dataclass

from ..users.records import UserRecord
from ..users.roles import UserRole, is_admin


@dataclass(frozen=True)
class Actor:
    """Resolved caller identity.

    Passed explicitly into every engine operation; the engine never looks
    up who is logged in.
    """
    id: int
    role: UserRole
    must_change_password: bool = False

    @property
    def is_admin(self) -> bool:
        return is_admin(self.role)

    @classmethod
    def from_user(cls, user: UserRecord) -> "Actor":
        return cls(
            id=user.id,
            role=user.role,
            must_change_password=user.must_change_password,
        )
