"""User repository for database operations"""

import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ...domain.errors import Conflict, NotFound, StoreError
from ...domain.users.records import (
    ChangePassword,
    NewUser,
    RequirePasswordChange,
    UpdateProfile,
    UserRecord,
    UserUpdate,
)
from ...domain.users.roles import UserRole
from ...domain.workflow.ports import UserDirectoryPort
from ...models.user import User as UserModel

logger = logging.getLogger(__name__)


def to_record(row: UserModel) -> UserRecord:
    return UserRecord(
        id=row.id,
        name=row.name,
        phone=row.phone,
        email=row.email,
        role=UserRole(row.role),
        must_change_password=bool(row.must_change_password),
        active=bool(row.active),
        profile_image=row.profile_image,
        password_hash=row.password_hash,
    )


class UserRepository(UserDirectoryPort):
    """Repository for users table operations.

    Users are never deleted; ``set_active`` is the only way to take an
    account out of service.
    """

    def __init__(self, db: Session):
        """Initialize repository with database session.

        Args:
            db: SQLAlchemy database session
        """
        self.db = db

    def _get_row(self, user_id: int) -> UserModel:
        row = self.db.get(UserModel, user_id)
        if row is None:
            raise NotFound(f"User {user_id} not found")
        return row

    def _commit(self, row: UserModel, what: str) -> UserRecord:
        try:
            self.db.commit()
            self.db.refresh(row)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to {what}", extra={"user_id": row.id}, exc_info=True)
            raise StoreError(f"Could not {what}") from e
        return to_record(row)

    def find_by_id(self, user_id: int) -> Optional[UserRecord]:
        try:
            row = self.db.get(UserModel, user_id)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreError("Could not load the user") from e
        return to_record(row) if row else None

    def find_by_email(self, email: str) -> Optional[UserRecord]:
        """Case-insensitive lookup; emails are stored lowercased."""
        try:
            row = self.db.execute(
                select(UserModel).where(UserModel.email == email.strip().lower())
            ).scalars().first()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreError("Could not load the user") from e
        return to_record(row) if row else None

    def list_all(self) -> List[UserRecord]:
        try:
            rows = self.db.execute(select(UserModel).order_by(UserModel.id)).scalars().all()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreError("Could not list users") from e
        return [to_record(row) for row in rows]

    def create(self, new_user: NewUser) -> UserRecord:
        """Insert a new account.

        Raises:
            Conflict: If the email is already registered
            StoreError: If the database fails
        """
        row = UserModel(
            name=new_user.name,
            phone=new_user.phone,
            email=new_user.email,
            role=new_user.role.value,
            password_hash=new_user.password_hash,
            must_change_password=new_user.must_change_password,
            active=new_user.active,
            profile_image=new_user.profile_image,
        )
        self.db.add(row)
        try:
            self.db.commit()
            self.db.refresh(row)
        except IntegrityError as e:
            self.db.rollback()
            logger.warning(f"Signup rejected, email already registered: {new_user.email}")
            raise Conflict("Email already registered") from e
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Failed to create user", exc_info=True)
            raise StoreError("Could not create the user") from e

        logger.info(f"User created: {row.email}", extra={"user_id": row.id})
        return to_record(row)

    def update_fields(self, user_id: int, update: UserUpdate) -> UserRecord:
        """Apply a typed user update.

        Raises:
            NotFound: If the user does not exist
            StoreError: If the database fails
        """
        row = self._get_row(user_id)

        if isinstance(update, UpdateProfile):
            if update.phone is not None:
                row.phone = update.phone
            if update.profile_image is not None:
                row.profile_image = update.profile_image
            return self._commit(row, "update the profile")

        if isinstance(update, ChangePassword):
            row.password_hash = update.password_hash
            row.must_change_password = False
            return self._commit(row, "change the password")

        if isinstance(update, RequirePasswordChange):
            row.must_change_password = True
            return self._commit(row, "flag the password for change")

        raise TypeError(f"Unsupported user update: {type(update).__name__}")

    def set_active(self, user_id: int, active: bool) -> UserRecord:
        row = self._get_row(user_id)
        row.active = active
        return self._commit(row, "update the account status")

    def require_role(self, user_id: int) -> UserRole:
        user = self.find_by_id(user_id)
        if user is None:
            raise NotFound(f"User {user_id} not found")
        return user.role
