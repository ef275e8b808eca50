"""Integration tests for the SQL user directory"""

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from transcribeflow.auth.password import verify_password
from transcribeflow.database import init_db
from transcribeflow.domain.errors import Conflict, NotFound, StoreError
from transcribeflow.domain.users import (
    ChangePassword,
    NewUser,
    RequirePasswordChange,
    UpdateProfile,
    UserRole,
)
from transcribeflow.infrastructure.repositories import UserRepository
from transcribeflow.models import User


pytestmark = pytest.mark.integration


class TestLookups:

    def test_find_by_id(self, user_directory: UserRepository, regular_user):
        user = user_directory.find_by_id(regular_user.id)

        assert user.email == "ana@acme.com"
        assert user.role is UserRole.REGULAR
        assert user.active is True

    def test_find_by_email_ignores_case(self, user_directory: UserRepository, regular_user):
        assert user_directory.find_by_email(" Ana@Acme.com ").id == regular_user.id
        assert user_directory.find_by_email("nobody@acme.com") is None

    def test_require_role(self, user_directory: UserRepository, regular_user, admin_user):
        assert user_directory.require_role(regular_user.id) is UserRole.REGULAR
        assert user_directory.require_role(admin_user.id) is UserRole.ADMIN

        with pytest.raises(NotFound):
            user_directory.require_role(404)

    def test_list_all(self, user_directory: UserRepository, regular_user, other_user, admin_user):
        assert [user.id for user in user_directory.list_all()] == [regular_user.id, other_user.id, admin_user.id]


class TestMutations:

    def test_create_stores_lowercase_email(self, user_directory: UserRepository):
        user = user_directory.create(
            NewUser(name="Elisa Prado", phone="11955554444", email="Elisa@Acme.com", password_hash="$argon2id$x")
        )

        assert user.email == "elisa@acme.com"
        assert user.role is UserRole.REGULAR
        assert user.must_change_password is False

    def test_profile_update_leaves_other_fields(self, user_directory: UserRepository, regular_user):
        updated = user_directory.update_fields(regular_user.id, UpdateProfile(profile_image="avatars/ana.png"))

        assert updated.profile_image == "avatars/ana.png"
        assert updated.phone == "11987654321"
        assert updated.role is UserRole.REGULAR

    def test_password_change_clears_flag(self, user_directory: UserRepository, regular_user):
        user_directory.update_fields(regular_user.id, RequirePasswordChange())
        assert user_directory.find_by_id(regular_user.id).must_change_password is True

        updated = user_directory.update_fields(regular_user.id, ChangePassword(password_hash="$argon2id$new"))
        assert updated.must_change_password is False
        assert updated.password_hash == "$argon2id$new"

    def test_set_active(self, user_directory: UserRepository, regular_user):
        assert user_directory.set_active(regular_user.id, False).active is False
        assert user_directory.set_active(regular_user.id, True).active is True

    def test_unknown_user(self, user_directory: UserRepository):
        with pytest.raises(NotFound):
            user_directory.set_active(404, False)
        with pytest.raises(NotFound):
            user_directory.update_fields(404, RequirePasswordChange())

    def test_create_duplicate_email_conflicts(self, user_directory: UserRepository, regular_user):
        with pytest.raises(Conflict):
            user_directory.create(
                NewUser(name="Ana Clone", phone="11955554444", email="ANA@acme.com", password_hash="$argon2id$x")
            )

        assert user_directory.find_by_email("ana@acme.com").id == regular_user.id
        assert len(user_directory.list_all()) == 1

    def test_commit_failure_rolls_back(self, user_directory: UserRepository, db_session: Session, regular_user, monkeypatch):
        def failing_commit():
            raise OperationalError("UPDATE users", {}, Exception("database is locked"))

        monkeypatch.setattr(db_session, "commit", failing_commit)

        with pytest.raises(StoreError):
            user_directory.set_active(regular_user.id, False)

        assert user_directory.find_by_id(regular_user.id).active is True


def test_init_db_seeds_admin_once(db_session: Session):
    init_db(bind=db_session.get_bind())
    init_db(bind=db_session.get_bind())

    admins = db_session.query(User).filter(User.role == "admin").all()
    assert [admin.email for admin in admins] == ["admin@admin.com"]
    assert verify_password("admin", admins[0].password_hash) is True
