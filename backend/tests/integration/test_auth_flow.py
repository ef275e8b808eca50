"""Integration tests for authentication flow

Tests cover:
- Signup validation and email uniqueness
- Login with valid/invalid credentials and disabled accounts
- Token resolution through persisted login sessions
- Logout ending the session
- Forced password change
- Bootstrap admin seeding
"""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from transcribeflow.auth.jwt import decode_token
from transcribeflow.database import seed_bootstrap_admin
from transcribeflow.models import LoginSession, User


pytestmark = pytest.mark.integration

SIGNUP = {
    "name": "Davi Costa",
    "phone": "11912345678",
    "email": "davi@acme.com",
    "password": "Davi#2024",
    "confirm_password": "Davi#2024",
}


def _auth(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


class TestSignup:
    """Test POST /api/v1/auth/signup"""

    def test_signup_creates_active_regular_user(self, client: TestClient):
        response = client.post("/api/v1/auth/signup", json=SIGNUP)

        assert response.status_code == 201
        data = response.json()
        assert data["email"] == "davi@acme.com"
        assert data["role"] == "regular"
        assert data["active"] is True
        assert data["must_change_password"] is False
        assert "password" not in data and "password_hash" not in data

    def test_signup_then_login(self, client: TestClient):
        client.post("/api/v1/auth/signup", json=SIGNUP)

        response = client.post("/api/v1/auth/login", json={"email": "davi@acme.com", "password": "Davi#2024"})
        assert response.status_code == 200

    def test_duplicate_email(self, client: TestClient, regular_user: User):
        response = client.post("/api/v1/auth/signup", json={**SIGNUP, "email": regular_user.email})

        assert response.status_code == 409
        assert response.json()["error"] == "conflict"

    @pytest.mark.parametrize("email", ["josé@example.com", "ana@example.c0m"])
    def test_signup_accepts_any_valid_email(self, client: TestClient, email: str):
        response = client.post("/api/v1/auth/signup", json={**SIGNUP, "email": email})

        assert response.status_code == 201
        assert response.json()["email"] == email

    def test_name_and_phone_are_trimmed(self, client: TestClient):
        response = client.post(
            "/api/v1/auth/signup",
            json={**SIGNUP, "name": "  Davi Costa ", "phone": " 11912345678 "},
        )

        assert response.status_code == 201
        assert response.json()["name"] == "Davi Costa"
        assert response.json()["phone"] == "11912345678"

    @pytest.mark.parametrize("field,value", [("name", "   "), ("phone", " " * 12)])
    def test_blank_name_or_phone_rejected(self, client: TestClient, field: str, value: str):
        response = client.post("/api/v1/auth/signup", json={**SIGNUP, field: value})

        assert response.status_code == 422
        assert response.json()["error"] == "validation_error"

    def test_duplicate_email_ignores_case(self, client: TestClient, regular_user: User):
        response = client.post("/api/v1/auth/signup", json={**SIGNUP, "email": "ANA@acme.com"})

        assert response.status_code == 409
        assert response.json() == {"error": "conflict", "message": "Email already registered"}

    def test_password_confirmation_must_match(self, client: TestClient):
        response = client.post("/api/v1/auth/signup", json={**SIGNUP, "confirm_password": "different"})

        assert response.status_code == 422
        assert response.json()["error"] == "validation_error"

    def test_phone_too_short(self, client: TestClient):
        response = client.post("/api/v1/auth/signup", json={**SIGNUP, "phone": "12345"})
        assert response.status_code == 422

    @pytest.mark.parametrize("field", ["name", "phone", "email", "password", "confirm_password"])
    def test_all_fields_required(self, client: TestClient, field: str):
        payload = {key: value for key, value in SIGNUP.items() if key != field}
        assert client.post("/api/v1/auth/signup", json=payload).status_code == 422


class TestLogin:
    """Test POST /api/v1/auth/login"""

    def test_login_with_valid_credentials(self, client: TestClient, db_session: Session, regular_user: User, passwords):
        response = client.post(
            "/api/v1/auth/login",
            json={"email": regular_user.email, "password": passwords["regular_user"]},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["token_type"] == "bearer"
        assert data["must_change_password"] is False

        claims = decode_token(data["access_token"])
        assert claims["sub"] == str(regular_user.id)
        assert db_session.get(LoginSession, claims["sid"]).ended_at is None

    def test_login_case_insensitive_email(self, client: TestClient, regular_user: User, passwords):
        response = client.post(
            "/api/v1/auth/login",
            json={"email": "ANA@acme.com", "password": passwords["regular_user"]},
        )
        assert response.status_code == 200

    def test_login_with_wrong_password(self, client: TestClient, regular_user: User):
        response = client.post(
            "/api/v1/auth/login",
            json={"email": regular_user.email, "password": "wrong"},
        )

        assert response.status_code == 401
        assert response.json() == {"error": "auth_error", "message": "Invalid email or password"}

    def test_login_with_nonexistent_user(self, client: TestClient):
        response = client.post(
            "/api/v1/auth/login",
            json={"email": "nobody@acme.com", "password": "whatever"},
        )

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid email or password"

    def test_login_disabled_account(self, client: TestClient, db_session: Session, regular_user: User, passwords):
        regular_user.active = False
        db_session.commit()

        response = client.post(
            "/api/v1/auth/login",
            json={"email": regular_user.email, "password": passwords["regular_user"]},
        )

        assert response.status_code == 401
        assert response.json()["message"] == "Account is disabled"


class TestSession:

    def test_me_returns_current_user(self, regular_client: TestClient, regular_user: User):
        response = regular_client.get("/api/v1/auth/me")

        assert response.status_code == 200
        assert response.json()["id"] == regular_user.id
        assert response.json()["name"] == "Ana Souza"

    def test_me_without_token(self, client: TestClient):
        response = client.get("/api/v1/auth/me")

        assert response.status_code == 401
        assert response.json()["error"] == "unauthorized"

    def test_me_with_garbage_token(self, client: TestClient):
        assert client.get("/api/v1/auth/me", headers=_auth("not.a.jwt")).status_code == 401

    def test_logout_ends_session(self, client: TestClient, db_session: Session, regular_user: User, login, passwords):
        token = login(regular_user.email, passwords["regular_user"])

        assert client.post("/api/v1/auth/logout", headers=_auth(token)).status_code == 204
        assert client.get("/api/v1/auth/me", headers=_auth(token)).status_code == 401
        assert db_session.get(LoginSession, decode_token(token)["sid"]).ended_at is not None

    def test_deactivated_user_loses_access(self, regular_client: TestClient, db_session: Session, regular_user: User):
        regular_user.active = False
        db_session.commit()

        assert regular_client.get("/api/v1/auth/me").status_code == 401


class TestPasswordChange:

    def test_forced_change_blocks_workflow_until_changed(self, client: TestClient, db_session: Session, regular_user: User, passwords):
        regular_user.must_change_password = True
        db_session.commit()

        login = client.post(
            "/api/v1/auth/login",
            json={"email": regular_user.email, "password": passwords["regular_user"]},
        ).json()
        assert login["must_change_password"] is True
        headers = _auth(login["access_token"])

        blocked = client.get("/api/v1/files", headers=headers)
        assert blocked.status_code == 403
        assert blocked.json()["message"] == "Password change required"

        # Auth and profile endpoints stay reachable
        assert client.get("/api/v1/auth/me", headers=headers).status_code == 200

        changed = client.post(
            "/api/v1/auth/change-password",
            json={"new_password": "Fresh#2024", "confirm_password": "Fresh#2024"},
            headers=headers,
        )
        assert changed.status_code == 200
        assert changed.json()["must_change_password"] is False

        assert client.get("/api/v1/files", headers=headers).status_code == 200

    def test_new_password_replaces_old(self, regular_client: TestClient, client: TestClient, regular_user: User, passwords):
        regular_client.post(
            "/api/v1/auth/change-password",
            json={"new_password": "Fresh#2024", "confirm_password": "Fresh#2024"},
        )

        old = client.post("/api/v1/auth/login", json={"email": regular_user.email, "password": passwords["regular_user"]})
        new = client.post("/api/v1/auth/login", json={"email": regular_user.email, "password": "Fresh#2024"})
        assert old.status_code == 401
        assert new.status_code == 200

    def test_confirmation_must_match(self, regular_client: TestClient):
        response = regular_client.post(
            "/api/v1/auth/change-password",
            json={"new_password": "Fresh#2024", "confirm_password": "Other#2024"},
        )
        assert response.status_code == 422


class TestBootstrapAdmin:

    def test_seed_is_idempotent(self, db_session: Session):
        assert seed_bootstrap_admin(db_session) is not None
        db_session.commit()
        assert seed_bootstrap_admin(db_session) is None

        admins = db_session.query(User).filter(User.email == "admin@admin.com").all()
        assert len(admins) == 1
        assert admins[0].role == "admin"

    def test_bootstrap_admin_can_log_in(self, client: TestClient, db_session: Session):
        seed_bootstrap_admin(db_session)
        db_session.commit()

        response = client.post("/api/v1/auth/login", json={"email": "admin@admin.com", "password": "admin"})
        assert response.status_code == 200
