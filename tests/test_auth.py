"""Tests for authentication endpoints and flows."""

from datetime import timedelta
from unittest.mock import patch

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from app.models.user import User
from app.services.auth import AuthService
from app.services.jwt import get_jwt_service


class TestRegistration:
    """Tests for user registration."""

    def test_register_success(self, client: TestClient):
        """Register a traveller; the account is verified straight away."""
        response = client.post(
            "/api/v1/auth/register",
            json={"name": "New User", "email": "new@example.com", "password": "password123"},
        )
        assert response.status_code == 201
        data = response.json()
        assert data["user"]["email"] == "new@example.com"
        assert data["user"]["role"] == "user"
        assert data["user"]["verified"] is True
        assert "password" not in data["user"]
        assert "password_hash" not in data["user"]
        assert data["token"]

    def test_register_duplicate_email(self, client: TestClient, test_user: dict):
        """Registering the same email twice fails the second time."""
        response = client.post(
            "/api/v1/auth/register",
            json={"name": "Another User", "email": "test@example.com", "password": "password123"},
        )
        assert response.status_code == 400
        assert response.json()["kind"] == "DuplicateEmail"

    def test_register_car_owner_is_unverified(self, client: TestClient):
        """Roles other than user wait for an admin to verify them."""
        response = client.post(
            "/api/v1/auth/register",
            json={"name": "Owner", "email": "cars@example.com", "password": "password123", "role": "car_owner"},
        )
        assert response.status_code == 201
        assert response.json()["user"]["verified"] is False

    def test_register_unknown_role_rejected(self, client: TestClient):
        response = client.post(
            "/api/v1/auth/register",
            json={"name": "X", "email": "x@example.com", "password": "password123", "role": "superuser"},
        )
        assert response.status_code == 422

    def test_register_password_over_bcrypt_byte_limit(self, client: TestClient, db_session: Session):
        """72 characters but 144 bytes: rejected cleanly instead of crashing the hasher."""
        response = client.post(
            "/api/v1/auth/register",
            json={"name": "Accent", "email": "accent@example.com", "password": "é" * 72},
        )
        assert response.status_code == 400
        assert response.json()["kind"] == "ValidationError"
        assert db_session.query(User).count() == 0

    def test_register_password_at_byte_limit(self, client: TestClient):
        response = client.post(
            "/api/v1/auth/register",
            json={"name": "Accent", "email": "accent@example.com", "password": "é" * 36},
        )
        assert response.status_code == 201

    def test_password_is_hashed(self, client: TestClient, db_session: Session):
        """The stored password is a bcrypt hash, not the submitted value."""
        client.post(
            "/api/v1/auth/register",
            json={"name": "Hashed", "email": "hash@example.com", "password": "password123"},
        )
        user = db_session.query(User).filter(User.email == "hash@example.com").first()
        assert user.password_hash != "password123"
        assert user.password_hash.startswith("$2")
        assert user.auth_type == "local"


class TestLogin:
    """Tests for user login."""

    def test_login_success(self, client: TestClient, test_user: dict):
        """Login with valid credentials."""
        response = client.post(
            "/api/v1/auth/login",
            json={"email": "test@example.com", "password": "password123"},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["user"]["email"] == "test@example.com"
        assert data["message"] == "Login successful"
        claims = get_jwt_service().decode_token(data["token"])
        assert claims.user_id == test_user["user_id"]
        assert claims.role == "user"

    def test_login_wrong_password(self, client: TestClient, test_user: dict):
        """Reject login with wrong password."""
        response = client.post(
            "/api/v1/auth/login",
            json={"email": "test@example.com", "password": "wrongpassword"},
        )
        assert response.status_code == 401
        assert response.json()["kind"] == "InvalidCredentials"

    def test_login_nonexistent_email(self, client: TestClient):
        """Reject login with unknown email."""
        response = client.post(
            "/api/v1/auth/login",
            json={"email": "nobody@example.com", "password": "password123"},
        )
        assert response.status_code == 401
        assert response.json()["kind"] == "InvalidCredentials"

    def test_login_email_is_case_sensitive(self, client: TestClient, test_user: dict):
        """Emails are matched exactly as stored."""
        response = client.post(
            "/api/v1/auth/login",
            json={"email": "TEST@EXAMPLE.COM", "password": "password123"},
        )
        assert response.status_code == 401

    def test_login_unverified_account(self, client: TestClient, db_session: Session):
        """Correct credentials on an unverified account still fail."""
        AuthService().register(db_session, "Owner", "owner2@example.com", "password123", "car_owner")
        response = client.post(
            "/api/v1/auth/login",
            json={"email": "owner2@example.com", "password": "password123"},
        )
        assert response.status_code == 403
        assert response.json()["kind"] == "NotVerified"

    def test_login_unverified_with_wrong_password(self, client: TestClient, db_session: Session):
        """Bad credentials are reported before verification status."""
        AuthService().register(db_session, "Owner", "owner3@example.com", "password123", "car_owner")
        response = client.post(
            "/api/v1/auth/login",
            json={"email": "owner3@example.com", "password": "nope"},
        )
        assert response.status_code == 401
        assert response.json()["kind"] == "InvalidCredentials"

    def test_google_only_account_cannot_use_password(self, client: TestClient, db_session: Session):
        db_session.add(User(name="G", email="g@example.com", google_id="g-1", auth_type="google", verified=True))
        db_session.commit()
        response = client.post("/api/v1/auth/login", json={"email": "g@example.com", "password": ""})
        assert response.status_code == 401

    def test_legacy_plaintext_password_is_migrated(self, client: TestClient, db_session: Session):
        """A plaintext value left from the old store still logs in once and is re-hashed."""
        db_session.add(User(name="Legacy", email="legacy@example.com", password_hash="oldpass", verified=True))
        db_session.commit()

        response = client.post("/api/v1/auth/login", json={"email": "legacy@example.com", "password": "oldpass"})
        assert response.status_code == 200

        user = db_session.query(User).filter(User.email == "legacy@example.com").first()
        assert user.password_hash.startswith("$2")

        response = client.post("/api/v1/auth/login", json={"email": "legacy@example.com", "password": "oldpass"})
        assert response.status_code == 200

    def test_legacy_plaintext_wrong_password(self, client: TestClient, db_session: Session):
        db_session.add(User(name="Legacy", email="legacy2@example.com", password_hash="oldpass", verified=True))
        db_session.commit()
        response = client.post("/api/v1/auth/login", json={"email": "legacy2@example.com", "password": "oldpas"})
        assert response.status_code == 401

        user = db_session.query(User).filter(User.email == "legacy2@example.com").first()
        assert user.password_hash == "oldpass"


class TestCurrentUser:
    """Tests for the bearer-token guard through /me."""

    def test_me_returns_profile(self, client: TestClient, test_user: dict):
        response = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {test_user['token']}"})
        assert response.status_code == 200
        user = response.json()["user"]
        assert user["id"] == test_user["user_id"]
        assert user["name"] == "Test User"
        assert "password_hash" not in user

    def test_me_without_token(self, client: TestClient):
        response = client.get("/api/v1/auth/me")
        assert response.status_code == 401
        assert response.json()["kind"] == "MissingToken"
        assert response.headers["www-authenticate"] == "Bearer"

    def test_me_with_non_bearer_scheme(self, client: TestClient, test_user: dict):
        response = client.get("/api/v1/auth/me", headers={"Authorization": f"Basic {test_user['token']}"})
        assert response.status_code == 401
        assert response.json()["kind"] == "MissingToken"

    def test_me_cookie_is_ignored(self, client: TestClient, test_user: dict):
        """Tokens travel in the Authorization header only."""
        client.cookies.set("token", test_user["token"])
        response = client.get("/api/v1/auth/me")
        assert response.status_code == 401

    def test_me_with_invalid_token(self, client: TestClient):
        response = client.get("/api/v1/auth/me", headers={"Authorization": "Bearer invalid.token.here"})
        assert response.status_code == 401
        assert response.json()["kind"] == "InvalidToken"

    def test_me_with_expired_token(self, client: TestClient, test_user: dict):
        token = get_jwt_service().create_token(
            user_id=test_user["user_id"], role="user", expires_delta=timedelta(seconds=-1)
        )
        response = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401
        assert response.json()["kind"] == "ExpiredToken"

    def test_me_after_user_deleted(self, client: TestClient, test_user: dict, db_session: Session):
        """A still-valid token for a removed account is refused."""
        user = db_session.query(User).filter(User.id == test_user["user_id"]).first()
        db_session.delete(user)
        db_session.commit()

        response = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {test_user['token']}"})
        assert response.status_code == 401
        assert response.json()["kind"] == "UserNotFound"

    def test_role_is_read_from_the_database(self, client: TestClient, test_user: dict, db_session: Session):
        """A role change takes effect without issuing a new token."""
        user = db_session.query(User).filter(User.id == test_user["user_id"]).first()
        user.role = "admin"
        db_session.commit()

        response = client.put(
            f"/api/v1/auth/verify/{test_user['user_id']}",
            headers={"Authorization": f"Bearer {test_user['token']}"},
        )
        assert response.status_code == 200


class TestVerifyUser:
    """Tests for admin verification of accounts."""

    def test_admin_verifies_car_owner(self, client: TestClient, admin_user: dict, db_session: Session):
        owner = AuthService().register(db_session, "Owner", "pending@example.com", "password123", "car_owner")

        response = client.put(
            f"/api/v1/auth/verify/{owner.id}",
            headers={"Authorization": f"Bearer {admin_user['token']}"},
        )
        assert response.status_code == 200
        assert response.json()["user"]["verified"] is True

        login = client.post("/api/v1/auth/login", json={"email": "pending@example.com", "password": "password123"})
        assert login.status_code == 200

    def test_user_cannot_verify(self, client: TestClient, test_user: dict, other_user: dict):
        response = client.put(
            f"/api/v1/auth/verify/{other_user['user_id']}",
            headers={"Authorization": f"Bearer {test_user['token']}"},
        )
        assert response.status_code == 403
        assert response.json()["kind"] == "Forbidden"

    def test_verify_requires_token(self, client: TestClient, test_user: dict):
        response = client.put(f"/api/v1/auth/verify/{test_user['user_id']}")
        assert response.status_code == 401
        assert response.json()["kind"] == "MissingToken"

    def test_verify_unknown_user(self, client: TestClient, admin_user: dict):
        response = client.put("/api/v1/auth/verify/9999", headers={"Authorization": f"Bearer {admin_user['token']}"})
        assert response.status_code == 404
        assert response.json()["kind"] == "UserNotFound"


class TestForgotPassword:
    """Tests for forgot password flow."""

    def test_forgot_password_existing_email(self, client: TestClient, test_user: dict):
        response = client.post("/api/v1/auth/forgot-password", json={"email": "test@example.com"})
        assert response.status_code == 200
        assert "reset link has been generated" in response.json()["message"]

    def test_forgot_password_nonexistent_email(self, client: TestClient):
        """Request reset for non-existent email returns same message (no enumeration)."""
        response = client.post("/api/v1/auth/forgot-password", json={"email": "nobody@example.com"})
        assert response.status_code == 200
        assert "reset link has been generated" in response.json()["message"]

    def test_forgot_password_logs_reset_link(self, client: TestClient, test_user: dict):
        with patch("app.routers.auth.logger") as mock_logger:
            client.post("/api/v1/auth/forgot-password", json={"email": "test@example.com"})
            calls = [str(c) for c in mock_logger.info.call_args_list]
            assert any("PASSWORD RESET" in c for c in calls)

    def test_reset_token_expires_after_an_hour(self, test_user: dict, db_session: Session):
        token = AuthService().request_password_reset(db_session, "test@example.com")
        claims = get_jwt_service().decode_token(token, expected_type="password_reset")
        assert claims.claims["exp"] - claims.claims["iat"] == 3600


class TestResetPassword:
    """Tests for password reset flow."""

    def test_reset_with_valid_token(self, client: TestClient, test_user: dict, db_session: Session):
        """Reset with valid token changes password and returns JWT for auto-login."""
        token = AuthService().request_password_reset(db_session, "test@example.com")
        assert token is not None

        response = client.post(
            "/api/v1/auth/reset-password",
            json={"token": token, "new_password": "newpassword456"},
        )
        assert response.status_code == 200
        assert response.json()["user"]["email"] == "test@example.com"

        login_response = client.post(
            "/api/v1/auth/login",
            json={"email": "test@example.com", "password": "newpassword456"},
        )
        assert login_response.status_code == 200

    def test_reset_token_is_single_use(self, client: TestClient, test_user: dict, db_session: Session):
        token = AuthService().request_password_reset(db_session, "test@example.com")

        response = client.post("/api/v1/auth/reset-password", json={"token": token, "new_password": "newpassword456"})
        assert response.status_code == 200

        response = client.post("/api/v1/auth/reset-password", json={"token": token, "new_password": "another"})
        assert response.status_code == 401
        assert response.json()["kind"] == "InvalidToken"

    def test_reset_password_over_bcrypt_byte_limit(self, client: TestClient, test_user: dict, db_session: Session):
        token = AuthService().request_password_reset(db_session, "test@example.com")
        response = client.post("/api/v1/auth/reset-password", json={"token": token, "new_password": "ü" * 40})
        assert response.status_code == 400
        assert response.json()["kind"] == "ValidationError"

        login_response = client.post(
            "/api/v1/auth/login",
            json={"email": "test@example.com", "password": "password123"},
        )
        assert login_response.status_code == 200

    def test_reset_unverified_account(self, client: TestClient, db_session: Session):
        """An unverified account cannot reset, and its password is left unchanged."""
        owner = AuthService().register(db_session, "Owner", "pending@example.com", "password123", "car_owner")
        old_hash = owner.password_hash
        token = AuthService().request_password_reset(db_session, "pending@example.com")

        response = client.post("/api/v1/auth/reset-password", json={"token": token, "new_password": "newpassword456"})
        assert response.status_code == 403
        assert response.json()["kind"] == "NotVerified"

        db_session.refresh(owner)
        assert owner.password_hash == old_hash

    def test_reset_with_expired_token(self, client: TestClient, test_user: dict):
        token = get_jwt_service().create_token(
            user_id=test_user["user_id"],
            role="user",
            expires_delta=timedelta(seconds=-1),
            token_type="password_reset",
        )
        response = client.post("/api/v1/auth/reset-password", json={"token": token, "new_password": "newpassword456"})
        assert response.status_code == 401
        assert response.json()["kind"] == "ExpiredToken"

    def test_access_token_cannot_reset_password(self, client: TestClient, test_user: dict):
        response = client.post(
            "/api/v1/auth/reset-password",
            json={"token": test_user["token"], "new_password": "newpassword456"},
        )
        assert response.status_code == 401
        assert response.json()["kind"] == "InvalidToken"

    def test_reset_token_cannot_authenticate(self, client: TestClient, test_user: dict, db_session: Session):
        token = AuthService().request_password_reset(db_session, "test@example.com")
        response = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401
        assert response.json()["kind"] == "InvalidToken"


class TestLogout:
    def test_logout(self, client: TestClient):
        response = client.post("/api/v1/auth/logout")
        assert response.status_code == 200
        assert response.json()["clear_token"] is True


class TestHealthCheck:
    """Tests for health check endpoint."""

    def test_health_check(self, client: TestClient):
        """Health check returns ok status."""
        response = client.get("/api/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["app"] == "tourism-api"
