# =============================================================================
# tests/test_auth_api.py - Account & Auth Endpoint Tests
# =============================================================================
# This module contains tests for:
# - Registration (uniqueness, validation, token)
# - Login by username or email
# - Bearer token dependencies (/me, /status)
# - Profile updates and password changes
# =============================================================================

from lib.orm import User
from lib.security import create_access_token, decode_access_token, verify_password


REGISTRATION = {
    "username": "+15145550199",
    "email": "marie@example.com",
    "password": "secret1",
    "firstName": "Marie",
    "lastName": "Ndayishimiye",
}


# =============================================================================
# Registration Tests
# =============================================================================

class TestRegister:
    """Test POST /api/auth/register."""

    def test_register_returns_user_and_token(self, client, db):
        response = client.post("/api/auth/register", json=REGISTRATION)

        assert response.status_code == 201
        body = response.json()
        assert body["user"]["username"] == "+15145550199"
        assert body["user"]["firstName"] == "Marie"
        assert "password" not in body["user"]
        assert decode_access_token(body["token"], "user") == body["user"]["id"]

        stored = db.get(User, body["user"]["id"])
        assert stored.password != "secret1"
        assert verify_password("secret1", stored.password)

    def test_duplicate_username_rejected(self, client, user):
        response = client.post(
            "/api/auth/register",
            json={**REGISTRATION, "username": user.username},
        )

        assert response.status_code == 409
        assert response.json()["code"] == "USER_ALREADY_EXISTS"
        assert response.json()["details"]["field"] == "username"

    def test_duplicate_email_rejected(self, client, user):
        response = client.post(
            "/api/auth/register",
            json={**REGISTRATION, "email": user.email},
        )

        assert response.status_code == 409
        assert response.json()["details"]["field"] == "email"

    def test_duplicate_email_is_case_insensitive(self, client, user):
        response = client.post(
            "/api/auth/register",
            json={**REGISTRATION, "email": user.email.upper()},
        )
        assert response.status_code == 409

    def test_duplicate_does_not_create_a_row(self, client, db, user):
        client.post("/api/auth/register", json={**REGISTRATION, "email": user.email})
        assert db.query(User).count() == 1

    def test_short_password_rejected(self, client):
        response = client.post("/api/auth/register", json={**REGISTRATION, "password": "12345"})
        assert response.status_code == 422

    def test_invalid_email_rejected(self, client):
        response = client.post("/api/auth/register", json={**REGISTRATION, "email": "not-an-email"})
        assert response.status_code == 422

    def test_password_longer_than_bcrypt_limit_rejected(self, client, db):
        response = client.post("/api/auth/register", json={**REGISTRATION, "password": "x" * 100})

        assert response.status_code == 422
        assert db.query(User).count() == 0

    def test_multibyte_password_measured_in_bytes(self, client):
        # 37 characters, 74 bytes in UTF-8
        response = client.post("/api/auth/register", json={**REGISTRATION, "password": "é" * 37})
        assert response.status_code == 422

    def test_password_at_bcrypt_limit_accepted(self, client):
        response = client.post("/api/auth/register", json={**REGISTRATION, "password": "x" * 72})
        assert response.status_code == 201


# =============================================================================
# Login Tests
# =============================================================================

class TestLogin:
    """Test POST /api/auth/login."""

    def test_login_with_username(self, client, user):
        response = client.post("/api/auth/login", json={"username": "jean", "password": "secret1"})

        assert response.status_code == 200
        assert response.json()["user"]["id"] == user.id
        assert decode_access_token(response.json()["token"], "user") == user.id

    def test_login_with_email(self, client, user):
        response = client.post(
            "/api/auth/login",
            json={"username": "jean@example.com", "password": "secret1"},
        )
        assert response.status_code == 200
        assert response.json()["user"]["id"] == user.id

    def test_wrong_password(self, client, user):
        response = client.post("/api/auth/login", json={"username": "jean", "password": "nope123"})

        assert response.status_code == 401
        assert response.json()["code"] == "INVALID_CREDENTIALS"

    def test_unknown_user_gets_same_error(self, client):
        response = client.post("/api/auth/login", json={"username": "ghost", "password": "secret1"})

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid credentials"


# =============================================================================
# Token Dependency Tests
# =============================================================================

class TestCurrentUser:
    """Test /api/auth/me and /api/auth/status."""

    def test_me(self, client, user, auth_headers):
        response = client.get("/api/auth/me", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["email"] == "jean@example.com"

    def test_me_without_token(self, client):
        response = client.get("/api/auth/me")
        assert response.status_code in (401, 403)

    def test_me_with_invalid_token(self, client):
        response = client.get("/api/auth/me", headers={"Authorization": "Bearer garbage"})
        assert response.status_code == 401

    def test_admin_token_is_not_a_user_token(self, client, admin_headers):
        response = client.get("/api/auth/me", headers=admin_headers)
        assert response.status_code == 401

    def test_token_for_deleted_user(self, client):
        token = create_access_token(9999, "user")
        response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    def test_status_authenticated(self, client, user, auth_headers):
        response = client.get("/api/auth/status", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["authenticated"] is True
        assert response.json()["user"]["id"] == user.id

    def test_status_anonymous(self, client):
        response = client.get("/api/auth/status")

        assert response.status_code == 200
        assert response.json() == {"authenticated": False, "user": None}

    def test_status_with_bad_token_never_errors(self, client):
        response = client.get("/api/auth/status", headers={"Authorization": "Bearer garbage"})

        assert response.status_code == 200
        assert response.json()["authenticated"] is False


# =============================================================================
# Profile Tests
# =============================================================================

class TestProfile:
    """Test PUT /api/profile."""

    def test_partial_update(self, client, db, user, auth_headers):
        response = client.put("/api/profile", json={"firstName": "Jean-Paul"}, headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["firstName"] == "Jean-Paul"
        assert response.json()["lastName"] == "Niyonzima"

        db.expire_all()
        assert db.get(User, user.id).first_name == "Jean-Paul"

    def test_email_taken_by_someone_else(self, client, user, other_user, auth_headers):
        response = client.put("/api/profile", json={"email": other_user.email}, headers=auth_headers)
        assert response.status_code == 409

    def test_keeping_own_email(self, client, user, auth_headers):
        response = client.put("/api/profile", json={"email": user.email}, headers=auth_headers)
        assert response.status_code == 200

    def test_requires_auth(self, client):
        response = client.put("/api/profile", json={"firstName": "X"})
        assert response.status_code in (401, 403)


class TestChangePassword:
    """Test POST /api/change-password."""

    def _change(self, client, headers, current="secret1", new="newpass1", confirm="newpass1"):
        return client.post(
            "/api/change-password",
            json={"currentPassword": current, "newPassword": new, "confirmPassword": confirm},
            headers=headers,
        )

    def test_success(self, client, db, user, auth_headers):
        response = self._change(client, auth_headers)

        assert response.status_code == 200
        db.expire_all()
        assert verify_password("newpass1", db.get(User, user.id).password)

        login = client.post("/api/auth/login", json={"username": "jean", "password": "newpass1"})
        assert login.status_code == 200

    def test_wrong_current_password(self, client, user, auth_headers):
        response = self._change(client, auth_headers, current="wrong-one")

        assert response.status_code == 400
        assert response.json()["detail"] == "Current password is incorrect"

    def test_confirmation_mismatch(self, client, user, auth_headers):
        response = self._change(client, auth_headers, confirm="different1")

        assert response.status_code == 400
        assert response.json()["detail"] == "New passwords do not match"

    def test_new_password_too_short(self, client, user, auth_headers):
        response = self._change(client, auth_headers, new="abc", confirm="abc")
        assert response.status_code == 400

    def test_new_password_longer_than_bcrypt_limit(self, client, db, user, auth_headers):
        long_password = "x" * 100
        response = self._change(client, auth_headers, new=long_password, confirm=long_password)

        assert response.status_code == 400
        assert response.json()["detail"] == "New password must be at most 72 bytes"
        db.expire_all()
        assert verify_password("secret1", db.get(User, user.id).password)

    def test_missing_fields(self, client, user, auth_headers):
        response = client.post("/api/change-password", json={}, headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["detail"] == "All fields are required"
