# =============================================================================
# tests/test_security.py - Password Hashing & Token Tests
# =============================================================================

from datetime import timedelta

import pytest
from jose import jwt

from app.config import settings
from lib.security import (
    TokenError,
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)


class TestPasswords:
    """Test bcrypt hashing."""

    def test_hash_is_not_plaintext(self):
        hashed = hash_password("secret1")
        assert hashed != "secret1"
        assert hashed.startswith("$2")

    def test_verify_roundtrip(self):
        hashed = hash_password("secret1")
        assert verify_password("secret1", hashed)
        assert not verify_password("secret2", hashed)

    def test_malformed_hash_is_a_mismatch(self):
        assert verify_password("secret1", "not-a-bcrypt-hash") is False


class TestTokens:
    """Test JWT signing and verification."""

    def test_user_token_roundtrip(self):
        token = create_access_token(42, "user")
        assert decode_access_token(token, "user") == 42

    def test_claims(self):
        token = create_access_token(7, "admin", extra_claims={"username": "boss"})
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])

        assert payload["sub"] == "7"
        assert payload["type"] == "admin"
        assert payload["username"] == "boss"
        assert payload["exp"] - payload["iat"] == settings.ADMIN_TOKEN_EXPIRE_HOURS * 3600

    def test_user_token_lifetime(self):
        token = create_access_token(1, "user")
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
        assert payload["exp"] - payload["iat"] == settings.USER_TOKEN_EXPIRE_DAYS * 86400

    def test_admin_token_rejected_as_user_token(self):
        token = create_access_token(1, "admin")
        with pytest.raises(TokenError, match="wrong token type"):
            decode_access_token(token, "user")

    def test_expired_token(self):
        token = create_access_token(1, "user", expires_delta=timedelta(seconds=-10))
        with pytest.raises(TokenError) as exc_info:
            decode_access_token(token, "user")
        assert exc_info.value.expired is True

    def test_token_signed_with_other_key(self):
        token = jwt.encode({"sub": "1", "type": "user"}, "another-secret-key-123", algorithm="HS256")
        with pytest.raises(TokenError):
            decode_access_token(token, "user")

    def test_garbage_token(self):
        with pytest.raises(TokenError):
            decode_access_token("not.a.jwt", "user")
