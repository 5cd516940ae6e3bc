"""Tests for JWT token creation and password hashing."""
import time
from datetime import timedelta

from jose import jwt

from app.api.deps import create_access_token, get_password_hash, verify_password
from app.config import settings


class TestJWTTokens:
    """Test JWT access token behavior."""

    def test_access_token_decode(self):
        """Access token should be decodable with correct secret."""
        token = create_access_token(data={"sub": "42", "email": "user@test.com"})
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        assert payload["sub"] == "42"
        assert payload["email"] == "user@test.com"
        assert "exp" in payload

    def test_access_token_expiry(self):
        """Access token should expire after ACCESS_TOKEN_EXPIRE_MINUTES."""
        token = create_access_token(data={"sub": "1"})
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        expected = settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60
        assert expected - 60 < payload["exp"] - time.time() <= expected

    def test_access_token_custom_expiry(self):
        """Should support custom expiration delta."""
        token = create_access_token(data={"sub": "1"}, expires_delta=timedelta(minutes=30))
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        assert 1700 < payload["exp"] - time.time() <= 1800

    def test_input_not_mutated(self):
        data = {"sub": "1"}
        create_access_token(data=data)
        assert data == {"sub": "1"}


class TestPasswordHashing:
    def test_round_trip(self):
        hashed = get_password_hash("correct horse battery")
        assert hashed != "correct horse battery"
        assert verify_password("correct horse battery", hashed) is True
        assert verify_password("wrong", hashed) is False

    def test_salted(self):
        assert get_password_hash("same") != get_password_hash("same")
