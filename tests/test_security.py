"""Password hashing and token signing."""

from datetime import datetime, timedelta, timezone

import jwt
import pytest
from pydantic import SecretStr

from taskboard.config import Settings
from taskboard.security import (
    TokenError,
    TokenExpiredError,
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)


@pytest.fixture
def token_settings() -> Settings:
    return Settings(jwt_secret=SecretStr("unit-secret"), jwt_expires_in_s=60)


class TestPasswordHashing:
    def test_verify(self):
        stored = hash_password("Secret1")
        assert stored.startswith("pbkdf2_sha256$")
        assert verify_password("Secret1", stored)
        assert not verify_password("secret1", stored)

    def test_salted(self):
        assert hash_password("Secret1") != hash_password("Secret1")

    def test_malformed_hash(self):
        assert not verify_password("Secret1", "plaintext")
        assert not verify_password("Secret1", "md5$1$salt$digest")


class TestTokens:
    def test_round_trip(self, token_settings):
        token = create_access_token({"id": "U1", "role": "admin"}, token_settings)
        payload = decode_access_token(token, token_settings)
        assert payload["sub"] == "U1"
        assert payload["role"] == "admin"
        assert payload["exp"] - payload["iat"] == 60

    def test_expired(self, token_settings):
        token = jwt.encode(
            {"sub": "U1", "exp": datetime.now(timezone.utc) - timedelta(seconds=5)},
            "unit-secret",
            algorithm="HS256",
        )
        with pytest.raises(TokenExpiredError):
            decode_access_token(token, token_settings)

    def test_tampered(self, token_settings):
        token = create_access_token({"id": "U1", "role": "user"}, token_settings)
        other = Settings(jwt_secret=SecretStr("another-secret"))
        with pytest.raises(TokenError):
            decode_access_token(token, other)

    def test_missing_subject(self, token_settings):
        token = jwt.encode(
            {"exp": datetime.now(timezone.utc) + timedelta(minutes=5)},
            "unit-secret",
            algorithm="HS256",
        )
        with pytest.raises(TokenError):
            decode_access_token(token, token_settings)
