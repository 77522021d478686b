"""Unit tests for password hashing and access tokens."""

import uuid

import pytest

from libs.auth.dependencies import create_access_token, decode_access_token
from libs.auth.models import UserRole
from libs.auth.passwords import hash_password, verify_password
from libs.common.errors import UnauthorizedError


class TestPasswords:
    def test_hash_round_trip(self):
        hashed = hash_password("s3cret!")
        assert hashed != "s3cret!"
        assert verify_password("s3cret!", hashed)
        assert not verify_password("wrong", hashed)

    def test_empty_hash_never_verifies(self):
        assert verify_password("anything", "") is False


class TestAccessTokens:
    def test_token_carries_identity(self):
        user_id = uuid.uuid4()
        token = create_access_token(user_id, "coach@test.com", UserRole.COACH)
        user = decode_access_token(token)
        assert user.user_id == user_id
        assert user.email == "coach@test.com"
        assert user.role == UserRole.COACH
        assert not user.is_admin

    def test_expired_token_rejected(self):
        token = create_access_token(
            uuid.uuid4(), "a@test.com", UserRole.ADMIN, expires_minutes=-5
        )
        with pytest.raises(UnauthorizedError):
            decode_access_token(token)

    def test_garbage_token_rejected(self):
        with pytest.raises(UnauthorizedError):
            decode_access_token("not-a-token")
