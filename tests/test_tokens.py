from datetime import timedelta

import pytest
from jose import jwt

from app.config import settings
from app.services.auth import (
    InvalidTokenError,
    TokenExpiredError,
    create_access_token,
    create_refresh_token,
    decode_access_token,
    decode_refresh_token,
    get_password_hash,
    verify_password,
)


def test_access_token_verifies_right_after_issue():
    payload = decode_access_token(create_access_token(42))
    assert payload["userId"] == 42
    assert payload["exp"] > payload["iat"]


def test_access_token_default_lifetime_is_one_hour():
    payload = decode_access_token(create_access_token(1))
    assert payload["exp"] - payload["iat"] == 60 * 60


def test_refresh_token_default_lifetime_is_seven_days():
    payload = decode_refresh_token(create_refresh_token(1))
    assert payload["exp"] - payload["iat"] == 7 * 24 * 60 * 60


def test_expired_token_fails_with_expired():
    token = create_access_token(1, expires_delta=timedelta(seconds=-1))
    with pytest.raises(TokenExpiredError):
        decode_access_token(token)


def test_tokens_issued_in_same_second_differ():
    assert create_refresh_token(1) != create_refresh_token(1)


def test_access_and_refresh_keys_not_interchangeable():
    with pytest.raises(InvalidTokenError):
        decode_refresh_token(create_access_token(1))
    with pytest.raises(InvalidTokenError):
        decode_access_token(create_refresh_token(1))


def test_token_signed_with_unknown_key_is_rejected():
    token = jwt.encode({"userId": 1}, "some-other-secret", algorithm=settings.ALGORITHM)
    with pytest.raises(InvalidTokenError):
        decode_access_token(token)


@pytest.mark.parametrize("user_id", ["1", None, True])
def test_token_without_integer_user_id_is_rejected(user_id):
    token = jwt.encode({"userId": user_id}, settings.ACCESS_SECRET, algorithm=settings.ALGORITHM)
    with pytest.raises(InvalidTokenError):
        decode_access_token(token)


def test_garbage_token_is_rejected():
    with pytest.raises(InvalidTokenError):
        decode_access_token("not.a.jwt")


def test_password_hash_roundtrip():
    password_hash = get_password_hash("password123")
    assert password_hash != "password123"
    assert verify_password("password123", password_hash)
    assert not verify_password("password124", password_hash)


def test_verify_password_with_broken_hash_returns_false():
    assert not verify_password("password123", "not-a-real-hash")
