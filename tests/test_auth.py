"""Tests for token verification."""

import jwt
import pytest

from course_service import config
from course_service.auth import create_access_token, decode_token, verify_token
from course_service.errors import AuthError, InvalidTokenError


def test_round_trip():
    token = create_access_token("user-123")
    assert decode_token(token) == "user-123"


def test_missing_token():
    with pytest.raises(AuthError) as exc_info:
        verify_token(None)
    assert exc_info.value.status_code == 401


def test_expired_token():
    token = create_access_token("user-123", expires_minutes=-1)
    with pytest.raises(InvalidTokenError) as exc_info:
        verify_token(token)
    assert exc_info.value.status_code == 403


def test_wrong_signature():
    token = jwt.encode({"userId": "user-123"}, "another-secret", algorithm=config.JWT_ALGORITHM)
    with pytest.raises(InvalidTokenError):
        decode_token(token)


def test_garbage_token():
    with pytest.raises(InvalidTokenError):
        decode_token("not-a-jwt")


def test_token_without_user_id():
    token = jwt.encode({"sub": "someone"}, config.JWT_SECRET, algorithm=config.JWT_ALGORITHM)
    with pytest.raises(InvalidTokenError):
        decode_token(token)
