"""Unit tests for password hashing and JWT handling."""
from datetime import timedelta

import pytest

from medicare_api.core.config import settings
from medicare_api.core.exceptions import UnauthenticatedError, ValidationError
from medicare_api.core.security import (
    create_access_token,
    hash_password,
    validate_password,
    verify_password,
    verify_token,
)


def test_password_round_trip():
    hashed = hash_password("S3cure!pass")
    assert hashed != "S3cure!pass"
    assert verify_password("S3cure!pass", hashed)
    assert not verify_password("wrong", hashed)


def test_verify_password_against_garbage_hash():
    assert not verify_password("anything", "not-a-bcrypt-hash")


def test_token_carries_subject_and_role():
    token = create_access_token({"sub": "abc", "role": "admin"})
    payload = verify_token(token)
    assert payload["sub"] == "abc"
    assert payload["role"] == "admin"


def test_expired_token_is_rejected():
    token = create_access_token({"sub": "abc"}, expires_delta=timedelta(seconds=-10))
    with pytest.raises(UnauthenticatedError):
        verify_token(token)


def test_token_signed_for_other_payload_is_rejected():
    header, _, signature = create_access_token({"sub": "abc"}).split(".")
    _, forged_payload, _ = create_access_token({"sub": "root", "role": "admin"}).split(".")
    with pytest.raises(UnauthenticatedError):
        verify_token(f"{header}.{forged_payload}.{signature}")


def test_password_length_rule(monkeypatch):
    monkeypatch.setattr(settings, "PASSWORD_MIN_LENGTH", 8)
    assert validate_password("Admin@123") == "Admin@123"
    for short in ("", "Ab@1234"):
        with pytest.raises(ValidationError) as excinfo:
            validate_password(short)
        assert "at least 8 characters" in excinfo.value.message
