from datetime import timedelta

import pytest

from evoting.config import Settings
from evoting.errors import InvalidTokenError
from evoting.security import TokenService, hash_password, verify_password


def test_password_hash_is_one_way():
    hashed = hash_password("s3cret!")
    assert hashed != "s3cret!"
    assert hashed.startswith("$2b$")
    assert verify_password("s3cret!", hashed)
    assert not verify_password("wrong", hashed)


def test_verify_password_rejects_non_hash():
    assert not verify_password("plain", "plain")
    assert not verify_password("plain", "")


def test_token_roundtrip(tokens):
    token = tokens.issue("64b7f0c2a1b2c3d4e5f60718")
    assert tokens.verify(token) == "64b7f0c2a1b2c3d4e5f60718"


def test_expired_token_is_rejected(tokens):
    token = tokens.issue("64b7f0c2a1b2c3d4e5f60718", expires_delta=timedelta(seconds=-5))
    with pytest.raises(InvalidTokenError):
        tokens.verify(token)


def test_token_signed_with_other_secret_is_rejected(tokens):
    other = TokenService(Settings(secret_key="rotated-secret"))
    with pytest.raises(InvalidTokenError):
        tokens.verify(other.issue("64b7f0c2a1b2c3d4e5f60718"))


@pytest.mark.parametrize("token", ["", "not-a-jwt", "a.b.c"])
def test_malformed_token_is_rejected(tokens, token):
    with pytest.raises(InvalidTokenError):
        tokens.verify(token)
