from datetime import timedelta

from jose import jwt

from market.domain.enums import Role
from market.domain.principal import Principal
from market.utils.security import (
    create_access_token,
    decode_access_token,
    extract_bearer_token,
    hash_password,
    verify_password,
)


def test_password_hash_round_trip():
    hashed = hash_password("s3cret-pass")

    assert hashed != "s3cret-pass"
    assert verify_password("s3cret-pass", hashed)
    assert not verify_password("wrong", hashed)


def test_malformed_hash_does_not_verify():
    assert verify_password("anything", "not-a-hash") is False


def test_token_carries_principal():
    principal = Principal(user_id=12, email="a@example.com", role=Role.SELLER)

    decoded = decode_access_token(create_access_token(principal))

    assert decoded == principal
    assert decoded.has_role(Role.SELLER, Role.ADMIN)
    assert not decoded.has_role(Role.ADMIN)


def test_expired_token_is_rejected():
    principal = Principal(user_id=1, email="a@example.com", role=Role.USER)

    token = create_access_token(principal, expires_delta=timedelta(seconds=-5))

    assert decode_access_token(token) is None


def test_foreign_tokens_are_rejected():
    other_secret = jwt.encode({"sub": "1", "email": "x@y.z", "role": "user", "iss": "ebook-market"},
                              "not-our-secret", algorithm="HS256")
    assert decode_access_token(other_secret) is None
    assert decode_access_token("garbage") is None


def test_extract_bearer_token():
    assert extract_bearer_token("Bearer abc.def") == "abc.def"
    assert extract_bearer_token("Basic abc") is None
    assert extract_bearer_token("Bearer ") is None
    assert extract_bearer_token(None) is None
