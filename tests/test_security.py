from datetime import timedelta

import pytest
from jose import jwt

from saas_backend.core.exceptions import ValidationError
from saas_backend.core.security import (
    PasswordHasher, TokenError, TokenExpiredError, TokenIssuer, TokenKind,
)

SECRET = "unit-test-secret"


@pytest.fixture
def issuer():
    return TokenIssuer(SECRET)


def test_hash_and_verify():
    hasher = PasswordHasher(rounds=4)
    hashed = hasher.hash("correct horse")
    assert hashed != "correct horse"
    assert hasher.verify("correct horse", hashed)
    assert not hasher.verify("wrong horse", hashed)


def test_hash_is_salted():
    hasher = PasswordHasher(rounds=4)
    assert hasher.hash("same") != hasher.hash("same")


def test_malformed_hash_never_matches():
    hasher = PasswordHasher(rounds=4)
    assert hasher.verify("anything", "not-a-bcrypt-hash") is False


def test_hash_rejects_passwords_over_72_bytes():
    hasher = PasswordHasher(rounds=4)
    with pytest.raises(ValidationError):
        hasher.hash("é" * 37)
    assert hasher.verify("é" * 36, hasher.hash("é" * 36))


def test_sign_sets_type_jti_and_expiry(issuer):
    token = issuer.sign({"sub": "p1", "email": "a@example.com"}, TokenKind.access, timedelta(minutes=15))
    payload = issuer.verify(token, TokenKind.access)
    assert payload["sub"] == "p1"
    assert payload["type"] == "access"
    assert payload["jti"]
    assert payload["exp"] - payload["iat"] == 15 * 60


def test_explicit_jti_is_kept(issuer):
    token = issuer.sign({"sub": "p1", "jti": "fixed"}, TokenKind.refresh, timedelta(days=1))
    assert issuer.verify(token, TokenKind.refresh)["jti"] == "fixed"


def test_sign_does_not_mutate_claims(issuer):
    claims = {"sub": "p1"}
    issuer.sign(claims, TokenKind.access, timedelta(minutes=1))
    assert claims == {"sub": "p1"}


def test_kinds_are_not_interchangeable(issuer):
    refresh = issuer.sign({"sub": "p1"}, TokenKind.refresh, timedelta(days=1))
    access = issuer.sign({"sub": "p1"}, TokenKind.access, timedelta(minutes=1))
    with pytest.raises(TokenError):
        issuer.verify(refresh, TokenKind.access)
    with pytest.raises(TokenError):
        issuer.verify(access, TokenKind.refresh)


def test_expired_token(issuer):
    token = issuer.sign({"sub": "p1"}, TokenKind.access, timedelta(seconds=-5))
    with pytest.raises(TokenExpiredError):
        issuer.verify(token, TokenKind.access)


def test_wrong_secret(issuer):
    token = TokenIssuer("another-secret").sign({"sub": "p1"}, TokenKind.access, timedelta(minutes=1))
    with pytest.raises(TokenError):
        issuer.verify(token, TokenKind.access)


def test_tampered_token(issuer):
    token = issuer.sign({"sub": "p1"}, TokenKind.access, timedelta(minutes=1))
    header, payload, signature = token.split(".")
    forged = ".".join([header, payload, signature[::-1]])
    with pytest.raises(TokenError):
        issuer.verify(forged, TokenKind.access)


def test_garbage_token(issuer):
    with pytest.raises(TokenError):
        issuer.verify("not.a.jwt", TokenKind.access)


def test_token_without_subject(issuer):
    token = jwt.encode({"type": "access"}, SECRET, algorithm="HS256")
    with pytest.raises(TokenError):
        issuer.verify(token, TokenKind.access)


def test_token_without_type(issuer):
    token = jwt.encode({"sub": "p1"}, SECRET, algorithm="HS256")
    with pytest.raises(TokenError):
        issuer.verify(token, TokenKind.access)
