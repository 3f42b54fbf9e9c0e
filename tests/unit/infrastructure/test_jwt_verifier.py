"""Unit tests for the bearer token verifier."""

from datetime import UTC, datetime, timedelta

import pytest
from jose import jwt

from src.domain.exceptions import AuthenticationException
from src.infrastructure.auth.jwt_verifier import JWTTokenVerifier

SECRET = "test-secret"


def _token(claims: dict, secret: str = SECRET, algorithm: str = "HS256") -> str:
    return jwt.encode(claims, secret, algorithm=algorithm)


@pytest.fixture
def verifier() -> JWTTokenVerifier:
    return JWTTokenVerifier(secret=SECRET)


class TestJWTTokenVerifier:
    """Tests for JWTTokenVerifier."""

    def test_valid_token_returns_subject(self, verifier):
        exp = datetime.now(UTC) + timedelta(hours=1)
        token = _token({"sub": "user-42", "exp": exp})
        assert verifier.verify(token) == "user-42"

    def test_token_without_expiry_is_accepted(self, verifier):
        assert verifier.verify(_token({"sub": "user-42"})) == "user-42"

    def test_expired_token(self, verifier):
        exp = datetime.now(UTC) - timedelta(minutes=1)
        with pytest.raises(AuthenticationException, match="expired"):
            verifier.verify(_token({"sub": "user-42", "exp": exp}))

    def test_wrong_secret(self, verifier):
        with pytest.raises(AuthenticationException):
            verifier.verify(_token({"sub": "user-42"}, secret="other-secret"))

    def test_wrong_algorithm(self, verifier):
        token = _token({"sub": "user-42"}, algorithm="HS512")
        with pytest.raises(AuthenticationException):
            verifier.verify(token)

    def test_malformed_token(self, verifier):
        with pytest.raises(AuthenticationException):
            verifier.verify("not-a-jwt")

    def test_empty_token(self, verifier):
        with pytest.raises(AuthenticationException, match="Missing"):
            verifier.verify("")

    def test_missing_owner_claim(self, verifier):
        with pytest.raises(AuthenticationException, match="sub"):
            verifier.verify(_token({"username": "alice"}))

    def test_custom_owner_claim(self):
        verifier = JWTTokenVerifier(secret=SECRET, owner_claim="username")
        assert verifier.verify(_token({"username": "alice"})) == "alice"
