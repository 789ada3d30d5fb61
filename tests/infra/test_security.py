# tests/infra/test_security.py
"""
Tests for password hashing and bearer tokens.
"""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import jwt
import pytest

from ridebook.infra.security import PasswordHasher, TokenIssuer, TokenPayload
from ridebook.shared.errors import AppError, ErrorType
from ridebook.shared.models.enums import AuthRole

SECRET = "unit-test-secret-that-is-long-enough"


@pytest.fixture
def hasher() -> PasswordHasher:
    return PasswordHasher(rounds=4)


@pytest.fixture
def issuer() -> TokenIssuer:
    return TokenIssuer(secret=SECRET, ttl=timedelta(hours=1))


class TestPasswordHasher:

    @pytest.mark.asyncio
    async def test_hash_and_verify(self, hasher: PasswordHasher) -> None:
        hashed = await hasher.hash("correct-horse")

        assert hashed != "correct-horse"
        assert await hasher.verify("correct-horse", hashed) is True
        assert await hasher.verify("wrong-horse", hashed) is False

    @pytest.mark.asyncio
    async def test_same_password_different_salt(self, hasher: PasswordHasher) -> None:
        assert await hasher.hash("correct-horse") != await hasher.hash("correct-horse")

    def test_malformed_hash_does_not_verify(self, hasher: PasswordHasher) -> None:
        assert hasher.verify_sync("anything", "not-a-bcrypt-hash") is False

    def test_long_passwords_are_accepted(self, hasher: PasswordHasher) -> None:
        password = "p" * 100
        assert hasher.verify_sync(password, hasher.hash_sync(password)) is True


class TestTokenIssuer:

    def test_issue_and_verify(self, issuer: TokenIssuer) -> None:
        subject = uuid4()
        token = issuer.issue(subject, "ada@example.com", AuthRole.RIDER)

        payload = issuer.verify(token)

        assert isinstance(payload, TokenPayload)
        assert payload.sub == subject
        assert payload.email == "ada@example.com"
        assert payload.role is AuthRole.RIDER
        assert payload.exp - payload.iat == 3600

    def test_claims_on_the_wire(self, issuer: TokenIssuer) -> None:
        subject = uuid4()
        token = issuer.issue(subject, "d@example.com", AuthRole.DRIVER)

        claims = jwt.decode(token, SECRET, algorithms=["HS256"])

        assert claims["sub"] == str(subject)
        assert claims["role"] == "driver"

    def _assert_unauthorized(self, issuer: TokenIssuer, token: str) -> AppError:
        with pytest.raises(AppError) as exc_info:
            issuer.verify(token)
        assert exc_info.value.kind is ErrorType.UNAUTHORIZED
        return exc_info.value

    def test_tampered_signature(self, issuer: TokenIssuer) -> None:
        token = issuer.issue(uuid4(), "a@example.com", AuthRole.RIDER)
        other = TokenIssuer(secret="another-secret-of-sufficient-length")
        self._assert_unauthorized(other, token)

    def test_garbage_token(self, issuer: TokenIssuer) -> None:
        self._assert_unauthorized(issuer, "not.a.jwt")

    def test_expired(self, issuer: TokenIssuer) -> None:
        past = datetime.now(timezone.utc) - timedelta(hours=2)
        token = jwt.encode(
            {"sub": str(uuid4()), "email": "a@example.com", "role": "rider",
             "iat": int(past.timestamp()), "exp": int((past + timedelta(hours=1)).timestamp())},
            SECRET,
            algorithm="HS256",
        )
        err = self._assert_unauthorized(issuer, token)
        assert "expired" in err.message

    def test_unknown_role(self, issuer: TokenIssuer) -> None:
        exp = datetime.now(timezone.utc) + timedelta(hours=1)
        token = jwt.encode(
            {"sub": str(uuid4()), "email": "a@example.com", "role": "superuser", "exp": int(exp.timestamp())},
            SECRET,
            algorithm="HS256",
        )
        self._assert_unauthorized(issuer, token)

    def test_missing_subject(self, issuer: TokenIssuer) -> None:
        exp = datetime.now(timezone.utc) + timedelta(hours=1)
        token = jwt.encode({"email": "a@example.com", "role": "rider", "exp": int(exp.timestamp())}, SECRET, algorithm="HS256")
        self._assert_unauthorized(issuer, token)

    def test_missing_secret_is_server_error(self) -> None:
        issuer = TokenIssuer(secret="")
        with pytest.raises(AppError) as exc_info:
            issuer.issue(uuid4(), "a@example.com", AuthRole.RIDER)
        assert exc_info.value.kind is ErrorType.SERVER_ERROR

    def test_from_settings(self) -> None:
        issuer = TokenIssuer.from_settings()
        assert issuer.secret
        assert issuer.ttl == timedelta(hours=24)
