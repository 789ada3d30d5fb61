# ridebook/infra/security.py
"""
Password hashing and bearer tokens.
Hashing runs in a worker thread so the event loop is never blocked by bcrypt.
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone
from typing import Any
from uuid import UUID

import bcrypt
import jwt
from pydantic import BaseModel, ValidationError

from ridebook.config import settings
from ridebook.shared.errors import server_error, unauthorized
from ridebook.shared.models.enums import AuthRole

# bcrypt only looks at the first 72 bytes of the secret
BCRYPT_MAX_BYTES = 72


def _encode_secret(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


class PasswordHasher:
    """bcrypt hashing with an async facade."""

    def __init__(self, rounds: int = 12) -> None:
        self.rounds = rounds

    def hash_sync(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(_encode_secret(password), salt).decode("utf-8")

    def verify_sync(self, password: str, hashed: str) -> bool:
        try:
            return bcrypt.checkpw(_encode_secret(password), hashed.encode("utf-8"))
        except ValueError:
            # Malformed stored hash
            return False

    async def hash(self, password: str) -> str:
        return await asyncio.to_thread(self.hash_sync, password)

    async def verify(self, password: str, hashed: str) -> bool:
        return await asyncio.to_thread(self.verify_sync, password, hashed)


class TokenPayload(BaseModel):
    """Claims carried by a bearer token."""
    sub: UUID
    email: str
    role: AuthRole
    iat: int | None = None
    exp: int


class TokenIssuer:
    """
    Issues and verifies signed, time-limited bearer tokens (HS256 by default).

    Any failure to verify (bad signature, expired, malformed claims, role outside
    AuthRole) is reported as UNAUTHORIZED. A missing secret is a server fault.
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        ttl: timedelta = timedelta(hours=24),
    ) -> None:
        self.secret = secret
        self.algorithm = algorithm
        self.ttl = ttl

    @classmethod
    def from_settings(cls) -> "TokenIssuer":
        return cls(
            secret=settings.auth.JWT_SECRET,
            algorithm=settings.auth.JWT_ALGORITHM,
            ttl=timedelta(hours=settings.auth.TOKEN_TTL_HOURS),
        )

    def _require_secret(self) -> str:
        if not self.secret:
            raise server_error("Token signing secret is not configured")
        return self.secret

    def issue(self, subject_id: UUID, email: str, role: AuthRole) -> str:
        secret = self._require_secret()
        now = datetime.now(timezone.utc)
        claims: dict[str, Any] = {
            "sub": str(subject_id),
            "email": email,
            "role": AuthRole(role).value,
            "iat": int(now.timestamp()),
            "exp": int((now + self.ttl).timestamp()),
        }
        return jwt.encode(claims, secret, algorithm=self.algorithm)

    def verify(self, token: str) -> TokenPayload:
        secret = self._require_secret()
        try:
            claims = jwt.decode(
                token,
                secret,
                algorithms=[self.algorithm],
                options={"require": ["exp", "sub"]},
            )
        except jwt.ExpiredSignatureError:
            raise unauthorized("Token has expired")
        except jwt.InvalidTokenError:
            raise unauthorized("Invalid token")

        try:
            return TokenPayload.model_validate(claims)
        except ValidationError:
            raise unauthorized("Invalid token")
