# ridebook/api/security.py
"""
Bearer-token authentication for routes.

``get_current_principal`` turns the Authorization header into a Principal
(UNAUTHORIZED on any problem with the token); ``require_role`` additionally
restricts a route to some roles (FORBIDDEN otherwise).
"""

from __future__ import annotations

from typing import Awaitable, Callable, Optional
from uuid import UUID

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel

from ridebook.infra.security import TokenIssuer
from ridebook.shared.errors import forbidden, unauthorized
from ridebook.shared.models.enums import AuthRole

bearer_scheme = HTTPBearer(auto_error=False)


class Principal(BaseModel):
    """The authenticated caller."""
    id: UUID
    email: str
    role: AuthRole


def get_token_issuer() -> TokenIssuer:
    return TokenIssuer.from_settings()


async def get_current_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    tokens: TokenIssuer = Depends(get_token_issuer),
) -> Principal:
    # HTTPBearer yields None for a missing header or a non-Bearer scheme
    if credentials is None or not credentials.credentials:
        raise unauthorized("Authentication token is missing")

    payload = tokens.verify(credentials.credentials)
    return Principal(id=payload.sub, email=payload.email, role=payload.role)


def require_role(*roles: AuthRole) -> Callable[..., Awaitable[Principal]]:
    """Dependency factory: the caller must hold one of ``roles``."""
    allowed = frozenset(roles)

    async def dependency(principal: Principal = Depends(get_current_principal)) -> Principal:
        if principal.role not in allowed:
            raise forbidden("You do not have permission to access this resource")
        return principal

    return dependency


require_rider = require_role(AuthRole.RIDER)
require_driver = require_role(AuthRole.DRIVER)
require_admin = require_role(AuthRole.ADMIN)
