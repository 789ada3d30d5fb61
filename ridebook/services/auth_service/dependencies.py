from fastapi import Request

from ridebook.infra.database import get_db
from ridebook.infra.security import PasswordHasher, TokenIssuer
from ridebook.services.auth_service.repository import AccountRepository
from ridebook.services.auth_service.service import AuthService
from ridebook.services.driver_service.repository import DriverRepository


def get_password_hasher() -> PasswordHasher:
    return PasswordHasher()


def get_auth_service(request: Request) -> AuthService:
    db = get_db()
    return AuthService(
        accounts=AccountRepository(db),
        drivers=DriverRepository(db),
        hasher=get_password_hasher(),
        tokens=TokenIssuer.from_settings(),
    )
