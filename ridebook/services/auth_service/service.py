# ridebook/services/auth_service/service.py
"""
Registration and login for riders and drivers.
"""

from __future__ import annotations

import asyncpg

from ridebook.common.constants import TypeMsg
from ridebook.common.logger import log_info
from ridebook.infra.security import PasswordHasher, TokenIssuer
from ridebook.services.auth_service.repository import AccountRepository
from ridebook.services.driver_service.repository import DriverRepository
from ridebook.shared.errors import conflict, unauthorized
from ridebook.shared.models.account_dto import (
    AccountDTO,
    LoginRequest,
    RegisterUserRequest,
    UserAuthResult,
)
from ridebook.shared.models.driver_dto import (
    DriverAuthResult,
    DriverDTO,
    RegisterDriverRequest,
)
from ridebook.shared.models.enums import AccountRole, AuthRole

INVALID_CREDENTIALS_MESSAGE = "Invalid email or password"


class AuthService:
    """Credential checks and token issuing for both account tables."""

    def __init__(
        self,
        accounts: AccountRepository,
        drivers: DriverRepository,
        hasher: PasswordHasher,
        tokens: TokenIssuer,
    ) -> None:
        self.accounts = accounts
        self.drivers = drivers
        self.hasher = hasher
        self.tokens = tokens

    async def register_user(self, request: RegisterUserRequest) -> AccountDTO:
        """Creates a rider account. CONFLICT when the email is taken."""
        if await self.accounts.get_by_email(request.email):
            raise conflict("User with this email already exists")

        password_hash = await self.hasher.hash(request.password)
        try:
            account = await self.accounts.create(
                name=request.name,
                email=request.email,
                phone_number=request.phone_number,
                password_hash=password_hash,
                role=AccountRole.RIDER,
            )
        except asyncpg.UniqueViolationError:
            # Lost a race with a concurrent registration
            raise conflict("User with this email already exists")

        await log_info(f"User registered: {account.id}", extra={"user_id": str(account.id)})
        return account.public()

    async def login_user(self, request: LoginRequest) -> UserAuthResult:
        account = await self.accounts.get_by_email(request.email)
        if account is None or not await self.hasher.verify(request.password, account.password):
            await log_info(
                "Failed user login attempt",
                type_msg=TypeMsg.WARNING,
                extra={"email": request.email},
            )
            raise unauthorized(INVALID_CREDENTIALS_MESSAGE)

        token = self.tokens.issue(account.id, account.email, AuthRole(account.role.value))
        return UserAuthResult(user=account.public(), token=token)

    async def register_driver(self, request: RegisterDriverRequest) -> DriverDTO:
        """Creates a driver in status ``offline``. CONFLICT when the email is taken."""
        if await self.drivers.get_by_email(request.email):
            raise conflict("Driver with this email already exists")

        password_hash = await self.hasher.hash(request.password)
        try:
            driver = await self.drivers.create(
                name=request.name,
                email=request.email,
                phone_number=request.phone_number,
                license_number=request.license_number,
                password_hash=password_hash,
            )
        except asyncpg.UniqueViolationError:
            raise conflict("Driver with this email already exists")

        await log_info(f"Driver registered: {driver.id}", extra={"driver_id": str(driver.id)})
        return driver.public()

    async def login_driver(self, request: LoginRequest) -> DriverAuthResult:
        driver = await self.drivers.get_by_email(request.email)
        if driver is None or not await self.hasher.verify(request.password, driver.password):
            await log_info(
                "Failed driver login attempt",
                type_msg=TypeMsg.WARNING,
                extra={"email": request.email},
            )
            raise unauthorized(INVALID_CREDENTIALS_MESSAGE)

        token = self.tokens.issue(driver.id, driver.email, AuthRole.DRIVER)
        return DriverAuthResult(driver=driver.public(), token=token)
