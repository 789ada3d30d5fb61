from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from ridebook.shared.models.enums import AccountRole


class AccountDTO(BaseModel):
    """Rider/admin account as returned to clients (never carries the password hash)."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    email: str
    phone_number: str
    role: AccountRole = AccountRole.RIDER
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class AccountRecord(AccountDTO):
    """Account row including the password hash; stays inside the service layer."""
    password: str = Field(repr=False)

    def public(self) -> AccountDTO:
        return AccountDTO(**self.model_dump(exclude={"password"}))


class RegisterUserRequest(BaseModel):
    name: str = Field(min_length=2, max_length=100)
    email: EmailStr
    phone_number: str = Field(min_length=10, max_length=20)
    password: str = Field(min_length=8)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class UserAuthResult(BaseModel):
    user: AccountDTO
    token: str
