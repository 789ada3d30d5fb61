from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, model_validator

from ridebook.shared.models.enums import DriverStatus


class DriverDTO(BaseModel):
    """Driver profile as returned to clients."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    email: str
    phone_number: str
    license_number: str
    status: DriverStatus = DriverStatus.OFFLINE
    location: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class DriverRecord(DriverDTO):
    """Driver row including the password hash."""
    password: str = Field(repr=False)

    def public(self) -> DriverDTO:
        return DriverDTO(**self.model_dump(exclude={"password"}))


class RegisterDriverRequest(BaseModel):
    name: str = Field(min_length=2, max_length=100)
    email: EmailStr
    phone_number: str = Field(min_length=10, max_length=20)
    license_number: str = Field(min_length=5, max_length=50)
    password: str = Field(min_length=8)


class UpdateDriverProfileRequest(BaseModel):
    """Partial profile update; at least one field must be present."""
    name: Optional[str] = Field(default=None, min_length=2, max_length=100)
    phone_number: Optional[str] = Field(default=None, min_length=10, max_length=20)
    location: Optional[str] = Field(default=None, max_length=255)
    password: Optional[str] = Field(default=None, min_length=8)

    @model_validator(mode="after")
    def check_not_empty(self) -> "UpdateDriverProfileRequest":
        if not self.model_dump(exclude_none=True):
            raise ValueError("At least one field must be provided")
        return self


class UpdateDriverStatusRequest(BaseModel):
    status: DriverStatus


class DriverAuthResult(BaseModel):
    driver: DriverDTO
    token: str
