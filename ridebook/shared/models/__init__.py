# ridebook/shared/models/__init__.py
"""
Shared DTOs and pydantic models.
"""

from ridebook.shared.models.enums import (
    AccountRole,
    AuthRole,
    DriverStatus,
    RideStatus,
)
from ridebook.shared.models.account_dto import (
    AccountDTO,
    AccountRecord,
    LoginRequest,
    RegisterUserRequest,
    UserAuthResult,
)
from ridebook.shared.models.driver_dto import (
    DriverAuthResult,
    DriverDTO,
    DriverRecord,
    RegisterDriverRequest,
    UpdateDriverProfileRequest,
    UpdateDriverStatusRequest,
)
from ridebook.shared.models.ride_dto import (
    FareEstimateDTO,
    RequestRideRequest,
    RideActionRequest,
    RideDTO,
)
from ridebook.shared.models.common import (
    DeletedResult,
    ErrorResponse,
    HealthStatus,
    SuccessResponse,
    SuccessType,
)

__all__ = [
    # Enums
    "AccountRole",
    "AuthRole",
    "DriverStatus",
    "RideStatus",
    # Accounts
    "AccountDTO",
    "AccountRecord",
    "LoginRequest",
    "RegisterUserRequest",
    "UserAuthResult",
    # Drivers
    "DriverAuthResult",
    "DriverDTO",
    "DriverRecord",
    "RegisterDriverRequest",
    "UpdateDriverProfileRequest",
    "UpdateDriverStatusRequest",
    # Rides
    "FareEstimateDTO",
    "RequestRideRequest",
    "RideActionRequest",
    "RideDTO",
    # Common
    "DeletedResult",
    "ErrorResponse",
    "HealthStatus",
    "SuccessResponse",
    "SuccessType",
]
