from typing import List, Optional

from fastapi import APIRouter, Depends, status

from ridebook.api.security import Principal, require_admin, require_driver
from ridebook.services.auth_service.dependencies import get_auth_service
from ridebook.services.auth_service.service import AuthService
from ridebook.services.driver_service.dependencies import get_driver_service
from ridebook.services.driver_service.service import DriverService
from ridebook.services.ride_service.dependencies import get_ride_service
from ridebook.services.ride_service.service import RideService
from ridebook.shared.models.account_dto import LoginRequest
from ridebook.shared.models.common import DeletedResult, SuccessResponse, SuccessType
from ridebook.shared.models.driver_dto import (
    DriverAuthResult,
    DriverDTO,
    RegisterDriverRequest,
    UpdateDriverProfileRequest,
    UpdateDriverStatusRequest,
)
from ridebook.shared.models.enums import DriverStatus
from ridebook.shared.models.ride_dto import RideActionRequest, RideDTO

router = APIRouter(prefix="/drivers", tags=["Drivers"])


# --- Registration / login ---

@router.post(
    "/register",
    response_model=SuccessResponse[DriverDTO],
    status_code=status.HTTP_201_CREATED,
)
async def register_driver(
    request: RegisterDriverRequest,
    service: AuthService = Depends(get_auth_service),
):
    driver = await service.register_driver(request)
    return SuccessResponse.create(SuccessType.CREATED, driver, "Driver registered successfully")


@router.post("/login", response_model=SuccessResponse[DriverAuthResult])
async def login_driver(
    request: LoginRequest,
    service: AuthService = Depends(get_auth_service),
):
    result = await service.login_driver(request)
    return SuccessResponse.create(SuccessType.AUTHENTICATED, result, "Login successful")


# --- Profile ---

@router.get("/profile", response_model=SuccessResponse[DriverDTO])
async def get_profile(
    driver: Principal = Depends(require_driver),
    service: DriverService = Depends(get_driver_service),
):
    profile = await service.get_driver(driver.id)
    return SuccessResponse.create(SuccessType.RETRIEVED, profile, "Driver profile retrieved successfully")


@router.put("/profile", response_model=SuccessResponse[DriverDTO])
async def update_profile(
    request: UpdateDriverProfileRequest,
    driver: Principal = Depends(require_driver),
    service: DriverService = Depends(get_driver_service),
):
    profile = await service.update_driver_profile(driver.id, request)
    return SuccessResponse.create(SuccessType.UPDATED, profile, "Driver profile updated successfully")


@router.put("/status", response_model=SuccessResponse[DriverDTO])
async def update_status(
    request: UpdateDriverStatusRequest,
    driver: Principal = Depends(require_driver),
    service: DriverService = Depends(get_driver_service),
):
    profile = await service.update_driver_status(driver.id, request.status)
    return SuccessResponse.create(SuccessType.UPDATED, profile, "Driver status updated successfully")


@router.delete("/account", response_model=SuccessResponse[DeletedResult])
async def delete_account(
    driver: Principal = Depends(require_driver),
    service: DriverService = Depends(get_driver_service),
):
    await service.delete_driver_account(driver.id)
    return SuccessResponse.create(
        SuccessType.DELETED,
        DeletedResult(id=driver.id),
        "Driver account deleted successfully",
    )


# --- Rides ---

@router.post("/accept-ride", response_model=SuccessResponse[RideDTO])
async def accept_ride(
    request: RideActionRequest,
    driver: Principal = Depends(require_driver),
    service: RideService = Depends(get_ride_service),
):
    ride = await service.accept_ride(driver.id, request.ride_id)
    return SuccessResponse.create(SuccessType.UPDATED, ride, "Ride accepted successfully")


@router.post("/complete-ride", response_model=SuccessResponse[RideDTO])
async def complete_ride(
    request: RideActionRequest,
    driver: Principal = Depends(require_driver),
    service: RideService = Depends(get_ride_service),
):
    ride = await service.complete_ride(driver.id, request.ride_id)
    return SuccessResponse.create(SuccessType.UPDATED, ride, "Ride completed successfully")


# --- Admin ---

@router.get("", response_model=SuccessResponse[List[DriverDTO]])
async def list_drivers(
    status: Optional[DriverStatus] = None,
    admin: Principal = Depends(require_admin),
    service: DriverService = Depends(get_driver_service),
):
    drivers = await service.get_all_drivers(status)
    return SuccessResponse.create(SuccessType.RETRIEVED, drivers, "Drivers retrieved successfully")
