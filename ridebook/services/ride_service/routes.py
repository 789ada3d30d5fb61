from typing import List

from fastapi import APIRouter, Depends, status

from ridebook.api.security import Principal, require_rider
from ridebook.services.ride_service.dependencies import get_ride_service
from ridebook.services.ride_service.service import RideService
from ridebook.shared.models.common import SuccessResponse, SuccessType
from ridebook.shared.models.ride_dto import RequestRideRequest, RideActionRequest, RideDTO

router = APIRouter(prefix="/riders", tags=["Riders"])


@router.post(
    "/request-ride",
    response_model=SuccessResponse[RideDTO],
    status_code=status.HTTP_201_CREATED,
)
async def request_ride(
    request: RequestRideRequest,
    rider: Principal = Depends(require_rider),
    service: RideService = Depends(get_ride_service),
):
    ride = await service.request_ride(rider.id, request.pickup_location, request.dropoff_location)
    return SuccessResponse.create(SuccessType.CREATED, ride, "Ride requested successfully")


@router.get("/rides", response_model=SuccessResponse[List[RideDTO]])
async def get_ride_history(
    rider: Principal = Depends(require_rider),
    service: RideService = Depends(get_ride_service),
):
    rides = await service.get_user_ride_history(rider.id)
    return SuccessResponse.create(SuccessType.RETRIEVED, rides, "Ride history retrieved successfully")


@router.post("/cancel-ride", response_model=SuccessResponse[RideDTO])
async def cancel_ride(
    request: RideActionRequest,
    rider: Principal = Depends(require_rider),
    service: RideService = Depends(get_ride_service),
):
    ride = await service.cancel_ride(rider.id, request.ride_id)
    return SuccessResponse.create(SuccessType.UPDATED, ride, "Ride canceled successfully")
