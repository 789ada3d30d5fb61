from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from ridebook.shared.models.enums import RideStatus


class RideDTO(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    rider_id: UUID
    driver_id: Optional[UUID] = None

    pickup_location: str
    dropoff_location: str

    fare: float
    status: RideStatus = RideStatus.REQUESTED

    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class RequestRideRequest(BaseModel):
    pickup_location: str = Field(min_length=3, max_length=255)
    dropoff_location: str = Field(min_length=3, max_length=255)


class RideActionRequest(BaseModel):
    """Body of accept/complete/cancel calls."""
    ride_id: UUID


class FareEstimateDTO(BaseModel):
    distance_km: float
    base_fare: float
    distance_fare: float
    total_fare: float
    currency: str = "USD"
