from fastapi import Request

from ridebook.infra.database import get_db
from ridebook.services.driver_service.repository import DriverRepository
from ridebook.services.ride_service.fare import FareEstimator
from ridebook.services.ride_service.repository import RideRepository
from ridebook.services.ride_service.service import RideService


def get_ride_service(request: Request) -> RideService:
    db = get_db()
    return RideService(
        db=db,
        rides=RideRepository(db),
        drivers=DriverRepository(db),
        fare_estimator=FareEstimator(),
    )
