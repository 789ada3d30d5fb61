from fastapi import Request

from ridebook.infra.database import get_db
from ridebook.services.auth_service.dependencies import get_password_hasher
from ridebook.services.driver_service.repository import DriverRepository
from ridebook.services.driver_service.service import DriverService
from ridebook.services.ride_service.repository import RideRepository


def get_driver_service(request: Request) -> DriverService:
    db = get_db()
    return DriverService(
        db=db,
        drivers=DriverRepository(db),
        rides=RideRepository(db),
        hasher=get_password_hasher(),
    )
