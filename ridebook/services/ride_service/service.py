# ridebook/services/ride_service/service.py
"""
Ride workflow: request, history, driver acceptance, completion and cancellation.

Every operation that touches both a ride and its driver runs in a single
transaction. Rows are locked ride first, then driver, and each status write is
conditional on the status read under the lock, so a write that matches no row
means the state moved underneath us and the whole transaction is rolled back.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import List
from uuid import UUID

from ridebook.common.logger import log_info
from ridebook.config import settings
from ridebook.infra.database import DatabaseManager
from ridebook.services.driver_service.repository import DriverRepository
from ridebook.services.ride_service.fare import FareEstimator
from ridebook.services.ride_service.repository import RideRepository
from ridebook.services.ride_service.state_machine import RideStateMachine
from ridebook.shared.errors import bad_request, forbidden, not_found, server_error
from ridebook.shared.models.enums import DriverStatus, RideStatus
from ridebook.shared.models.ride_dto import RideDTO

NO_DRIVERS_MESSAGE = "No drivers are currently available. Please try again later."


def _now() -> datetime:
    return datetime.now(timezone.utc)


class RideService:
    def __init__(
        self,
        db: DatabaseManager,
        rides: RideRepository,
        drivers: DriverRepository,
        fare_estimator: FareEstimator,
        require_online_driver: bool | None = None,
    ) -> None:
        self.db = db
        self.rides = rides
        self.drivers = drivers
        self.fare_estimator = fare_estimator
        if require_online_driver is None:
            require_online_driver = settings.fares.REQUIRE_ONLINE_DRIVER
        self.require_online_driver = require_online_driver

    async def request_ride(self, rider_id: UUID, pickup_location: str, dropoff_location: str) -> RideDTO:
        """Creates a ride in ``requested`` with an estimated fare and no driver."""
        if self.require_online_driver:
            online = await self.drivers.count_by_status(DriverStatus.ONLINE)
            if not online:
                raise bad_request(NO_DRIVERS_MESSAGE)

        estimate = self.fare_estimator.estimate(pickup_location, dropoff_location)
        ride = await self.rides.create(
            rider_id=rider_id,
            pickup_location=pickup_location,
            dropoff_location=dropoff_location,
            fare=estimate.total_fare,
            start_time=_now(),
        )

        await log_info(
            f"Ride {ride.id} requested by rider {rider_id}",
            extra={"ride_id": str(ride.id), "fare": estimate.total_fare, "distance_km": estimate.distance_km},
        )
        return ride

    async def get_user_ride_history(self, rider_id: UUID) -> List[RideDTO]:
        """All rides of the rider, newest first."""
        return await self.rides.list_by_rider(rider_id)

    async def cancel_ride(self, rider_id: UUID, ride_id: UUID) -> RideDTO:
        """
        Cancels a ride owned by ``rider_id``.

        Ownership is checked before status. If a driver was assigned, the driver
        goes back to ``online`` in the same transaction.
        """
        async with self.db.transaction() as conn:
            ride = await self.rides.get_by_id(ride_id, conn, for_update=True)
            if ride is None:
                raise not_found("Ride not found")
            if ride.rider_id != rider_id:
                raise forbidden("You can only cancel your own rides")
            if not RideStateMachine.can_transition(ride.status, RideStatus.CANCELED):
                raise bad_request(f"Ride cannot be canceled in status '{ride.status}'")

            canceled = await self.rides.transition(
                ride_id,
                expected=[ride.status],
                new_status=RideStatus.CANCELED,
                conn=conn,
                end_time=_now(),
            )
            if canceled is None:
                raise server_error("Failed to cancel ride")

            if ride.driver_id is not None:
                released = await self.drivers.transition_status(
                    ride.driver_id,
                    expected=[DriverStatus.BUSY],
                    new_status=DriverStatus.ONLINE,
                    conn=conn,
                )
                if released is None:
                    raise server_error("Failed to release driver")

        await log_info(
            f"Ride {ride_id} canceled by rider {rider_id}",
            extra={"ride_id": str(ride_id), "previous_status": str(ride.status)},
        )
        return canceled

    async def accept_ride(self, driver_id: UUID, ride_id: UUID) -> RideDTO:
        """
        Assigns a requested ride to an online driver.

        Only one driver can ever win a ride: the ride row is locked and both the
        ride and driver writes are conditional on the statuses just read.
        """
        async with self.db.transaction() as conn:
            driver = await self.drivers.get_by_id(driver_id, conn)
            if driver is None:
                raise not_found("Driver not found")
            if driver.status != DriverStatus.ONLINE:
                raise bad_request("Driver must be online to accept rides")

            ride = await self.rides.get_by_id(ride_id, conn, for_update=True)
            if ride is None:
                raise not_found("Ride not found")
            if not RideStateMachine.can_transition(ride.status, RideStatus.IN_PROGRESS):
                raise bad_request("Ride is no longer available")

            accepted = await self.rides.transition(
                ride_id,
                expected=[RideStatus.REQUESTED],
                new_status=RideStatus.IN_PROGRESS,
                conn=conn,
                driver_id=driver_id,
            )
            if accepted is None:
                raise server_error("Failed to assign ride")

            busy = await self.drivers.transition_status(
                driver_id,
                expected=[DriverStatus.ONLINE],
                new_status=DriverStatus.BUSY,
                conn=conn,
            )
            if busy is None:
                raise server_error("Failed to update driver status")

        await log_info(
            f"Ride {ride_id} accepted by driver {driver_id}",
            extra={"ride_id": str(ride_id), "driver_id": str(driver_id)},
        )
        return accepted

    async def complete_ride(self, driver_id: UUID, ride_id: UUID) -> RideDTO:
        """Finishes an in-progress ride and puts the driver back ``online``."""
        async with self.db.transaction() as conn:
            ride = await self.rides.get_by_id(ride_id, conn, for_update=True)
            if ride is None:
                raise not_found("Ride not found")
            if ride.driver_id != driver_id:
                raise forbidden("This ride is not assigned to you")
            if not RideStateMachine.can_transition(ride.status, RideStatus.COMPLETED):
                raise bad_request(f"Ride cannot be completed in status '{ride.status}'")

            completed = await self.rides.transition(
                ride_id,
                expected=[RideStatus.IN_PROGRESS],
                new_status=RideStatus.COMPLETED,
                conn=conn,
                end_time=_now(),
            )
            if completed is None:
                raise server_error("Failed to complete ride")

            released = await self.drivers.transition_status(
                driver_id,
                expected=[DriverStatus.BUSY],
                new_status=DriverStatus.ONLINE,
                conn=conn,
            )
            if released is None:
                raise server_error("Failed to release driver")

        await log_info(
            f"Ride {ride_id} completed by driver {driver_id}",
            extra={"ride_id": str(ride_id), "fare": completed.fare},
        )
        return completed
