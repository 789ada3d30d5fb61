from typing import List, Optional
from uuid import UUID

from ridebook.common.logger import log_info
from ridebook.infra.database import DatabaseManager
from ridebook.infra.security import PasswordHasher
from ridebook.services.driver_service.repository import DriverRepository
from ridebook.services.ride_service.repository import RideRepository
from ridebook.shared.errors import bad_request, not_found, server_error, validation_error
from ridebook.shared.models.driver_dto import DriverDTO, UpdateDriverProfileRequest
from ridebook.shared.models.enums import DriverStatus


class DriverService:
    def __init__(
        self,
        db: DatabaseManager,
        drivers: DriverRepository,
        rides: RideRepository,
        hasher: PasswordHasher,
    ):
        self.db = db
        self.drivers = drivers
        self.rides = rides
        self.hasher = hasher

    async def get_driver(self, driver_id: UUID) -> DriverDTO:
        driver = await self.drivers.get_by_id(driver_id)
        if driver is None:
            raise not_found("Driver not found")
        return driver.public()

    async def update_driver_profile(self, driver_id: UUID, request: UpdateDriverProfileRequest) -> DriverDTO:
        """Partial update of name, phone number, location and password."""
        changes = request.model_dump(exclude_none=True)
        if not changes:
            raise validation_error("At least one field must be provided")

        if "password" in changes:
            changes["password"] = await self.hasher.hash(changes["password"])

        updated = await self.drivers.update(driver_id, changes)
        if updated is None:
            raise not_found("Driver not found")

        await log_info(
            f"Driver {driver_id} updated profile",
            extra={"fields": sorted(k for k in changes if k != "password")},
        )
        return updated.public()

    async def update_driver_status(self, driver_id: UUID, status: DriverStatus) -> DriverDTO:
        """
        Switches a driver between ``online`` and ``offline``.

        ``busy`` is owned by the ride workflow: it cannot be set by hand, and a
        driver holding an in-progress ride cannot leave it.
        """
        status = DriverStatus(status)
        if status == DriverStatus.BUSY:
            raise bad_request("Status 'busy' is set automatically when a ride is accepted")

        async with self.db.transaction() as conn:
            driver = await self.drivers.get_by_id(driver_id, conn, for_update=True)
            if driver is None:
                raise not_found("Driver not found")

            if driver.status == DriverStatus.BUSY and await self.rides.has_active_ride_for_driver(driver_id, conn):
                raise bad_request("Cannot change status while a ride is in progress")

            updated = await self.drivers.transition_status(
                driver_id,
                expected=[driver.status],
                new_status=status,
                conn=conn,
            )
            if updated is None:
                raise server_error("Failed to update driver status")

        await log_info(
            f"Driver {driver_id} status: {driver.status} -> {status}",
            extra={"driver_id": str(driver_id)},
        )
        return updated.public()

    async def delete_driver_account(self, driver_id: UUID) -> None:
        async with self.db.transaction() as conn:
            driver = await self.drivers.get_by_id(driver_id, conn, for_update=True)
            if driver is None:
                raise not_found("Driver not found")
            if await self.rides.has_active_ride_for_driver(driver_id, conn):
                raise bad_request("Cannot delete account while a ride is in progress")

            await self.drivers.delete(driver_id, conn)

        await log_info(f"Driver {driver_id} deleted account", extra={"driver_id": str(driver_id)})

    async def get_all_drivers(self, status: Optional[DriverStatus] = None) -> List[DriverDTO]:
        drivers = await self.drivers.list_all(status)
        return [d.public() for d in drivers]
