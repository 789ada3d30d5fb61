from datetime import datetime
from decimal import Decimal
from typing import Iterable, List, Optional
from uuid import UUID

from asyncpg import Connection

from ridebook.infra.database import DatabaseManager
from ridebook.shared.models.enums import RideStatus
from ridebook.shared.models.ride_dto import RideDTO

RIDE_COLUMNS = """
    ride_id AS id, user_id AS rider_id, driver_id,
    pickup_location, dropoff_location, fare, status,
    start_time, end_time, created_at, updated_at
"""


class RideRepository:
    def __init__(self, db: DatabaseManager):
        self.db = db

    async def create(
        self,
        rider_id: UUID,
        pickup_location: str,
        dropoff_location: str,
        fare: float,
        start_time: datetime,
        conn: Optional[Connection] = None,
    ) -> RideDTO:
        """Inserts a ride in status ``requested`` with no driver."""
        query = f"""
            INSERT INTO rides (user_id, pickup_location, dropoff_location, fare, status, start_time)
            VALUES ($1, $2, $3, $4, $5, $6)
            RETURNING {RIDE_COLUMNS}
        """
        async with self.db.connection(conn) as c:
            record = await c.fetchrow(
                query,
                rider_id,
                pickup_location,
                dropoff_location,
                Decimal(str(fare)),
                RideStatus.REQUESTED.value,
                start_time,
            )
            return RideDTO(**dict(record))

    async def get_by_id(
        self,
        ride_id: UUID,
        conn: Optional[Connection] = None,
        for_update: bool = False,
    ) -> Optional[RideDTO]:
        """Returns the ride; ``for_update`` row-locks it until the transaction ends."""
        query = f"SELECT {RIDE_COLUMNS} FROM rides WHERE ride_id = $1"
        if for_update:
            query += " FOR UPDATE"
        async with self.db.connection(conn) as c:
            record = await c.fetchrow(query, ride_id)
            if record:
                return RideDTO(**dict(record))
            return None

    async def list_by_rider(self, rider_id: UUID) -> List[RideDTO]:
        """Returns every ride of the rider, newest first."""
        query = f"""
            SELECT {RIDE_COLUMNS} FROM rides
            WHERE user_id = $1
            ORDER BY created_at DESC, start_time DESC
        """
        async with self.db.acquire() as conn:
            rows = await conn.fetch(query, rider_id)
            return [RideDTO(**dict(row)) for row in rows]

    async def transition(
        self,
        ride_id: UUID,
        expected: Iterable[RideStatus],
        new_status: RideStatus,
        conn: Optional[Connection] = None,
        driver_id: Optional[UUID] = None,
        end_time: Optional[datetime] = None,
    ) -> Optional[RideDTO]:
        """
        Conditional status write.

        Moves the ride to ``new_status`` only if its current status is one of
        ``expected``; assigns ``driver_id`` / ``end_time`` when given and leaves
        them untouched otherwise. Returns None when no row matched.
        """
        query = f"""
            UPDATE rides
            SET status = $2,
                driver_id = COALESCE($4, driver_id),
                end_time = COALESCE($5, end_time),
                updated_at = NOW()
            WHERE ride_id = $1 AND status = ANY($3::text[])
            RETURNING {RIDE_COLUMNS}
        """
        async with self.db.connection(conn) as c:
            record = await c.fetchrow(
                query,
                ride_id,
                new_status.value,
                [s.value for s in expected],
                driver_id,
                end_time,
            )
            if record:
                return RideDTO(**dict(record))
            return None

    async def has_active_ride_for_driver(self, driver_id: UUID, conn: Optional[Connection] = None) -> bool:
        """True when the driver holds a ride in progress."""
        query = """
            SELECT EXISTS (
                SELECT 1 FROM rides WHERE driver_id = $1 AND status = $2
            )
        """
        async with self.db.connection(conn) as c:
            return bool(await c.fetchval(query, driver_id, RideStatus.IN_PROGRESS.value))
