from typing import Iterable, List, Optional
from uuid import UUID

from asyncpg import Connection

from ridebook.infra.database import DatabaseManager
from ridebook.shared.models.driver_dto import DriverRecord
from ridebook.shared.models.enums import DriverStatus

DRIVER_COLUMNS = """
    driver_id AS id, name, email, phone_number, license_number, password,
    status, location, created_at, updated_at
"""

UPDATABLE_COLUMNS = frozenset({"name", "phone_number", "location", "password"})


class DriverRepository:
    """Drivers stored in ``drivers``."""

    def __init__(self, db: DatabaseManager):
        self.db = db

    async def get_by_id(
        self,
        driver_id: UUID,
        conn: Optional[Connection] = None,
        for_update: bool = False,
    ) -> Optional[DriverRecord]:
        """Returns the driver; ``for_update`` row-locks it (only meaningful inside a transaction)."""
        query = f"SELECT {DRIVER_COLUMNS} FROM drivers WHERE driver_id = $1"
        if for_update:
            query += " FOR UPDATE"
        async with self.db.connection(conn) as c:
            record = await c.fetchrow(query, driver_id)
            if record:
                return DriverRecord(**dict(record))
            return None

    async def get_by_email(self, email: str, conn: Optional[Connection] = None) -> Optional[DriverRecord]:
        query = f"SELECT {DRIVER_COLUMNS} FROM drivers WHERE lower(email) = lower($1)"
        async with self.db.connection(conn) as c:
            record = await c.fetchrow(query, email)
            if record:
                return DriverRecord(**dict(record))
            return None

    async def create(
        self,
        name: str,
        email: str,
        phone_number: str,
        license_number: str,
        password_hash: str,
        conn: Optional[Connection] = None,
    ) -> DriverRecord:
        """Inserts a driver with status ``offline``. Raises asyncpg.UniqueViolationError on a duplicate email."""
        query = f"""
            INSERT INTO drivers (name, email, phone_number, license_number, password, status)
            VALUES ($1, $2, $3, $4, $5, $6)
            RETURNING {DRIVER_COLUMNS}
        """
        async with self.db.connection(conn) as c:
            record = await c.fetchrow(
                query,
                name,
                email,
                phone_number,
                license_number,
                password_hash,
                DriverStatus.OFFLINE.value,
            )
            return DriverRecord(**dict(record))

    async def update(self, driver_id: UUID, changes: dict, conn: Optional[Connection] = None) -> Optional[DriverRecord]:
        """Applies profile ``changes`` (column -> value). Returns None when the driver is absent."""
        if not changes:
            return await self.get_by_id(driver_id, conn)

        unknown = set(changes) - UPDATABLE_COLUMNS
        if unknown:
            raise ValueError(f"Columns cannot be updated: {sorted(unknown)}")

        columns = list(changes.keys())
        assignments = ", ".join(f"{col} = ${i + 2}" for i, col in enumerate(columns))
        query = f"""
            UPDATE drivers
            SET {assignments}, updated_at = NOW()
            WHERE driver_id = $1
            RETURNING {DRIVER_COLUMNS}
        """
        async with self.db.connection(conn) as c:
            record = await c.fetchrow(query, driver_id, *[changes[col] for col in columns])
            if record:
                return DriverRecord(**dict(record))
            return None

    async def transition_status(
        self,
        driver_id: UUID,
        expected: Iterable[DriverStatus],
        new_status: DriverStatus,
        conn: Optional[Connection] = None,
    ) -> Optional[DriverRecord]:
        """
        Sets ``new_status`` only if the current status is one of ``expected``.
        Returns None when no row matched (absent driver or status moved on).
        """
        query = f"""
            UPDATE drivers
            SET status = $2, updated_at = NOW()
            WHERE driver_id = $1 AND status = ANY($3::text[])
            RETURNING {DRIVER_COLUMNS}
        """
        async with self.db.connection(conn) as c:
            record = await c.fetchrow(
                query,
                driver_id,
                new_status.value,
                [s.value for s in expected],
            )
            if record:
                return DriverRecord(**dict(record))
            return None

    async def delete(self, driver_id: UUID, conn: Optional[Connection] = None) -> bool:
        """Deletes the driver. Returns False when nothing was deleted."""
        async with self.db.connection(conn) as c:
            deleted = await c.fetchval(
                "DELETE FROM drivers WHERE driver_id = $1 RETURNING driver_id",
                driver_id,
            )
            return deleted is not None

    async def list_all(self, status: Optional[DriverStatus] = None) -> List[DriverRecord]:
        """Returns drivers newest first, optionally filtered by status."""
        if status is None:
            query = f"SELECT {DRIVER_COLUMNS} FROM drivers ORDER BY created_at DESC"
            args: list = []
        else:
            query = f"SELECT {DRIVER_COLUMNS} FROM drivers WHERE status = $1 ORDER BY created_at DESC"
            args = [status.value]
        async with self.db.acquire() as conn:
            rows = await conn.fetch(query, *args)
            return [DriverRecord(**dict(row)) for row in rows]

    async def count_by_status(self, status: DriverStatus) -> int:
        async with self.db.acquire() as conn:
            return await conn.fetchval("SELECT COUNT(*) FROM drivers WHERE status = $1", status.value)
