# tests/fakes.py
"""
In-memory stand-ins for the repositories and the database manager.

FakeDatabase.transaction() serializes transactions and restores a snapshot of
the tables when the block raises, which is what the row locks plus rollback
give the real services. Every repository call yields to the event loop so
concurrent coroutines interleave between calls.
"""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from itertools import count
from typing import Any, AsyncGenerator, Iterable, Optional
from uuid import UUID, uuid4

import asyncpg

from ridebook.shared.models.account_dto import AccountRecord
from ridebook.shared.models.driver_dto import DriverRecord
from ridebook.shared.models.enums import AccountRole, DriverStatus, RideStatus
from ridebook.shared.models.ride_dto import RideDTO

_clock = count()
_EPOCH = datetime(2026, 1, 1, tzinfo=timezone.utc)


def _tick() -> datetime:
    """Strictly increasing timestamps so 'newest first' is deterministic."""
    return _EPOCH + timedelta(seconds=next(_clock))


class FakeStore:
    def __init__(self) -> None:
        self.users: dict[UUID, AccountRecord] = {}
        self.drivers: dict[UUID, DriverRecord] = {}
        self.rides: dict[UUID, RideDTO] = {}

    def snapshot(self) -> tuple[dict, dict, dict]:
        return dict(self.users), dict(self.drivers), dict(self.rides)

    def restore(self, snapshot: tuple[dict, dict, dict]) -> None:
        self.users, self.drivers, self.rides = (dict(part) for part in snapshot)


class FakeConnection:
    """Marker object handed out by FakeDatabase."""


class FakeDatabase:
    def __init__(self, store: FakeStore) -> None:
        self.store = store
        self._lock = asyncio.Lock()
        self.commits = 0
        self.rollbacks = 0

    @asynccontextmanager
    async def transaction(self) -> AsyncGenerator[FakeConnection, None]:
        async with self._lock:
            snapshot = self.store.snapshot()
            try:
                yield FakeConnection()
            except BaseException:
                self.store.restore(snapshot)
                self.rollbacks += 1
                raise
            self.commits += 1

    @asynccontextmanager
    async def acquire(self) -> AsyncGenerator[FakeConnection, None]:
        yield FakeConnection()

    @asynccontextmanager
    async def connection(self, conn: Any = None) -> AsyncGenerator[Any, None]:
        yield conn if conn is not None else FakeConnection()


class FakeAccountRepository:
    def __init__(self, store: FakeStore) -> None:
        self.store = store

    async def get_by_email(self, email: str, conn: Any = None) -> Optional[AccountRecord]:
        await asyncio.sleep(0)
        for account in self.store.users.values():
            if account.email.lower() == email.lower():
                return account
        return None

    async def create(
        self,
        name: str,
        email: str,
        phone_number: str,
        password_hash: str,
        role: AccountRole = AccountRole.RIDER,
        conn: Any = None,
    ) -> AccountRecord:
        await asyncio.sleep(0)
        if any(a.email.lower() == email.lower() for a in self.store.users.values()):
            raise asyncpg.UniqueViolationError("duplicate key value violates unique constraint")
        now = _tick()
        account = AccountRecord(
            id=uuid4(),
            name=name,
            email=email,
            phone_number=phone_number,
            password=password_hash,
            role=role,
            created_at=now,
            updated_at=now,
        )
        self.store.users[account.id] = account
        return account


class FakeDriverRepository:
    def __init__(self, store: FakeStore) -> None:
        self.store = store

    async def get_by_id(self, driver_id: UUID, conn: Any = None, for_update: bool = False) -> Optional[DriverRecord]:
        await asyncio.sleep(0)
        return self.store.drivers.get(driver_id)

    async def get_by_email(self, email: str, conn: Any = None) -> Optional[DriverRecord]:
        await asyncio.sleep(0)
        for driver in self.store.drivers.values():
            if driver.email.lower() == email.lower():
                return driver
        return None

    async def create(
        self,
        name: str,
        email: str,
        phone_number: str,
        license_number: str,
        password_hash: str,
        conn: Any = None,
    ) -> DriverRecord:
        await asyncio.sleep(0)
        if any(d.email.lower() == email.lower() for d in self.store.drivers.values()):
            raise asyncpg.UniqueViolationError("duplicate key value violates unique constraint")
        now = _tick()
        driver = DriverRecord(
            id=uuid4(),
            name=name,
            email=email,
            phone_number=phone_number,
            license_number=license_number,
            password=password_hash,
            status=DriverStatus.OFFLINE,
            created_at=now,
            updated_at=now,
        )
        self.store.drivers[driver.id] = driver
        return driver

    async def update(self, driver_id: UUID, changes: dict, conn: Any = None) -> Optional[DriverRecord]:
        await asyncio.sleep(0)
        driver = self.store.drivers.get(driver_id)
        if driver is None:
            return None
        updated = driver.model_copy(update={**changes, "updated_at": _tick()})
        self.store.drivers[driver_id] = updated
        return updated

    async def transition_status(
        self,
        driver_id: UUID,
        expected: Iterable[DriverStatus],
        new_status: DriverStatus,
        conn: Any = None,
    ) -> Optional[DriverRecord]:
        await asyncio.sleep(0)
        driver = self.store.drivers.get(driver_id)
        if driver is None or driver.status not in list(expected):
            return None
        updated = driver.model_copy(update={"status": new_status, "updated_at": _tick()})
        self.store.drivers[driver_id] = updated
        return updated

    async def delete(self, driver_id: UUID, conn: Any = None) -> bool:
        await asyncio.sleep(0)
        if self.store.drivers.pop(driver_id, None) is None:
            return False
        for ride_id, ride in list(self.store.rides.items()):
            if ride.driver_id == driver_id:
                self.store.rides[ride_id] = ride.model_copy(update={"driver_id": None})
        return True

    async def list_all(self, status: Optional[DriverStatus] = None) -> list[DriverRecord]:
        await asyncio.sleep(0)
        drivers = [d for d in self.store.drivers.values() if status is None or d.status == status]
        return sorted(drivers, key=lambda d: d.created_at, reverse=True)

    async def count_by_status(self, status: DriverStatus) -> int:
        await asyncio.sleep(0)
        return sum(1 for d in self.store.drivers.values() if d.status == status)


class FakeRideRepository:
    def __init__(self, store: FakeStore) -> None:
        self.store = store

    async def create(
        self,
        rider_id: UUID,
        pickup_location: str,
        dropoff_location: str,
        fare: float,
        start_time: datetime,
        conn: Any = None,
    ) -> RideDTO:
        await asyncio.sleep(0)
        now = _tick()
        ride = RideDTO(
            id=uuid4(),
            rider_id=rider_id,
            driver_id=None,
            pickup_location=pickup_location,
            dropoff_location=dropoff_location,
            fare=float(Decimal(str(fare)).quantize(Decimal("0.01"))),
            status=RideStatus.REQUESTED,
            start_time=start_time,
            created_at=now,
            updated_at=now,
        )
        self.store.rides[ride.id] = ride
        return ride

    async def get_by_id(self, ride_id: UUID, conn: Any = None, for_update: bool = False) -> Optional[RideDTO]:
        await asyncio.sleep(0)
        return self.store.rides.get(ride_id)

    async def list_by_rider(self, rider_id: UUID) -> list[RideDTO]:
        await asyncio.sleep(0)
        rides = [r for r in self.store.rides.values() if r.rider_id == rider_id]
        return sorted(rides, key=lambda r: r.created_at, reverse=True)

    async def transition(
        self,
        ride_id: UUID,
        expected: Iterable[RideStatus],
        new_status: RideStatus,
        conn: Any = None,
        driver_id: Optional[UUID] = None,
        end_time: Optional[datetime] = None,
    ) -> Optional[RideDTO]:
        await asyncio.sleep(0)
        ride = self.store.rides.get(ride_id)
        if ride is None or ride.status not in list(expected):
            return None
        changes: dict[str, Any] = {"status": new_status, "updated_at": _tick()}
        if driver_id is not None:
            changes["driver_id"] = driver_id
        if end_time is not None:
            changes["end_time"] = end_time
        updated = ride.model_copy(update=changes)
        self.store.rides[ride_id] = updated
        return updated

    async def has_active_ride_for_driver(self, driver_id: UUID, conn: Any = None) -> bool:
        await asyncio.sleep(0)
        return any(
            r.driver_id == driver_id and r.status == RideStatus.IN_PROGRESS
            for r in self.store.rides.values()
        )


# =============================================================================
# SEED HELPERS
# =============================================================================

def add_rider(store: FakeStore, email: str = "rider@example.com", role: AccountRole = AccountRole.RIDER) -> AccountRecord:
    now = _tick()
    account = AccountRecord(
        id=uuid4(),
        name="Test Rider",
        email=email,
        phone_number="+15550000001",
        password="not-a-real-hash",
        role=role,
        created_at=now,
        updated_at=now,
    )
    store.users[account.id] = account
    return account


def add_driver(
    store: FakeStore,
    status: DriverStatus = DriverStatus.ONLINE,
    email: Optional[str] = None,
) -> DriverRecord:
    now = _tick()
    driver = DriverRecord(
        id=uuid4(),
        name="Test Driver",
        email=email or f"driver-{uuid4().hex[:8]}@example.com",
        phone_number="+15550000002",
        license_number="LIC-12345",
        password="not-a-real-hash",
        status=status,
        created_at=now,
        updated_at=now,
    )
    store.drivers[driver.id] = driver
    return driver


def add_ride(
    store: FakeStore,
    rider_id: UUID,
    status: RideStatus = RideStatus.REQUESTED,
    driver_id: Optional[UUID] = None,
) -> RideDTO:
    now = _tick()
    ride = RideDTO(
        id=uuid4(),
        rider_id=rider_id,
        driver_id=driver_id,
        pickup_location="Main Street 1",
        dropoff_location="Airport Road 9",
        fare=17.5,
        status=status,
        start_time=now,
        created_at=now,
        updated_at=now,
    )
    store.rides[ride.id] = ride
    return ride
