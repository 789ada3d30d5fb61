from enum import Enum


class RideStatus(str, Enum):
    """Ride lifecycle statuses."""
    REQUESTED = "requested"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELED = "canceled"

    def __str__(self) -> str:
        return self.value


class DriverStatus(str, Enum):
    """Driver availability."""
    ONLINE = "online"
    OFFLINE = "offline"
    BUSY = "busy"

    def __str__(self) -> str:
        return self.value


class AccountRole(str, Enum):
    """Roles stored on rider/admin accounts."""
    RIDER = "rider"
    ADMIN = "admin"

    def __str__(self) -> str:
        return self.value


class AuthRole(str, Enum):
    """Roles carried by bearer tokens."""
    RIDER = "rider"
    DRIVER = "driver"
    ADMIN = "admin"

    def __str__(self) -> str:
        return self.value
