from ridebook.shared.models.enums import RideStatus


class RideStateMachine:
    ALLOWED_TRANSITIONS = {
        RideStatus.REQUESTED: [RideStatus.IN_PROGRESS, RideStatus.CANCELED],
        RideStatus.IN_PROGRESS: [RideStatus.COMPLETED, RideStatus.CANCELED],
        RideStatus.COMPLETED: [],
        RideStatus.CANCELED: [],
    }

    @staticmethod
    def can_transition(current_status: str, new_status: str) -> bool:
        try:
            curr = RideStatus(current_status)
            new = RideStatus(new_status)
            return new in RideStateMachine.ALLOWED_TRANSITIONS.get(curr, [])
        except ValueError:
            return False

