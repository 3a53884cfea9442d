class PackageNotFoundError(LookupError):
    pass


class AddonNotFoundError(LookupError):
    pass


class BookingNotFoundError(LookupError):
    pass


class ResourceUnavailableError(ValueError):
    def __init__(self, conflict_booking_id: int) -> None:
        super().__init__("Resource is unavailable for this time slot.")
        self.conflict_booking_id = conflict_booking_id


class InvalidStatusTransitionError(ValueError):
    def __init__(self, current: str, target: str) -> None:
        super().__init__(f"Cannot move booking from {current} to {target}.")
        self.current = current
        self.target = target
