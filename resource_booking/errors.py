class BookingError(ValueError):
    """Base class for recoverable booking failures."""


class ResourceNotFoundError(BookingError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Resource not found: {name}")
        self.name = name


class DuplicateResourceError(BookingError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Resource already exists: {name}")
        self.name = name


class CapacityExceededError(BookingError):
    def __init__(self, resource: str, capacity: int, requested: int) -> None:
        super().__init__(f"{resource}: {requested} attendees exceed capacity ({capacity})")
        self.resource = resource
        self.capacity = capacity
        self.requested = requested


class ConflictDetectedError(BookingError):
    def __init__(self, resource: str, conflicting_label: str, conflicting_id: str) -> None:
        super().__init__(f"{resource}: booking conflicts with {conflicting_label!r}")
        self.resource = resource
        self.conflicting_label = conflicting_label
        self.conflicting_id = conflicting_id


class ReservationNotFoundError(BookingError):
    def __init__(self, resource: str, reservation_id: str) -> None:
        super().__init__(f"{resource}: no active reservation {reservation_id}")
        self.resource = resource
        self.reservation_id = reservation_id
