class BookingError(RuntimeError):
    """Base class for booking workflow failures."""
    pass


class ValidationError(BookingError):
    """Raised when a request field is missing or malformed."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field
        self.message = message


class SlotConflictError(BookingError):
    """Raised when the requested date and time are already taken."""

    def __init__(self, message: str = "That time slot is already booked.") -> None:
        super().__init__(message)
        self.message = message


class Unauthorized(BookingError):
    """Raised when an admin credential is missing, wrong, or no secret is configured."""
    pass


class NotFoundError(BookingError):
    """Raised when an operation targets a booking id that does not exist."""
    pass


class NotificationError(BookingError):
    """Raised when the confirmation email could not be delivered."""
    pass


class StoreError(BookingError):
    """Raised when the record store fails (I/O, network, corrupt data)."""
    pass
