class BookingError(RuntimeError):
    """Base class for booking flow failures surfaced to callers."""
    pass


class InvalidSelectionError(BookingError):
    """Raised when a date/slot selection is not part of the generated calendar or not open."""
    pass


class BookingInProgressError(BookingError):
    """Raised when a command arrives while a submission is still in flight."""
    pass


class BookingSubmissionError(BookingError):
    """Raised when the booking backend rejects or fails to store a booking."""
    pass


class SubmissionTimeoutError(BookingSubmissionError):
    """Raised when the booking backend does not answer within the configured timeout."""
    pass


class AvailabilityPolicyError(RuntimeError):
    """Raised when the injected availability policy misbehaves (configuration error)."""
    pass


class SessionNotFoundError(KeyError):
    """Raised when a booking session id is unknown to the session store."""
    pass
