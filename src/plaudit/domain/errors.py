"""Domain-layer error definitions.

Every error here is detected before anything is written and carries a short,
user-safe message. None of them are retried.
"""

# ============================================================================
#                           General domain errors
# ============================================================================


class DomainError(Exception):
    """Base class for domain-layer errors."""


class ValidationError(DomainError):
    """Raised when a request fails structural or range checks."""


class NotFoundError(DomainError):
    """Raised when a referenced entity does not exist."""


class AuthorizationError(DomainError):
    """Raised when the requester may not act on the referenced entity."""


class StateConflictError(DomainError):
    """Raised when an entity is in the wrong state for the attempted action."""


class DuplicateError(DomainError):
    """Raised when an action that may happen only once is attempted again."""


# ============================================================================
#                        Review submission errors
# ============================================================================


class BookingNotFoundError(NotFoundError):
    """Raised when the booking to review does not exist."""

    def __init__(self, booking_id: str) -> None:
        super().__init__("booking not found")
        self.booking_id = booking_id


class TutorProfileNotFoundError(NotFoundError):
    """Raised when a tutor profile does not exist."""

    def __init__(self, tutor_profile_id: str) -> None:
        super().__init__("tutor profile not found")
        self.tutor_profile_id = tutor_profile_id


class NotBookingStudentError(AuthorizationError):
    """Raised when someone other than the booking's student submits a review."""

    def __init__(self, booking_id: str, requester_id: str) -> None:
        super().__init__("only the student can review this booking")
        self.booking_id = booking_id
        self.requester_id = requester_id


class BookingNotCompletedError(StateConflictError):
    """Raised when reviewing a booking that has not been completed."""

    def __init__(self, booking_id: str, status: str) -> None:
        super().__init__("can only review completed bookings")
        self.booking_id = booking_id
        self.status = status


class AlreadyReviewedError(DuplicateError):
    """Raised when a booking already carries a review."""

    def __init__(self, booking_id: str) -> None:
        super().__init__("already reviewed")
        self.booking_id = booking_id
