class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a referenced row does not exist."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class InvalidTransitionError(ValidationError):
    """Raised when a status change goes against its workflow."""


class NonWorkingDay(ValidationError):
    """Attendance date falls outside the user's working days."""


class FutureCheckOut(ValidationError):
    """Check-out timestamp is later than now."""


class CheckOutBeforeCheckIn(ValidationError):
    """Check-out timestamp precedes check-in."""
