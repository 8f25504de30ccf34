class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when credentials or bearer tokens are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class ProfileNotLinkedError(DomainError):
    """Raised when a user account has no linked employee profile."""

    def __init__(self, message: str = "Employee profile not linked to this user"):
        super().__init__(message)


class NotFoundError(DomainError):
    """Raised when a referenced entity does not exist."""


class ConflictError(DomainError):
    """Raised when an operation conflicts with the current state."""


class DuplicateAttendanceError(ConflictError):
    def __init__(self, message: str = "Duplicate attendance for this date"):
        super().__init__(message)


class InvalidTransitionError(ConflictError):
    """Raised for a leave status change the workflow does not allow."""

    def __init__(self, current, target):
        self.current = current
        self.target = target
        super().__init__(f"Invalid transition from {getattr(current, 'value', current)}")
