"""Domain-specific exceptions for appointment services."""


class AppointmentsServiceError(Exception):
    """Base exception for appointment services."""
    pass


class AppointmentNotFoundError(AppointmentsServiceError):
    """Raised when an appointment does not exist."""
    pass


class AppointmentConflictError(AppointmentsServiceError):
    """Raised when a dog already has an active appointment in the slot."""

    def __init__(self, message, conflicting=None):
        super().__init__(message)
        self.conflicting = conflicting


class InvalidStatusTransitionError(AppointmentsServiceError):
    """Raised when changing the status of a finished appointment."""
    pass


class DogOwnerMismatchError(AppointmentsServiceError):
    """Raised when the dog does not belong to the given owner."""
    pass


class SessionNotFoundError(AppointmentsServiceError):
    """Raised when a grooming session does not exist."""
    pass
