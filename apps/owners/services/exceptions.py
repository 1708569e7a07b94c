"""Domain-specific exceptions for owner and dog services."""


class OwnersServiceError(Exception):
    """Base exception for owner services."""
    pass


class OwnerNotFoundError(OwnersServiceError):
    """Raised when an owner does not exist."""
    pass


class DogNotFoundError(OwnersServiceError):
    """Raised when a dog does not exist."""
    pass


class DuplicateOwnerError(OwnersServiceError):
    """Raised when a near-identical owner is already on file."""

    def __init__(self, message, existing=None):
        super().__init__(message)
        self.existing = existing
