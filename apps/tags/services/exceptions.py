"""Domain-specific exceptions for tag services."""


class TagsServiceError(Exception):
    """Base exception for tag services."""
    pass


class TagNotFoundError(TagsServiceError):
    """Raised when a tag does not exist."""
    pass


class DuplicateTagError(TagsServiceError):
    """Raised when a tag label is already taken (case-insensitive)."""
    pass
