"""Domain-specific exceptions for loyalty services."""


class LoyaltyServiceError(Exception):
    """Base exception for loyalty services."""
    pass


class RewardPoolNotFoundError(LoyaltyServiceError):
    """Raised when a reward pool does not exist."""
    pass


class InsufficientPointsError(LoyaltyServiceError):
    """Raised when a redemption or allocation needs more points than available."""
    pass
