"""Domain-specific exceptions for billing services."""


class BillingServiceError(Exception):
    """Base exception for billing services."""
    pass


class ChargeNotFoundError(BillingServiceError):
    """Raised when a charge does not exist."""
    pass


class ChargeAlreadyPaidError(BillingServiceError):
    """Raised when paying a charge twice."""
    pass


class InvalidPaymentMethodError(BillingServiceError):
    """Raised when marking a charge paid with no real payment method."""
    pass
