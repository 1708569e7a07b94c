"""Domain-specific exceptions for accounts services."""


class AccountsServiceError(Exception):
    """Base exception for staff account services."""
    pass


class UserRegistrationError(AccountsServiceError):
    """Raised when the email is taken or the requested role is unknown."""
    pass


class InvalidCredentialsError(AccountsServiceError):
    """Raised when authentication credentials are invalid."""
    pass


class InactiveAccountError(AccountsServiceError):
    """Raised when account is deactivated, suspended or archived."""
    pass


class UserNotFoundError(AccountsServiceError):
    """Raised when user does not exist."""
    pass


class RoleChangeError(AccountsServiceError):
    """Raised when a role change would leave the business without an owner."""
    pass
