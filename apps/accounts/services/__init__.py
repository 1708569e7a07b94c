"""Services for accounts business logic."""

from .exceptions import (
    AccountsServiceError,
    UserRegistrationError,
    InvalidCredentialsError,
    InactiveAccountError,
    UserNotFoundError,
    RoleChangeError,
)
from .user_registration import register_user
from .user_authentication import authenticate_user, next_login_streak
from .account_management import (
    enable_user,
    disable_user,
    suspend_user,
    archive_user,
    add_user_badge,
    remove_user_badge,
    change_user_role,
)

__all__ = [
    # Exceptions
    'AccountsServiceError',
    'UserRegistrationError',
    'InvalidCredentialsError',
    'InactiveAccountError',
    'UserNotFoundError',
    'RoleChangeError',
    # Services
    'register_user',
    'authenticate_user',
    'next_login_streak',
    'enable_user',
    'disable_user',
    'suspend_user',
    'archive_user',
    'add_user_badge',
    'remove_user_badge',
    'change_user_role',
]
