"""
Centralized application errors for Furfolio.

Every failure that reaches an API client is expressed as one of the
``AppError`` subclasses below. Each carries an optional reason, a
user-facing description, an optional recovery suggestion and a static
``is_recoverable`` flag. Errors are constructed at the failure site and
rendered by ``apps.core.handlers.app_exception_handler``; nothing retries.

Exception Hierarchy:
    AppError (base, DRF APIException)
    ├── DataLoadFailedError
    ├── SaveFailedError
    ├── InvalidInputError
    ├── DuplicateEntryError
    ├── NetworkUnavailableError
    ├── PermissionDeniedError
    ├── UnauthorizedAccessError
    ├── RouteOptimizationError
    ├── DataEncryptionFailedError
    └── UnknownAppError

Usage:
    from apps.core.exceptions import InvalidInputError

    if points < 0:
        raise InvalidInputError("Points must be zero or more")
"""

import logging
import uuid

from rest_framework import status
from rest_framework.exceptions import APIException

logger = logging.getLogger(__name__)


class AppError(APIException):
    """
    Base class for all user-presentable Furfolio errors.

    Subclasses set ``description`` and optionally ``recovery_suggestion``
    and ``is_recoverable``. The reason (if any) is appended to the
    description on a new line, except for the subclasses that format it
    inline (permission type, role).
    """

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_code = 'unknown'
    description = 'An unexpected error occurred.'
    recovery_suggestion = None
    is_recoverable = False

    def __init__(self, reason=None):
        self.reason = reason
        self.error_id = f"{self.default_code}-{uuid.uuid4()}"
        super().__init__(detail=self.error_description, code=self.default_code)

    @property
    def error_description(self) -> str:
        if self.reason:
            return f"{self.description}\n{self.reason}"
        return self.description

    def to_dict(self) -> dict:
        return {
            'id': self.error_id,
            'code': self.default_code,
            'description': self.error_description,
            'reason': self.reason,
            'recovery_suggestion': self.recovery_suggestion,
            'is_recoverable': self.is_recoverable,
        }

    @classmethod
    def from_exception(cls, exc: Exception) -> 'AppError':
        """
        Convert any exception into an AppError.

        AppError instances are returned unchanged; anything else is wrapped
        in ``UnknownAppError``.
        """
        if isinstance(exc, AppError):
            logger.debug("AppError passed through: %s", exc.error_id)
            return exc
        logger.warning("Wrapping unexpected error: %r", exc)
        return UnknownAppError(error=exc)

    def __str__(self):
        return self.error_description


class DataLoadFailedError(AppError):
    """Loading data failed."""
    default_code = 'data_load_failed'
    description = 'Failed to load data.'


class SaveFailedError(AppError):
    """Persisting changes failed."""
    default_code = 'save_failed'
    description = 'Could not save your changes.'


class InvalidInputError(AppError):
    """User input did not pass validation."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_code = 'invalid_input'
    description = 'Invalid input.'
    recovery_suggestion = 'Please review the highlighted fields.'
    is_recoverable = True


class DuplicateEntryError(AppError):
    """An equivalent record already exists."""
    status_code = status.HTTP_409_CONFLICT
    default_code = 'duplicate_entry'
    description = 'This item already exists.'

    @property
    def error_description(self) -> str:
        return self.description


class NetworkUnavailableError(AppError):
    """An upstream service could not be reached."""
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_code = 'network_unavailable'
    description = 'No internet connection. Please try again later.'
    recovery_suggestion = 'Check your internet connection and try again.'
    is_recoverable = True

    @property
    def error_description(self) -> str:
        return self.description


class PermissionDeniedError(AppError):
    """A permission required for the operation is missing. Reason is the permission type."""
    status_code = status.HTTP_403_FORBIDDEN
    default_code = 'permission_denied'
    description = 'Permission denied.'
    recovery_suggestion = 'Please update your app permissions in Settings.'
    is_recoverable = True

    @property
    def error_description(self) -> str:
        if self.reason:
            return f"{self.description} ({self.reason})"
        return self.description


class UnauthorizedAccessError(AppError):
    """The caller's role may not perform the operation. Reason is the role."""
    status_code = status.HTTP_403_FORBIDDEN
    default_code = 'unauthorized_access'
    description = 'Unauthorized access.'
    is_recoverable = True

    @property
    def error_description(self) -> str:
        if self.reason:
            return f"{self.description} (Role: {self.reason})"
        return self.description


class RouteOptimizationError(AppError):
    """Route optimization failed. Reserved; no optimizer ships with Furfolio."""
    default_code = 'route_optimization_failed'
    description = 'Route optimization failed.'


class DataEncryptionFailedError(AppError):
    """Encrypting or decrypting data failed."""
    default_code = 'data_encryption_failed'
    description = 'Data encryption failed.'


class UnknownAppError(AppError):
    """Wraps an unexpected underlying exception."""
    default_code = 'unknown'

    def __init__(self, error: Exception = None):
        self.error = error
        super().__init__(reason=str(error) if error is not None else None)

    @property
    def error_description(self) -> str:
        if self.error is not None:
            return f"An unexpected error occurred: {self.error}"
        return self.description


ALL_APP_ERRORS = (
    DataLoadFailedError,
    SaveFailedError,
    InvalidInputError,
    DuplicateEntryError,
    NetworkUnavailableError,
    PermissionDeniedError,
    UnauthorizedAccessError,
    RouteOptimizationError,
    DataEncryptionFailedError,
    UnknownAppError,
)
