"""User authentication service."""

from django.db import transaction
from django.contrib.auth import get_user_model
from django.utils import timezone

from apps.audit.buffer import get_audit_log, record_on_commit
from .exceptions import InvalidCredentialsError, InactiveAccountError

User = get_user_model()


def next_login_streak(previous_login, now, streak: int) -> int:
    """
    Compute the consecutive-day login streak.

    Logging in again on the same day keeps the streak, logging in on the
    following day extends it, anything else restarts it at 1.
    """
    if previous_login is None:
        return 1
    days = (timezone.localdate(now) - timezone.localdate(previous_login)).days
    if days == 0:
        return max(streak, 1)
    if days == 1:
        return streak + 1
    return 1


@transaction.atomic
def authenticate_user(*, email: str, password: str) -> User:
    """
    Authenticate user with email and password.

    Uses select_for_update() to prevent race conditions when updating
    last_login and the login streak.

    Args:
        email: User's email
        password: User's password

    Returns:
        Authenticated User instance

    Raises:
        InvalidCredentialsError: If credentials are invalid
        InactiveAccountError: If account is deactivated, suspended or archived
    """
    try:
        user = (
            User.objects
            .select_for_update()
            .get(email=User.objects.normalize_email(email))
        )
    except User.DoesNotExist:
        raise InvalidCredentialsError("Invalid email or password")

    if not user.check_password(password):
        get_audit_log('user').record('login_failed', actor=email)
        raise InvalidCredentialsError("Invalid email or password")

    if not user.is_enabled:
        raise InactiveAccountError("Account is deactivated")

    now = timezone.now()
    user.login_streak = next_login_streak(user.last_login, now, user.login_streak)
    user.last_login = now
    user.save(update_fields=['last_login', 'login_streak'])

    record_on_commit('user', 'login', actor=user.email, streak=user.login_streak)
    return user
