"""User registration service."""

import logging

from django.db import transaction, IntegrityError
from django.contrib.auth import get_user_model

from apps.audit.buffer import record_on_commit
from ..models import UserBadge, UserRole
from .exceptions import UserRegistrationError

User = get_user_model()
logger = logging.getLogger(__name__)


@transaction.atomic
def register_user(
    *,
    email: str,
    password: str,
    display_name: str = "",
    role: str = UserRole.STAFF,
) -> User:
    """
    Register a new staff account.

    New accounts start with the onboarding badge.

    Args:
        email: User's email address
        password: User's password (will be hashed)
        display_name: Optional display name
        role: Business role, defaults to staff

    Returns:
        Created User instance

    Raises:
        UserRegistrationError: If the email is taken or the role is unknown
    """
    if role not in UserRole.values:
        raise UserRegistrationError(f"Unknown role '{role}'")

    try:
        user = User.objects.create_user(
            email=email,
            password=password,
            display_name=display_name,
            role=role,
            badge_tokens=[UserBadge.ONBOARDING.value],
        )
    except IntegrityError:
        raise UserRegistrationError(f"Registration failed: {email} is already registered")

    record_on_commit('user', 'registered', actor=user.email, role=role)
    logger.info("Registered user %s (%s)", user.email, role)
    return user
