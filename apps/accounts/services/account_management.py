"""Account state and badge management."""

from django.db import transaction
from django.contrib.auth import get_user_model
from uuid import UUID

from apps.audit.buffer import record_on_commit
from ..models import UserBadge, UserRole
from .exceptions import RoleChangeError, UserNotFoundError

User = get_user_model()


def _locked_user(user_id: UUID) -> User:
    try:
        return User.objects.select_for_update().get(id=user_id)
    except User.DoesNotExist:
        raise UserNotFoundError("User not found")


@transaction.atomic
def enable_user(*, user_id: UUID, by=None) -> User:
    """Reactivate an account and lift suspension/archival."""
    user = _locked_user(user_id)
    user.is_active = True
    user.is_suspended = False
    user.is_archived = False
    user.remove_token(UserBadge.SUSPENDED)
    user.remove_token(UserBadge.ARCHIVED)
    user.save(update_fields=['is_active', 'is_suspended', 'is_archived', 'badge_tokens'])
    record_on_commit('user', 'enabled', actor=by, user=user.email)
    return user


@transaction.atomic
def disable_user(*, user_id: UUID, by=None) -> User:
    """Deactivate an account. Deactivated users cannot log in."""
    user = _locked_user(user_id)
    user.is_active = False
    user.save(update_fields=['is_active'])
    record_on_commit('user', 'disabled', actor=by, escalate=True, user=user.email)
    return user


@transaction.atomic
def suspend_user(*, user_id: UUID, by=None, reason: str = '') -> User:
    user = _locked_user(user_id)
    user.is_suspended = True
    user.add_token(UserBadge.SUSPENDED)
    user.save(update_fields=['is_suspended', 'badge_tokens'])
    record_on_commit('user', 'suspended', actor=by, escalate=True, user=user.email, reason=reason)
    return user


@transaction.atomic
def archive_user(*, user_id: UUID, by=None) -> User:
    user = _locked_user(user_id)
    user.is_archived = True
    user.add_token(UserBadge.ARCHIVED)
    user.save(update_fields=['is_archived', 'badge_tokens'])
    record_on_commit('user', 'archived', actor=by, user=user.email)
    return user


@transaction.atomic
def add_user_badge(*, user_id: UUID, badge: str, by=None) -> User:
    """
    Add a badge to a user. Adding a badge twice is a no-op.

    Raises:
        UserNotFoundError: If the user does not exist
        InvalidInputError: If the badge is unknown
    """
    user = _locked_user(user_id)
    if user.add_token(badge):
        user.save(update_fields=['badge_tokens'])
        record_on_commit('user', 'badge_added', actor=by, user=user.email, badge=str(badge))
    return user


@transaction.atomic
def remove_user_badge(*, user_id: UUID, badge: str, by=None) -> User:
    user = _locked_user(user_id)
    if user.remove_token(badge):
        user.save(update_fields=['badge_tokens'])
        record_on_commit('user', 'badge_removed', actor=by, user=user.email, badge=str(badge))
    return user


@transaction.atomic
def change_user_role(*, user_id: UUID, role: str, by=None) -> User:
    """
    Change a user's role.

    Raises:
        UserNotFoundError: If the user does not exist
        RoleChangeError: If the role is unknown or the user is the last
            active owner and would be demoted
    """
    user = _locked_user(user_id)
    if role not in UserRole.values:
        raise RoleChangeError(f"Unknown role '{role}'")
    if user.role == UserRole.OWNER and role != UserRole.OWNER:
        other_owners = User.objects.filter(role=UserRole.OWNER, is_active=True).exclude(id=user.id)
        if not other_owners.exists():
            raise RoleChangeError("Cannot demote the last active owner")

    previous = user.role
    if previous != role:
        user.role = role
        user.save(update_fields=['role'])
        record_on_commit('user', 'role_changed', actor=by, user=user.email, previous=previous, role=role)
    return user
