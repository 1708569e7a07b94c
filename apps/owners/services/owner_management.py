"""Owner management service."""

import logging
from typing import Optional
from uuid import UUID

from django.db import transaction
from django.db.models import Q, QuerySet

from ..models import DogOwner, OwnerBadge
from .exceptions import OwnerNotFoundError, DuplicateOwnerError
from .owner_deduplication import find_potential_duplicates, HIGH_SIMILARITY_THRESHOLD

logger = logging.getLogger(__name__)

EDITABLE_OWNER_FIELDS = (
    'owner_name',
    'email',
    'phone',
    'address',
    'emergency_contact',
    'notes',
    'preferred_contact',
    'preferred_language',
)


def _actor_label(user) -> str:
    return user.email if user is not None else 'system'


def get_owner_by_id(*, owner_id: UUID, for_update: bool = False) -> DogOwner:
    """
    Retrieve an owner by ID.

    With ``for_update`` the row stays locked until the surrounding
    transaction ends.

    Raises:
        OwnerNotFoundError: If owner doesn't exist
    """
    queryset = DogOwner.objects.select_for_update() if for_update else DogOwner.objects.all()
    try:
        return queryset.get(id=owner_id)
    except DogOwner.DoesNotExist:
        raise OwnerNotFoundError("Owner not found")


@transaction.atomic
def create_owner(*, owner_name: str, created_by=None, allow_duplicate: bool = False, **fields) -> DogOwner:
    """
    Register a new client.

    New owners get the ``new_client`` badge and an audit line.

    Args:
        owner_name: Client's full name
        created_by: User creating the record
        allow_duplicate: Skip the duplicate check
        **fields: Any of the editable owner fields

    Returns:
        Created DogOwner instance

    Raises:
        DuplicateOwnerError: If an owner with a near-identical name and the
            same phone or email already exists
    """
    if not allow_duplicate:
        matches = find_potential_duplicates(
            owner_name=owner_name,
            phone=fields.get('phone', ''),
            email=fields.get('email', ''),
            threshold=HIGH_SIMILARITY_THRESHOLD,
        )
        if matches:
            existing, score, match_type = matches[0]
            raise DuplicateOwnerError(
                f"Owner '{existing.display_name}' already exists ({match_type} match, {score}% name similarity)",
                existing=existing,
            )

    owner = DogOwner(
        owner_name=owner_name,
        last_modified_by=created_by,
        badge_tokens=[OwnerBadge.NEW_CLIENT.value],
        **{k: v for k, v in fields.items() if k in EDITABLE_OWNER_FIELDS},
    )
    owner.add_audit_entry(f"Created by {_actor_label(created_by)}")
    owner.save()
    logger.info("Created owner %s", owner.id)
    return owner


@transaction.atomic
def update_owner(*, owner_id: UUID, updated_by=None, **changes) -> DogOwner:
    """Apply field changes and note them in the owner's audit trail."""
    owner = get_owner_by_id(owner_id=owner_id, for_update=True)
    changed = []
    for field, value in changes.items():
        if field in EDITABLE_OWNER_FIELDS and getattr(owner, field) != value:
            setattr(owner, field, value)
            changed.append(field)

    if changed:
        owner.last_modified_by = updated_by
        owner.add_audit_entry(f"Updated {', '.join(sorted(changed))} by {_actor_label(updated_by)}")
        owner.save()
    return owner


@transaction.atomic
def deactivate_owner(*, owner_id: UUID, updated_by=None) -> DogOwner:
    owner = get_owner_by_id(owner_id=owner_id, for_update=True)
    owner.is_active = False
    owner.last_modified_by = updated_by
    owner.add_audit_entry(f"Deactivated by {_actor_label(updated_by)}")
    owner.save()
    return owner


@transaction.atomic
def add_owner_badge(*, owner_id: UUID, badge: str, updated_by=None) -> DogOwner:
    """
    Add a badge. Adding an existing badge is a no-op.

    Raises:
        OwnerNotFoundError: If owner doesn't exist
        InvalidInputError: If the badge is unknown
    """
    owner = get_owner_by_id(owner_id=owner_id, for_update=True)
    if owner.add_token(badge):
        owner.add_audit_entry(f"Badge added: {badge}")
        owner.save()
    return owner


@transaction.atomic
def remove_owner_badge(*, owner_id: UUID, badge: str, updated_by=None) -> DogOwner:
    owner = get_owner_by_id(owner_id=owner_id, for_update=True)
    if owner.remove_token(badge):
        owner.add_audit_entry(f"Badge removed: {badge}")
        owner.save()
    return owner


def search_owners(*, search: str = '', is_active: Optional[bool] = None) -> QuerySet[DogOwner]:
    """
    Search owners by name, email, phone or dog name.

    Args:
        search: Case-insensitive search term
        is_active: Filter by active flag

    Returns:
        QuerySet of matching owners ordered by name
    """
    queryset = DogOwner.objects.all()

    if search:
        queryset = queryset.filter(
            Q(owner_name__icontains=search) |
            Q(email__icontains=search) |
            Q(phone__icontains=search) |
            Q(dogs__name__icontains=search)
        ).distinct()

    if is_active is not None:
        queryset = queryset.filter(is_active=is_active)

    return queryset.order_by('owner_name')
