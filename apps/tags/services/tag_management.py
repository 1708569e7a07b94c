"""Tag catalogue management with an audit trail of every operation."""

from typing import Optional
from uuid import UUID

from django.db import transaction
from django.db.models import QuerySet

from apps.audit.buffer import record_on_commit, should_escalate
from ..models import Tag, TagType, DEFAULT_TAG_COLOR
from .exceptions import TagNotFoundError, DuplicateTagError


def record_tag_event(
    operation: str,
    tag: Tag,
    *,
    actor: Optional[str] = None,
    detail: Optional[str] = None,
    force_escalate: bool = False,
):
    """
    Record a tag operation ('create', 'edit', 'use', 'delete') in the tag log.

    Operations mentioning danger, critical or delete are escalated. The entry
    is written once the surrounding transaction commits.
    """
    record_on_commit(
        'tag',
        operation,
        actor=actor,
        escalate=should_escalate(operation, force_escalate),
        detail=detail,
        tags=[operation, tag.tag_type],
        **tag.to_audit_payload(),
    )


def _ensure_label_available(label: str, exclude_id: Optional[UUID] = None) -> None:
    queryset = Tag.objects.filter(label__iexact=label)
    if exclude_id is not None:
        queryset = queryset.exclude(id=exclude_id)
    if queryset.exists():
        raise DuplicateTagError(f"Tag '{label}' already exists")


@transaction.atomic
def create_tag(
    *,
    label: str,
    tag_type: str = TagType.CUSTOM,
    color: str = DEFAULT_TAG_COLOR,
    icon_name: str = '',
    actor: Optional[str] = None,
) -> Tag:
    """
    Create a new business tag.

    Args:
        label: Tag label, unique ignoring case
        tag_type: One of TagType
        color: Hex color string
        icon_name: Optional icon; defaults to the type's icon when blank
        actor: Who created the tag

    Returns:
        Created Tag instance

    Raises:
        DuplicateTagError: If a tag with this label already exists
    """
    label = label.strip()
    _ensure_label_available(label)
    tag = Tag.objects.create(label=label, tag_type=tag_type, color=color, icon_name=icon_name)
    record_tag_event('create', tag, actor=actor)
    return tag


def get_tag_by_id(*, tag_id: UUID) -> Tag:
    """
    Retrieve a tag by ID.

    Raises:
        TagNotFoundError: If tag doesn't exist
    """
    try:
        return Tag.objects.get(id=tag_id)
    except Tag.DoesNotExist:
        raise TagNotFoundError("Tag not found")


@transaction.atomic
def edit_tag(
    *,
    tag_id: UUID,
    label: Optional[str] = None,
    tag_type: Optional[str] = None,
    color: Optional[str] = None,
    icon_name: Optional[str] = None,
    actor: Optional[str] = None,
) -> Tag:
    """Update the given fields of a tag; omitted fields keep their values."""
    tag = get_tag_by_id(tag_id=tag_id)
    changed = []

    if label is not None and label.strip() != tag.label:
        _ensure_label_available(label.strip(), exclude_id=tag.id)
        tag.label = label.strip()
        changed.append('label')
    for field, value in (('tag_type', tag_type), ('color', color), ('icon_name', icon_name)):
        if value is not None and value != getattr(tag, field):
            setattr(tag, field, value)
            changed.append(field)

    if changed:
        tag.save(update_fields=changed + ['updated_at'])
        record_tag_event('edit', tag, actor=actor, detail=', '.join(changed))
    return tag


@transaction.atomic
def delete_tag(*, tag_id: UUID, actor: Optional[str] = None) -> None:
    tag = get_tag_by_id(tag_id=tag_id)
    record_tag_event('delete', tag, actor=actor)
    tag.delete()


@transaction.atomic
def apply_tag(*, tag_id: UUID, owner_id: UUID, actor: Optional[str] = None) -> Tag:
    """
    Attach a tag to a dog owner and record the use.

    Raises:
        TagNotFoundError: If tag doesn't exist
        DogOwner.DoesNotExist: If owner doesn't exist
    """
    from apps.owners.models import DogOwner

    tag = get_tag_by_id(tag_id=tag_id)
    owner = DogOwner.objects.get(id=owner_id)
    owner.tags.add(tag)
    record_tag_event('use', tag, actor=actor, detail=f"owner:{owner.id}")
    return tag


def search_tags(*, search: str = '', tag_type: str = '') -> QuerySet[Tag]:
    """
    Search tags by label or type.

    Args:
        search: Case-insensitive substring of the label
        tag_type: Filter by TagType

    Returns:
        QuerySet of matching Tag instances ordered by label
    """
    queryset = Tag.objects.all()

    if search:
        queryset = queryset.filter(label__icontains=search)

    if tag_type:
        queryset = queryset.filter(tag_type=tag_type)

    return queryset.order_by('label')
