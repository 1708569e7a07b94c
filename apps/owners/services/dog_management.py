"""Dog management service."""

from uuid import UUID

from django.db import transaction

from ..models import Dog
from .exceptions import DogNotFoundError
from .owner_management import get_owner_by_id

EDITABLE_DOG_FIELDS = ('name', 'breed', 'birthdate', 'color', 'gender', 'notes', 'is_active')


def get_dog_by_id(*, dog_id: UUID, for_update: bool = False) -> Dog:
    queryset = Dog.objects.select_for_update() if for_update else Dog.objects.select_related('owner')
    try:
        return queryset.get(id=dog_id)
    except Dog.DoesNotExist:
        raise DogNotFoundError("Dog not found")


@transaction.atomic
def add_dog(*, owner_id: UUID, name: str, created_by=None, **fields) -> Dog:
    """
    Add a dog to an owner.

    A second dog earns the owner the ``multi_pet`` badge.

    Raises:
        OwnerNotFoundError: If owner doesn't exist
    """
    owner = get_owner_by_id(owner_id=owner_id, for_update=True)
    dog = Dog.objects.create(
        owner=owner,
        name=name,
        last_modified_by=created_by,
        **{k: v for k, v in fields.items() if k in EDITABLE_DOG_FIELDS},
    )

    owner.add_audit_entry(f"Dog added: {dog.name}")
    if owner.dogs.count() > 1:
        owner.add_token('multi_pet')
    owner.save()
    return dog


@transaction.atomic
def update_dog(*, dog_id: UUID, updated_by=None, **changes) -> Dog:
    dog = get_dog_by_id(dog_id=dog_id, for_update=True)
    changed = [f for f, v in changes.items() if f in EDITABLE_DOG_FIELDS and getattr(dog, f) != v]
    for field in changed:
        setattr(dog, field, changes[field])
    if changed:
        dog.last_modified_by = updated_by
        dog.save()
    return dog


@transaction.atomic
def add_dog_tag(*, dog_id: UUID, tag: str, updated_by=None) -> Dog:
    """
    Add a business tag to a dog. Duplicate tags are ignored.

    Raises:
        DogNotFoundError: If dog doesn't exist
        InvalidInputError: If the tag is unknown
    """
    dog = get_dog_by_id(dog_id=dog_id, for_update=True)
    if dog.add_token(tag):
        dog.last_modified_by = updated_by
        dog.save(update_fields=['tags', 'last_modified_by', 'last_modified'])
    return dog


@transaction.atomic
def remove_dog_tag(*, dog_id: UUID, tag: str, updated_by=None) -> Dog:
    dog = get_dog_by_id(dog_id=dog_id, for_update=True)
    if dog.remove_token(tag):
        dog.last_modified_by = updated_by
        dog.save(update_fields=['tags', 'last_modified_by', 'last_modified'])
    return dog
