"""
Owner services - Business logic layer.

This package contains all business operations for the owners app:
- Owner CRUD, badges and search
- Duplicate detection
- Dog CRUD and business tags
"""

from .owner_management import (
    get_owner_by_id,
    create_owner,
    update_owner,
    deactivate_owner,
    add_owner_badge,
    remove_owner_badge,
    search_owners,
)
from .owner_deduplication import find_potential_duplicates
from .dog_management import (
    get_dog_by_id,
    add_dog,
    update_dog,
    add_dog_tag,
    remove_dog_tag,
)
from .exceptions import (
    OwnersServiceError,
    OwnerNotFoundError,
    DogNotFoundError,
    DuplicateOwnerError,
)

__all__ = [
    # Owner services
    'get_owner_by_id',
    'create_owner',
    'update_owner',
    'deactivate_owner',
    'add_owner_badge',
    'remove_owner_badge',
    'search_owners',
    'find_potential_duplicates',
    # Dog services
    'get_dog_by_id',
    'add_dog',
    'update_dog',
    'add_dog_tag',
    'remove_dog_tag',
    # Exceptions
    'OwnersServiceError',
    'OwnerNotFoundError',
    'DogNotFoundError',
    'DuplicateOwnerError',
]
