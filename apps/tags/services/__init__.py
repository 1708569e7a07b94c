"""Tag services - catalogue management and tag audit."""

from .tag_management import (
    create_tag,
    get_tag_by_id,
    edit_tag,
    delete_tag,
    apply_tag,
    search_tags,
    record_tag_event,
)
from .exceptions import (
    TagsServiceError,
    TagNotFoundError,
    DuplicateTagError,
)

__all__ = [
    'create_tag',
    'get_tag_by_id',
    'edit_tag',
    'delete_tag',
    'apply_tag',
    'search_tags',
    'record_tag_event',
    'TagsServiceError',
    'TagNotFoundError',
    'DuplicateTagError',
]
