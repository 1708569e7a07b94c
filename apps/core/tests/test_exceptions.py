import pytest
from rest_framework import status

from apps.core.exceptions import (
    AppError,
    ALL_APP_ERRORS,
    DataLoadFailedError,
    DuplicateEntryError,
    InvalidInputError,
    NetworkUnavailableError,
    PermissionDeniedError,
    UnauthorizedAccessError,
    UnknownAppError,
)
from apps.core.tokens import TokenListMixin, normalize_token, dedupe
from apps.owners.models import OwnerBadge


# =============================================================================
# AppError Tests
# =============================================================================

class TestAppError:
    """Tests for the centralized error family."""

    def test_reason_appended_on_new_line(self):
        error = InvalidInputError("Points must be zero or more")

        assert error.error_description == "Invalid input.\nPoints must be zero or more"
        assert error.status_code == status.HTTP_400_BAD_REQUEST

    def test_description_without_reason(self):
        assert DataLoadFailedError().error_description == 'Failed to load data.'

    def test_recoverable_cases(self):
        recoverable = {cls for cls in ALL_APP_ERRORS if cls.is_recoverable}

        assert recoverable == {
            InvalidInputError,
            NetworkUnavailableError,
            PermissionDeniedError,
            UnauthorizedAccessError,
        }

    def test_permission_denied_formats_type_inline(self):
        assert PermissionDeniedError('camera').error_description == 'Permission denied. (camera)'

    def test_unauthorized_access_formats_role(self):
        error = UnauthorizedAccessError('receptionist')

        assert error.error_description == 'Unauthorized access. (Role: receptionist)'

    def test_duplicate_entry_keeps_reason_out_of_description(self):
        error = DuplicateEntryError('Tag exists')

        assert error.error_description == 'This item already exists.'
        assert error.to_dict()['reason'] == 'Tag exists'

    def test_to_dict_fields(self):
        data = NetworkUnavailableError().to_dict()

        assert data['code'] == 'network_unavailable'
        assert data['id'].startswith('network_unavailable-')
        assert data['is_recoverable'] is True
        assert data['recovery_suggestion']

    def test_error_ids_are_unique(self):
        assert InvalidInputError().error_id != InvalidInputError().error_id

    def test_from_exception_wraps_unknown_errors(self):
        wrapped = AppError.from_exception(ZeroDivisionError('division by zero'))

        assert isinstance(wrapped, UnknownAppError)
        assert wrapped.error_description == 'An unexpected error occurred: division by zero'
        assert wrapped.is_recoverable is False

    def test_from_exception_passes_app_errors_through(self):
        error = InvalidInputError()

        assert AppError.from_exception(error) is error


# =============================================================================
# Token Tests
# =============================================================================

class _Holder(TokenListMixin):
    token_choices = OwnerBadge

    def __init__(self):
        self.badge_tokens = []


class TestTokens:
    """Tests for badge token lists."""

    def test_add_token_deduplicates(self):
        holder = _Holder()

        assert holder.add_token(OwnerBadge.LOYAL) is True
        assert holder.add_token('loyal') is False
        assert holder.badge_tokens == ['loyal']

    def test_remove_missing_token(self):
        assert _Holder().remove_token('loyal') is False

    def test_unknown_token_rejected(self):
        with pytest.raises(InvalidInputError):
            normalize_token('vip', OwnerBadge)

    def test_token_labels(self):
        holder = _Holder()
        holder.add_token('big_spender')

        assert holder.token_labels() == ['Big Spender']

    def test_dedupe_keeps_first_occurrence(self):
        assert dedupe(['b', 'a', 'b', 'c', 'a']) == ['b', 'a', 'c']
