import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from apps.accounts.models import User, UserRole
from apps.audit.buffer import reset_audit_logs
from apps.owners.models import DogOwner, Dog


@pytest.fixture(autouse=True)
def fresh_audit_logs():
    """Audit buffers live in process memory; start every test empty."""
    reset_audit_logs()
    yield
    reset_audit_logs()


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


def _client_for(user):
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


# =============================================================================
# Staff accounts
# =============================================================================

@pytest.fixture
def staff_user(db):
    """Create a groomer account."""
    return User.objects.create_user(
        email='groomer@example.com',
        password='TestPass123!',
        display_name='Groomer',
        role=UserRole.GROOMER,
        verified=True,
    )


@pytest.fixture
def admin_user(db):
    """Create a business owner account."""
    return User.objects.create_user(
        email='boss@example.com',
        password='TestPass123!',
        display_name='Boss',
        role=UserRole.OWNER,
        verified=True,
    )


@pytest.fixture
def authenticated_client(staff_user):
    """API client authenticated as a groomer via JWT."""
    return _client_for(staff_user)


@pytest.fixture
def admin_client(admin_user):
    """API client authenticated as the business owner via JWT."""
    return _client_for(admin_user)


# =============================================================================
# Clients and dogs
# =============================================================================

@pytest.fixture
def owner(db):
    return DogOwner.objects.create(
        owner_name='Maria Lopez',
        email='maria@example.com',
        phone='555-0101',
        address='1 Bark Street',
    )


@pytest.fixture
def other_owner(db):
    return DogOwner.objects.create(owner_name='James Carter', phone='555-0102')


@pytest.fixture
def dog(owner):
    return Dog.objects.create(owner=owner, name='Biscuit', breed='Poodle')


@pytest.fixture
def other_dog(other_owner):
    return Dog.objects.create(owner=other_owner, name='Rocky', breed='Boxer')
