import json
from datetime import timedelta

import pytest
from django.db import transaction
from django.urls import reverse
from django.utils import timezone
from rest_framework import status

from apps.audit.buffer import get_audit_log
from apps.core.exceptions import InvalidInputError
from apps.loyalty.models import (
    LoyaltyBadge,
    LoyaltyProgram,
    RewardPool,
    RewardType,
    REWARD_EXPIRY_DAYS,
    tier_for_points,
)
from apps.loyalty.services import (
    allocate_from_pool,
    award_points,
    get_or_create_program,
    redeem_reward,
    InsufficientPointsError,
)


@pytest.fixture
def program(owner):
    return LoyaltyProgram.objects.create(owner=owner)


@pytest.fixture
def pool(db):
    return RewardPool.objects.create(name='Holiday Bonus', total_points=100)


# =============================================================================
# Program Model Tests
# =============================================================================

class TestTiers:

    @pytest.mark.parametrize('points, tier', [
        (0, 'Bronze'),
        (99, 'Bronze'),
        (100, 'Silver'),
        (249, 'Silver'),
        (250, 'Gold'),
        (499, 'Gold'),
        (500, 'Platinum'),
    ])
    def test_tier_for_points(self, points, tier):
        assert tier_for_points(points) == tier


@pytest.mark.django_db
class TestLoyaltyProgram:

    def test_add_points(self, program, django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks(execute=True):
            program.add_points(20, for_visit=True, user='desk@example.com')
        program.refresh_from_db()

        assert program.points == 20
        assert program.visit_count == 1
        assert program.last_modified_by == 'desk@example.com'
        entry = get_audit_log('loyalty_program').last()
        assert entry.event == 'points_added'
        assert entry.payload['added'] == 20

    def test_add_points_without_visit(self, program):
        program.add_points(5)

        assert program.visit_count == 0

    def test_negative_points(self, program):
        with pytest.raises(InvalidInputError):
            program.add_points(-1)

    def test_progress_and_summary(self, program):
        program.points = 75

        assert program.is_eligible_for_reward is True
        assert program.reward_progress == 0.5
        assert program.summary == 'Tier: Bronze • Points: 75 (50% to reward)'

    def test_redeem(self, program):
        program.points = 60
        program.save()

        assert program.redeem_reward(RewardType.FREE_BATH, notes='Spring promo') is True

        program.refresh_from_db()
        assert program.points == 10
        reward = program.rewards.get()
        assert reward.expiry_date - reward.date == timedelta(days=REWARD_EXPIRY_DAYS)
        assert program.last_reward_date == reward.date
        assert program.days_since_last_reward == 0
        assert reward.is_expired is False

    def test_redeem_without_points(self, program):
        program.points = 49
        program.save()

        assert program.redeem_reward(RewardType.DISCOUNT) is False
        assert program.rewards.count() == 0
        assert program.points == 49

    def test_badges(self, program):
        assert program.add_badge(LoyaltyBadge.GOLD) is True
        assert program.add_badge(LoyaltyBadge.GOLD) is False
        assert program.remove_badge(LoyaltyBadge.GOLD) is True

    def test_recent_audit_entries_filter_by_program(self, program, other_owner, django_capture_on_commit_callbacks):
        other = LoyaltyProgram.objects.create(owner=other_owner)
        with django_capture_on_commit_callbacks(execute=True):
            program.add_points(1)
            other.add_points(2)
            program.add_points(3)

        entries = program.recent_audit_entries(5)

        assert [e.payload['added'] for e in entries] == [1, 3]

    def test_export_json(self, program):
        program.points = 60
        program.save()
        program.redeem_reward(RewardType.FREE_NAIL_TRIM)

        data = json.loads(program.export_json())

        assert data['points'] == 10
        assert data['rewards_redeemed'][0]['type'] == 'free_nail_trim'

    def test_stale_copies_redeem_only_once(self, program):
        program.points = 50
        program.save()
        first = LoyaltyProgram.objects.get(id=program.id)
        second = LoyaltyProgram.objects.get(id=program.id)

        assert first.redeem_reward(RewardType.FREE_BATH) is True
        assert second.redeem_reward(RewardType.FREE_BATH) is False

        program.refresh_from_db()
        assert program.points == 0
        assert program.rewards.count() == 1

    def test_stale_copies_both_credit(self, program):
        first = LoyaltyProgram.objects.get(id=program.id)
        second = LoyaltyProgram.objects.get(id=program.id)

        first.add_points(10, for_visit=True)
        second.add_points(10, for_visit=True)

        program.refresh_from_db()
        assert program.points == 20
        assert program.visit_count == 2

    def test_rolled_back_change_is_not_audited(self, program, django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks(execute=True) as callbacks:
            with pytest.raises(InvalidInputError):
                with transaction.atomic():
                    program.add_points(10)
                    raise InvalidInputError("Aborted")

        assert callbacks == []
        assert get_audit_log('loyalty_program').last() is None
        program.refresh_from_db()
        assert program.points == 0


# =============================================================================
# Reward Pool Tests
# =============================================================================

@pytest.mark.django_db
class TestRewardPool:

    def test_allocate(self, pool, owner, django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks(execute=True):
            assert pool.allocate(40, owner, user='boss@example.com') is True

        pool.refresh_from_db()
        assert pool.total_points == 60
        assert pool.participants.get() == owner
        assert owner.loyalty_program.points == 40
        entry = get_audit_log('reward_pool').last()
        assert entry.event == 'points_allocated'
        assert entry.payload['remaining'] == 60

    def test_allocate_more_than_pool(self, pool, owner):
        assert pool.allocate(101, owner) is False

        pool.refresh_from_db()
        assert pool.total_points == 100
        assert not pool.participants.exists()

    def test_stale_copies_cannot_overdraw(self, pool, owner, other_owner):
        first = RewardPool.objects.get(id=pool.id)
        second = RewardPool.objects.get(id=pool.id)

        assert first.allocate(60, owner) is True
        assert second.allocate(60, other_owner) is False

        pool.refresh_from_db()
        assert pool.total_points == 40
        assert list(pool.participants.all()) == [owner]

    def test_formatted_points(self):
        assert RewardPool(name='Big', total_points=12500).formatted_points == '12,500 pts'


# =============================================================================
# Loyalty Service Tests
# =============================================================================

@pytest.mark.django_db
class TestLoyaltyServices:

    def test_enrollment_badge(self, owner, django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks(execute=True):
            program = get_or_create_program(owner_id=owner.id)

        assert program.badge_tokens == [LoyaltyBadge.NEW_MEMBER]
        assert get_audit_log('loyalty_program').last().event == 'enrolled'

    def test_enrolls_once(self, owner):
        get_or_create_program(owner_id=owner.id)
        get_or_create_program(owner_id=owner.id)

        assert LoyaltyProgram.objects.filter(owner=owner).count() == 1

    def test_five_visits_reach_a_reward(self, owner):
        for _ in range(5):
            program = award_points(owner_id=owner.id, points=10, for_visit=True)

        assert program.points == 50
        assert program.visit_count == 5
        assert program.is_eligible_for_reward is True

    def test_redeem_reward(self, owner):
        award_points(owner_id=owner.id, points=55)

        reward = redeem_reward(owner_id=owner.id, reward_type=RewardType.FREE_BATH)

        assert reward.reward_type == RewardType.FREE_BATH
        assert LoyaltyProgram.objects.get(owner=owner).points == 5

    def test_redeem_insufficient(self, owner):
        with pytest.raises(InsufficientPointsError):
            redeem_reward(owner_id=owner.id, reward_type=RewardType.FREE_BATH)

    def test_allocate_from_pool_insufficient(self, pool, owner):
        with pytest.raises(InsufficientPointsError):
            allocate_from_pool(pool_id=pool.id, owner_id=owner.id, points=500)


# =============================================================================
# Loyalty API Tests
# =============================================================================

@pytest.mark.django_db
class TestLoyaltyApi:
    """Tests for /api/loyalty/"""

    def test_program_detail_enrolls(self, authenticated_client, owner):
        response = authenticated_client.get(reverse('loyalty:program-detail', args=[owner.id]))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['points'] == 0
        assert response.data['tier'] == 'Bronze'
        assert response.data['badge_tokens'] == ['new_member']

    def test_unknown_owner(self, authenticated_client):
        url = reverse('loyalty:program-detail', args=['00000000-0000-0000-0000-000000000000'])
        response = authenticated_client.get(url)

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_add_points(self, authenticated_client, owner):
        url = reverse('loyalty:add-points', args=[owner.id])
        response = authenticated_client.post(url, {'points': 30, 'for_visit': True})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['points'] == 30
        assert response.data['visit_count'] == 1

    def test_add_negative_points(self, authenticated_client, owner):
        url = reverse('loyalty:add-points', args=[owner.id])
        response = authenticated_client.post(url, {'points': -5})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_redeem(self, authenticated_client, owner):
        award_points(owner_id=owner.id, points=50)

        url = reverse('loyalty:redeem', args=[owner.id])
        response = authenticated_client.post(url, {'reward_type': 'discount'})

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['reward_type'] == 'discount'
        assert response.data['is_expired'] is False

    def test_badges(self, authenticated_client, owner):
        url = reverse('loyalty:badges', args=[owner.id])
        response = authenticated_client.post(url, {'badge': 'high_engager'})

        assert response.data['badge_tokens'] == ['new_member', 'high_engager']

    def test_expiring_rewards(self, authenticated_client, owner):
        award_points(owner_id=owner.id, points=50)
        reward = redeem_reward(owner_id=owner.id, reward_type=RewardType.FREE_BATH)
        reward.expiry_date = timezone.now() - timedelta(days=1)
        reward.save()

        response = authenticated_client.get(reverse('loyalty:expiring-rewards', args=[owner.id]))

        assert response.data == []

    def test_create_pool_and_allocate(self, authenticated_client, owner, django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks(execute=True):
            response = authenticated_client.post(
                reverse('loyalty:pool-list'),
                {'name': 'Referral Pot', 'total_points': 200},
            )
        assert response.status_code == status.HTTP_201_CREATED
        assert get_audit_log('reward_pool').last().event == 'pool_created'

        url = reverse('loyalty:pool-allocate', args=[response.data['id']])
        response = authenticated_client.post(url, {'owner': str(owner.id), 'points': 150})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['total_points'] == 50
        assert response.data['participant_count'] == 1

    def test_allocate_too_much(self, authenticated_client, pool, owner):
        url = reverse('loyalty:pool-allocate', args=[pool.id])
        response = authenticated_client.post(url, {'owner': str(owner.id), 'points': 101})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
