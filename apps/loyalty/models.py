"""
Loyalty programs, redeemed rewards and shared reward pools.

Every owner can have one ``LoyaltyProgram``. Points accumulate from visits
and manual grants; every ``POINTS_PER_REWARD`` points can be redeemed for a
``LoyaltyReward`` that expires after ``REWARD_EXPIRY_DAYS``. Changes are
recorded in the ``loyalty_program`` and ``reward_pool`` audit logs.
"""

import json
from datetime import timedelta
from typing import Optional

from django.core.serializers.json import DjangoJSONEncoder
from django.db import models, transaction
from django.utils import timezone
import uuid

from apps.audit.buffer import get_audit_log, record_on_commit
from apps.core.exceptions import InvalidInputError
from apps.core.tokens import TokenListMixin

POINTS_PER_REWARD = 50
VISITS_PER_REWARD = 5
REWARD_EXPIRY_DAYS = 180

# Fields re-read under a row lock before every mutation
LOCKED_FIELDS = ('points', 'visit_count', 'last_reward_date', 'badge_tokens', 'last_modified_by')

# [0,100) Bronze, [100,250) Silver, [250,500) Gold, [500,inf) Platinum
TIER_THRESHOLDS = (
    (500, 'Platinum'),
    (250, 'Gold'),
    (100, 'Silver'),
    (0, 'Bronze'),
)


def tier_for_points(points: int) -> str:
    for threshold, tier in TIER_THRESHOLDS:
        if points >= threshold:
            return tier
    return 'Bronze'


class LoyaltyBadge(models.TextChoices):
    HIGH_ENGAGER = 'high_engager', 'High Engager'
    AT_RISK = 'at_risk', 'At Risk'
    NEW_MEMBER = 'new_member', 'New Member'
    PLATINUM = 'platinum', 'Platinum'
    GOLD = 'gold', 'Gold'
    SILVER = 'silver', 'Silver'
    BRONZE = 'bronze', 'Bronze'


class RewardType(models.TextChoices):
    FREE_BATH = 'free_bath', 'Free Bath'
    DISCOUNT = 'discount', 'Discount'
    FREE_NAIL_TRIM = 'free_nail_trim', 'Free Nail Trim'
    CUSTOM = 'custom', 'Custom Reward'


class LoyaltyProgram(TokenListMixin, models.Model):
    """Points and rewards for one owner."""

    token_choices = LoyaltyBadge

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    owner = models.OneToOneField('owners.DogOwner', on_delete=models.CASCADE, related_name='loyalty_program')
    points = models.PositiveIntegerField(default=0)
    visit_count = models.PositiveIntegerField(default=0)
    last_reward_date = models.DateTimeField(null=True, blank=True)
    notes = models.TextField(blank=True)
    badge_tokens = models.JSONField(default=list, blank=True)

    created_by = models.CharField(max_length=255, blank=True)
    last_modified_by = models.CharField(max_length=255, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'loyalty_programs'

    def __str__(self):
        return f"{self.owner.display_name}: {self.points} pts ({self.tier})"

    # ------------------------------------------------------------------
    # Computed
    # ------------------------------------------------------------------

    @property
    def tier(self) -> str:
        return tier_for_points(self.points)

    @property
    def is_eligible_for_reward(self) -> bool:
        return self.points >= POINTS_PER_REWARD

    @property
    def reward_progress(self) -> float:
        return (self.points % POINTS_PER_REWARD) / POINTS_PER_REWARD

    @property
    def summary(self) -> str:
        return f"Tier: {self.tier} • Points: {self.points} ({self.reward_progress * 100:.0f}% to reward)"

    @property
    def days_since_last_reward(self) -> Optional[int]:
        if self.last_reward_date is None:
            return None
        return (timezone.now() - self.last_reward_date).days

    @property
    def expiring_soon_rewards(self):
        now = timezone.now()
        return self.rewards.filter(
            expiry_date__gt=now,
            expiry_date__lt=now + timedelta(days=REWARD_EXPIRY_DAYS),
        )

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def _audit(self, event: str, user: Optional[str] = None, **payload):
        record_on_commit(
            'loyalty_program',
            event,
            actor=user,
            program_id=str(self.id),
            owner_id=str(self.owner_id),
            points=self.points,
            **payload,
        )

    def _lock(self) -> None:
        """Reload the mutable fields from the row, locked until the transaction ends."""
        locked = type(self).objects.select_for_update().get(pk=self.pk)
        for name in LOCKED_FIELDS:
            setattr(self, name, getattr(locked, name))

    @transaction.atomic
    def add_points(self, points: int, for_visit: bool = False, user: Optional[str] = None) -> None:
        """
        Credit points, counting a visit when ``for_visit`` is set.

        Raises:
            InvalidInputError: If ``points`` is negative
        """
        if points < 0:
            raise InvalidInputError("Points must be zero or more")
        self._lock()
        self.points += points
        if for_visit:
            self.visit_count += 1
        if user:
            self.last_modified_by = user
        self.save(update_fields=['points', 'visit_count', 'last_modified_by', 'updated_at'])
        self._audit('points_added', user, added=points, for_visit=for_visit)

    @transaction.atomic
    def redeem_reward(self, reward_type: str, notes: Optional[str] = None, user: Optional[str] = None) -> bool:
        """
        Spend ``POINTS_PER_REWARD`` points on a reward.

        Returns False, changing nothing, when the program has too few points.
        """
        self._lock()
        if not self.is_eligible_for_reward:
            return False
        now = timezone.now()
        self.points -= POINTS_PER_REWARD
        reward = self.rewards.create(
            reward_type=reward_type,
            date=now,
            notes=notes or '',
            expiry_date=now + timedelta(days=REWARD_EXPIRY_DAYS),
        )
        self.last_reward_date = reward.date
        if user:
            self.last_modified_by = user
        self.save(update_fields=['points', 'last_reward_date', 'last_modified_by', 'updated_at'])
        self._audit('reward_redeemed', user, reward_type=reward_type, reward_id=str(reward.id))
        return True

    @transaction.atomic
    def add_badge(self, badge, user: Optional[str] = None) -> bool:
        self._lock()
        added = self.add_token(badge)
        if added:
            self.save(update_fields=['badge_tokens', 'updated_at'])
            self._audit('badge_added', user, badge=str(badge))
        return added

    @transaction.atomic
    def remove_badge(self, badge, user: Optional[str] = None) -> bool:
        self._lock()
        removed = self.remove_token(badge)
        if removed:
            self.save(update_fields=['badge_tokens', 'updated_at'])
            self._audit('badge_removed', user, badge=str(badge))
        return removed

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    def recent_audit_entries(self, limit: int = 3):
        program_id = str(self.id)
        matching = [e for e in get_audit_log('loyalty_program').all() if e.payload.get('program_id') == program_id]
        return matching[-limit:] if limit > 0 else []

    def to_export_dict(self) -> dict:
        return {
            'id': str(self.id),
            'owner_id': str(self.owner_id),
            'points': self.points,
            'visit_count': self.visit_count,
            'tier': self.tier,
            'rewards_redeemed': [reward.to_export_dict() for reward in self.rewards.all()],
            'badges': list(self.badge_tokens),
            'date_created': self.created_at,
        }

    def export_json(self) -> str:
        return json.dumps(self.to_export_dict(), cls=DjangoJSONEncoder, indent=2)


class LoyaltyReward(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    program = models.ForeignKey(LoyaltyProgram, on_delete=models.CASCADE, related_name='rewards')
    reward_type = models.CharField(max_length=20, choices=RewardType.choices)
    date = models.DateTimeField(default=timezone.now)
    notes = models.TextField(blank=True)
    expiry_date = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'loyalty_rewards'
        ordering = ['-date']

    def __str__(self):
        return f"{self.get_reward_type_display()} ({self.date:%Y-%m-%d})"

    @property
    def is_expired(self) -> bool:
        return self.expiry_date is not None and self.expiry_date <= timezone.now()

    def to_export_dict(self) -> dict:
        return {
            'id': str(self.id),
            'type': self.reward_type,
            'date': self.date,
            'notes': self.notes,
            'expiry_date': self.expiry_date,
        }


class RewardPool(models.Model):
    """A shared pot of points handed out to participating owners."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=100)
    total_points = models.PositiveIntegerField(default=0)
    participants = models.ManyToManyField('owners.DogOwner', blank=True, related_name='reward_pools')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'reward_pools'
        ordering = ['name']

    def __str__(self):
        return self.name

    @property
    def display_name(self) -> str:
        return self.name or 'Unnamed Pool'

    @property
    def formatted_points(self) -> str:
        return f"{self.total_points:,} pts"

    @transaction.atomic
    def allocate(self, points: int, owner, user: Optional[str] = None) -> bool:
        """
        Move ``points`` from the pool to ``owner``'s loyalty program.

        Returns False, changing nothing, when the pool holds fewer points.
        """
        if points < 0:
            raise InvalidInputError("Points must be zero or more")
        self.total_points = (
            type(self).objects.select_for_update()
            .values_list('total_points', flat=True)
            .get(pk=self.pk)
        )
        if self.total_points < points:
            return False
        self.total_points -= points
        self.save(update_fields=['total_points', 'updated_at'])
        self.participants.add(owner)

        program, _ = LoyaltyProgram.objects.get_or_create(owner=owner, defaults={'created_by': user or ''})
        program.add_points(points, user=user)

        record_on_commit(
            'reward_pool',
            'points_allocated',
            actor=user,
            pool_id=str(self.id),
            owner_id=str(owner.id),
            points=points,
            remaining=self.total_points,
        )
        return True
