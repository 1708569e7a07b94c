"""Loyalty program and reward pool service."""

import logging
from typing import Optional
from uuid import UUID

from django.db import transaction

from apps.audit.buffer import record_on_commit
from apps.owners.services import get_owner_by_id
from ..models import LoyaltyProgram, LoyaltyBadge, LoyaltyReward, RewardPool, POINTS_PER_REWARD
from .exceptions import RewardPoolNotFoundError, InsufficientPointsError

logger = logging.getLogger(__name__)


def _actor(user) -> Optional[str]:
    return user.email if user is not None else None


def get_or_create_program(*, owner_id: UUID, user=None) -> LoyaltyProgram:
    """
    Return the owner's loyalty program, enrolling them on first use.

    New members get the ``new_member`` badge.

    Raises:
        OwnerNotFoundError: If owner doesn't exist
    """
    owner = get_owner_by_id(owner_id=owner_id)
    program, created = LoyaltyProgram.objects.get_or_create(
        owner=owner,
        defaults={
            'created_by': _actor(user) or '',
            'badge_tokens': [LoyaltyBadge.NEW_MEMBER.value],
        },
    )
    if created:
        record_on_commit(
            'loyalty_program',
            'enrolled',
            actor=_actor(user),
            program_id=str(program.id),
            owner_id=str(owner.id),
        )
    return program


@transaction.atomic
def award_points(*, owner_id: UUID, points: int, for_visit: bool = False, user=None) -> LoyaltyProgram:
    """
    Credit points to an owner's program.

    Raises:
        OwnerNotFoundError: If owner doesn't exist
        InvalidInputError: If ``points`` is negative
    """
    program = get_or_create_program(owner_id=owner_id, user=user)
    program.add_points(points, for_visit=for_visit, user=_actor(user))
    logger.debug("Awarded %s points to owner %s", points, owner_id)
    return program


@transaction.atomic
def redeem_reward(*, owner_id: UUID, reward_type: str, notes: Optional[str] = None, user=None) -> LoyaltyReward:
    """
    Redeem one reward for an owner.

    Raises:
        InsufficientPointsError: If the program holds fewer than 50 points
    """
    program = get_or_create_program(owner_id=owner_id, user=user)
    if not program.redeem_reward(reward_type, notes=notes, user=_actor(user)):
        raise InsufficientPointsError(
            f"{POINTS_PER_REWARD} points needed to redeem a reward, {program.points} available"
        )
    return program.rewards.order_by('-date').first()


@transaction.atomic
def set_program_badge(*, owner_id: UUID, badge: str, add: bool = True, user=None) -> LoyaltyProgram:
    program = get_or_create_program(owner_id=owner_id, user=user)
    if add:
        program.add_badge(badge, user=_actor(user))
    else:
        program.remove_badge(badge, user=_actor(user))
    return program


def get_pool_by_id(*, pool_id: UUID) -> RewardPool:
    try:
        return RewardPool.objects.get(id=pool_id)
    except RewardPool.DoesNotExist:
        raise RewardPoolNotFoundError("Reward pool not found")


@transaction.atomic
def create_reward_pool(*, name: str, total_points: int = 0, user=None) -> RewardPool:
    pool = RewardPool.objects.create(name=name, total_points=total_points)
    record_on_commit(
        'reward_pool',
        'pool_created',
        actor=_actor(user),
        pool_id=str(pool.id),
        name=name,
        points=total_points,
    )
    return pool


@transaction.atomic
def allocate_from_pool(*, pool_id: UUID, owner_id: UUID, points: int, user=None) -> RewardPool:
    """
    Move points from a pool to an owner.

    Raises:
        RewardPoolNotFoundError: If pool doesn't exist
        OwnerNotFoundError: If owner doesn't exist
        InsufficientPointsError: If the pool holds fewer points
    """
    pool = get_pool_by_id(pool_id=pool_id)
    owner = get_owner_by_id(owner_id=owner_id)
    if not pool.allocate(points, owner, user=_actor(user)):
        raise InsufficientPointsError(f"Pool '{pool.display_name}' has only {pool.total_points} points")
    return pool
