"""
Loyalty services - Business logic layer.

- Program enrolment, points and reward redemption
- Program badges
- Shared reward pools
"""

from .loyalty_management import (
    get_or_create_program,
    award_points,
    redeem_reward,
    set_program_badge,
    get_pool_by_id,
    create_reward_pool,
    allocate_from_pool,
)
from .exceptions import (
    LoyaltyServiceError,
    RewardPoolNotFoundError,
    InsufficientPointsError,
)

__all__ = [
    'get_or_create_program',
    'award_points',
    'redeem_reward',
    'set_program_badge',
    'get_pool_by_id',
    'create_reward_pool',
    'allocate_from_pool',
    # Exceptions
    'LoyaltyServiceError',
    'RewardPoolNotFoundError',
    'InsufficientPointsError',
]
