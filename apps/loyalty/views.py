from rest_framework import viewsets, status
from rest_framework.decorators import api_view, action
from rest_framework.exceptions import NotFound
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema

from apps.core.exceptions import InvalidInputError
from apps.owners.services import OwnerNotFoundError
from .models import RewardPool
from .serializers import (
    LoyaltyProgramSerializer,
    LoyaltyRewardSerializer,
    AddPointsSerializer,
    RedeemSerializer,
    LoyaltyBadgeInputSerializer,
    RewardPoolSerializer,
    AllocateSerializer,
)
from .services import (
    get_or_create_program,
    award_points,
    redeem_reward,
    set_program_badge,
    create_reward_pool,
    allocate_from_pool,
    InsufficientPointsError,
)


def _program_or_404(owner_id, user):
    try:
        return get_or_create_program(owner_id=owner_id, user=user)
    except OwnerNotFoundError as e:
        raise NotFound(str(e))


@extend_schema(responses={200: LoyaltyProgramSerializer}, tags=['loyalty'])
@api_view(['GET'])
def program_detail(request, owner_id):
    """Loyalty program of an owner, enrolling them on first access."""
    program = _program_or_404(owner_id, request.user)
    return Response(LoyaltyProgramSerializer(program).data)


@extend_schema(request=AddPointsSerializer, responses={200: LoyaltyProgramSerializer}, tags=['loyalty'])
@api_view(['POST'])
def add_points(request, owner_id):
    serializer = AddPointsSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    _program_or_404(owner_id, request.user)
    program = award_points(owner_id=owner_id, user=request.user, **serializer.validated_data)
    return Response(LoyaltyProgramSerializer(program).data)


@extend_schema(request=RedeemSerializer, responses={201: LoyaltyRewardSerializer}, tags=['loyalty'])
@api_view(['POST'])
def redeem(request, owner_id):
    """
    Redeem a reward for 50 points.

    POST /api/loyalty/owners/{owner_id}/redeem/  {"reward_type": "free_bath"}
    """
    serializer = RedeemSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    _program_or_404(owner_id, request.user)
    try:
        reward = redeem_reward(owner_id=owner_id, user=request.user, **serializer.validated_data)
    except InsufficientPointsError as e:
        raise InvalidInputError(str(e))
    return Response(LoyaltyRewardSerializer(reward).data, status=status.HTTP_201_CREATED)


@extend_schema(request=LoyaltyBadgeInputSerializer, responses={200: LoyaltyProgramSerializer}, tags=['loyalty'])
@api_view(['POST', 'DELETE'])
def badges(request, owner_id):
    serializer = LoyaltyBadgeInputSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    _program_or_404(owner_id, request.user)
    program = set_program_badge(
        owner_id=owner_id,
        badge=serializer.validated_data['badge'],
        add=request.method == 'POST',
        user=request.user,
    )
    return Response(LoyaltyProgramSerializer(program).data)


@extend_schema(responses={200: LoyaltyRewardSerializer(many=True)}, tags=['loyalty'])
@api_view(['GET'])
def expiring_rewards(request, owner_id):
    program = _program_or_404(owner_id, request.user)
    return Response(LoyaltyRewardSerializer(program.expiring_soon_rewards, many=True).data)


class RewardPoolViewSet(viewsets.ModelViewSet):
    """
    ViewSet for shared reward pools.

    allocate: Move points from the pool to an owner's program
    """

    queryset = RewardPool.objects.all()
    serializer_class = RewardPoolSerializer

    def perform_create(self, serializer):
        serializer.instance = create_reward_pool(user=self.request.user, **serializer.validated_data)

    @extend_schema(request=AllocateSerializer, responses={200: RewardPoolSerializer})
    @action(detail=True, methods=['post'])
    def allocate(self, request, pk=None):
        serializer = AllocateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            pool = allocate_from_pool(
                pool_id=self.get_object().id,
                owner_id=serializer.validated_data['owner'].id,
                points=serializer.validated_data['points'],
                user=request.user,
            )
        except InsufficientPointsError as e:
            raise InvalidInputError(str(e))
        return Response(RewardPoolSerializer(pool).data)
