from rest_framework import serializers

from apps.owners.models import DogOwner
from .models import LoyaltyProgram, LoyaltyReward, LoyaltyBadge, RewardPool, RewardType


class LoyaltyRewardSerializer(serializers.ModelSerializer):
    is_expired = serializers.BooleanField(read_only=True)

    class Meta:
        model = LoyaltyReward
        fields = ['id', 'reward_type', 'date', 'notes', 'expiry_date', 'is_expired']
        read_only_fields = fields


class LoyaltyProgramSerializer(serializers.ModelSerializer):
    """Loyalty program with tier, progress and rewards."""

    tier = serializers.CharField(read_only=True)
    is_eligible_for_reward = serializers.BooleanField(read_only=True)
    reward_progress = serializers.FloatField(read_only=True)
    summary = serializers.CharField(read_only=True)
    days_since_last_reward = serializers.IntegerField(read_only=True, allow_null=True)
    rewards = LoyaltyRewardSerializer(many=True, read_only=True)
    expiring_soon_count = serializers.SerializerMethodField()

    class Meta:
        model = LoyaltyProgram
        fields = [
            'id',
            'owner',
            'points',
            'visit_count',
            'tier',
            'is_eligible_for_reward',
            'reward_progress',
            'summary',
            'last_reward_date',
            'days_since_last_reward',
            'expiring_soon_count',
            'badge_tokens',
            'notes',
            'rewards',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields

    def get_expiring_soon_count(self, obj):
        return obj.expiring_soon_rewards.count()


class AddPointsSerializer(serializers.Serializer):
    points = serializers.IntegerField(min_value=0)
    for_visit = serializers.BooleanField(required=False, default=False)


class RedeemSerializer(serializers.Serializer):
    reward_type = serializers.ChoiceField(choices=RewardType.choices)
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class LoyaltyBadgeInputSerializer(serializers.Serializer):
    badge = serializers.ChoiceField(choices=LoyaltyBadge.choices)


class RewardPoolSerializer(serializers.ModelSerializer):
    formatted_points = serializers.CharField(read_only=True)
    participant_count = serializers.SerializerMethodField()

    class Meta:
        model = RewardPool
        fields = ['id', 'name', 'total_points', 'formatted_points', 'participant_count', 'created_at', 'updated_at']
        read_only_fields = ['id', 'created_at', 'updated_at']

    def get_participant_count(self, obj):
        return obj.participants.count()


class AllocateSerializer(serializers.Serializer):
    owner = serializers.PrimaryKeyRelatedField(queryset=DogOwner.objects.all())
    points = serializers.IntegerField(min_value=1)
