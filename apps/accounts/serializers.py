from rest_framework import serializers
from django.contrib.auth.password_validation import validate_password
from .models import User, UserBadge, UserRole


class UserSerializer(serializers.ModelSerializer):
    """Basic user serializer for profile display."""

    risk_score = serializers.IntegerField(read_only=True)
    is_enabled = serializers.BooleanField(read_only=True)
    is_power_user = serializers.BooleanField(read_only=True)

    class Meta:
        model = User
        fields = [
            'id',
            'email',
            'display_name',
            'phone',
            'role',
            'verified',
            'mfa_enabled',
            'is_enabled',
            'is_suspended',
            'is_archived',
            'login_streak',
            'badge_tokens',
            'is_power_user',
            'risk_score',
            'created_at',
            'last_login',
        ]
        read_only_fields = [
            'id', 'email', 'role', 'verified', 'is_suspended', 'is_archived',
            'login_streak', 'badge_tokens', 'created_at', 'last_login',
        ]


class UserRegistrationSerializer(serializers.ModelSerializer):
    """Serializer for user registration."""

    password = serializers.CharField(
        write_only=True,
        required=True,
        validators=[validate_password],
        style={'input_type': 'password'}
    )
    password_confirm = serializers.CharField(
        write_only=True,
        required=True,
        style={'input_type': 'password'}
    )

    class Meta:
        model = User
        fields = ['email', 'password', 'password_confirm', 'display_name']

    def validate(self, attrs):
        """Validate password confirmation."""
        if attrs['password'] != attrs['password_confirm']:
            raise serializers.ValidationError({
                'password_confirm': 'Passwords do not match'
            })
        return attrs


class UserLoginSerializer(serializers.Serializer):
    """Serializer for user login."""

    email = serializers.EmailField(required=True)
    password = serializers.CharField(
        required=True,
        write_only=True,
        style={'input_type': 'password'}
    )


class UserRoleSerializer(serializers.Serializer):
    role = serializers.ChoiceField(choices=UserRole.choices)


class UserBadgeInputSerializer(serializers.Serializer):
    badge = serializers.ChoiceField(choices=UserBadge.choices)


class SuspendInputSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True, default='')
