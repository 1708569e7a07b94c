from rest_framework import serializers

from apps.owners.models import DogOwner, Dog
from .models import Appointment, AppointmentStatus, GroomingSession, ServiceType, SessionBadge


class AppointmentSerializer(serializers.ModelSerializer):
    owner_name = serializers.CharField(source='owner.display_name', read_only=True)
    dog_name = serializers.CharField(source='dog.name', read_only=True)
    end_date = serializers.DateTimeField(read_only=True)
    is_past = serializers.BooleanField(read_only=True)
    is_upcoming = serializers.BooleanField(read_only=True)
    is_active = serializers.BooleanField(read_only=True)

    class Meta:
        model = Appointment
        fields = [
            'id',
            'owner',
            'owner_name',
            'dog',
            'dog_name',
            'date',
            'end_date',
            'duration_minutes',
            'service_type',
            'status',
            'notes',
            'tags',
            'is_past',
            'is_upcoming',
            'is_active',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['id', 'owner', 'dog', 'status', 'notes', 'created_at', 'updated_at']


class AppointmentCreateSerializer(serializers.Serializer):
    owner = serializers.PrimaryKeyRelatedField(queryset=DogOwner.objects.all())
    dog = serializers.PrimaryKeyRelatedField(queryset=Dog.objects.all())
    date = serializers.DateTimeField()
    service_type = serializers.ChoiceField(choices=ServiceType.choices, default=ServiceType.FULL_GROOM)
    duration_minutes = serializers.IntegerField(required=False, min_value=1, max_value=24 * 60)
    notes = serializers.CharField(required=False, allow_blank=True, default='')
    tags = serializers.ListField(child=serializers.CharField(max_length=50), required=False)

    def validate(self, attrs):
        if attrs['dog'].owner_id != attrs['owner'].id:
            raise serializers.ValidationError({'dog': 'Dog does not belong to this owner.'})
        return attrs


class AppointmentUpdateSerializer(serializers.Serializer):
    date = serializers.DateTimeField(required=False)
    service_type = serializers.ChoiceField(choices=ServiceType.choices, required=False)
    duration_minutes = serializers.IntegerField(required=False, min_value=1, max_value=24 * 60)
    tags = serializers.ListField(child=serializers.CharField(max_length=50), required=False)


class StatusInputSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=AppointmentStatus.choices)


class NoteInputSerializer(serializers.Serializer):
    note = serializers.CharField(max_length=2000)


class CancelInputSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True, default='')


class UpcomingQuerySerializer(serializers.Serializer):
    days = serializers.IntegerField(required=False, default=7, min_value=1, max_value=365)
    dog_id = serializers.UUIDField(required=False)
    owner_id = serializers.UUIDField(required=False)


class GroomingSessionSerializer(serializers.ModelSerializer):
    """Grooming session with computed financials."""

    dog_name = serializers.CharField(source='dog.name', read_only=True)
    staff_email = serializers.EmailField(source='staff.email', read_only=True, allow_null=True)
    profit = serializers.DecimalField(max_digits=10, decimal_places=2, read_only=True)
    revenue_per_hour = serializers.DecimalField(max_digits=10, decimal_places=2, read_only=True)
    quick_status = serializers.CharField(read_only=True)

    class Meta:
        model = GroomingSession
        fields = [
            'id',
            'dog',
            'dog_name',
            'appointment',
            'staff_email',
            'date',
            'service_type',
            'duration_minutes',
            'notes',
            'products_used',
            'outcomes',
            'is_favorite',
            'rating',
            'route_order',
            'session_cost',
            'session_revenue',
            'tip',
            'profit',
            'revenue_per_hour',
            'quick_status',
            'badge_tokens',
            'audit_log',
            'created_at',
        ]
        read_only_fields = ['id', 'badge_tokens', 'audit_log', 'created_at']


class SessionBadgeInputSerializer(serializers.Serializer):
    badge = serializers.ChoiceField(choices=SessionBadge.choices)
