from rest_framework import serializers
from .models import DogOwner, Dog, OwnerBadge, DogTag, ContactMethod, Gender


class DogSerializer(serializers.ModelSerializer):
    """Dog with computed business metrics."""

    age = serializers.IntegerField(read_only=True, allow_null=True)
    lifetime_value = serializers.DecimalField(max_digits=10, decimal_places=2, read_only=True)
    loyalty_score = serializers.IntegerField(read_only=True)
    appointment_frequency_months = serializers.FloatField(read_only=True, allow_null=True)
    is_birthday_month = serializers.BooleanField(read_only=True)
    status_label = serializers.CharField(read_only=True)

    class Meta:
        model = Dog
        fields = [
            'id',
            'owner',
            'name',
            'breed',
            'birthdate',
            'color',
            'gender',
            'notes',
            'is_active',
            'tags',
            'age',
            'lifetime_value',
            'loyalty_score',
            'appointment_frequency_months',
            'is_birthday_month',
            'status_label',
            'date_added',
            'last_modified',
        ]
        read_only_fields = ['id', 'tags', 'date_added', 'last_modified']


class DogWriteSerializer(serializers.Serializer):
    owner = serializers.PrimaryKeyRelatedField(queryset=DogOwner.objects.all())
    name = serializers.CharField(max_length=100)
    breed = serializers.CharField(max_length=100, required=False, allow_blank=True)
    birthdate = serializers.DateField(required=False, allow_null=True)
    color = serializers.CharField(max_length=50, required=False, allow_blank=True)
    gender = serializers.ChoiceField(choices=Gender.choices, required=False)
    notes = serializers.CharField(required=False, allow_blank=True)
    is_active = serializers.BooleanField(required=False)


class DogOwnerListSerializer(serializers.ModelSerializer):
    display_name = serializers.CharField(read_only=True)
    dog_count = serializers.IntegerField(read_only=True)

    class Meta:
        model = DogOwner
        fields = ['id', 'display_name', 'email', 'phone', 'is_active', 'dog_count', 'badge_tokens']


class DogOwnerSerializer(serializers.ModelSerializer):
    """Owner detail with dogs, tags and computed metrics."""

    display_name = serializers.CharField(read_only=True)
    dogs = DogSerializer(many=True, read_only=True)
    tags = serializers.SlugRelatedField(many=True, read_only=True, slug_field='label')
    dog_count = serializers.IntegerField(read_only=True)
    total_spent = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)
    loyalty_tier = serializers.CharField(read_only=True)
    is_retention_risk = serializers.BooleanField(read_only=True)
    last_appointment_date = serializers.DateTimeField(read_only=True, allow_null=True)
    average_appointment_interval = serializers.FloatField(read_only=True, allow_null=True)
    recent_audit = serializers.SerializerMethodField()

    class Meta:
        model = DogOwner
        fields = [
            'id',
            'owner_name',
            'display_name',
            'email',
            'phone',
            'address',
            'emergency_contact',
            'notes',
            'is_active',
            'preferred_contact',
            'preferred_language',
            'badge_tokens',
            'tags',
            'dogs',
            'dog_count',
            'total_spent',
            'loyalty_tier',
            'is_retention_risk',
            'last_appointment_date',
            'average_appointment_interval',
            'recent_audit',
            'date_added',
            'last_modified',
        ]
        read_only_fields = ['id', 'is_active', 'badge_tokens', 'date_added', 'last_modified']

    def get_recent_audit(self, obj) -> list:
        return obj.recent_audit_log(3)


class DogOwnerCreateSerializer(serializers.Serializer):
    owner_name = serializers.CharField(max_length=150)
    email = serializers.EmailField(required=False, allow_blank=True, default='')
    phone = serializers.CharField(max_length=32, required=False, allow_blank=True, default='')
    address = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')
    emergency_contact = serializers.CharField(max_length=150, required=False, allow_blank=True, default='')
    notes = serializers.CharField(required=False, allow_blank=True, default='')
    preferred_contact = serializers.ChoiceField(choices=ContactMethod.choices, required=False, default=ContactMethod.PHONE)
    preferred_language = serializers.CharField(max_length=10, required=False, default='en')
    allow_duplicate = serializers.BooleanField(required=False, default=False)


class OwnerFilterSerializer(serializers.Serializer):
    search = serializers.CharField(required=False, allow_blank=True, default='')
    is_active = serializers.BooleanField(required=False, allow_null=True, default=None)


class DuplicateQuerySerializer(serializers.Serializer):
    owner_name = serializers.CharField()
    phone = serializers.CharField(required=False, allow_blank=True, default='')
    email = serializers.CharField(required=False, allow_blank=True, default='')


class OwnerBadgeInputSerializer(serializers.Serializer):
    badge = serializers.ChoiceField(choices=OwnerBadge.choices)


class DogTagInputSerializer(serializers.Serializer):
    tag = serializers.ChoiceField(choices=DogTag.choices)
