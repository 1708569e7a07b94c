from decimal import Decimal

from rest_framework import serializers

from apps.appointments.models import Appointment
from apps.owners.models import DogOwner, Dog
from .models import Charge, ChargeType, PaymentMethod


class ChargeSerializer(serializers.ModelSerializer):
    owner_name = serializers.CharField(source='owner.display_name', read_only=True)
    dog_name = serializers.CharField(source='dog.name', read_only=True, allow_null=True)
    summary = serializers.CharField(read_only=True)

    class Meta:
        model = Charge
        fields = [
            'id',
            'owner',
            'owner_name',
            'dog',
            'dog_name',
            'appointment',
            'date',
            'amount',
            'charge_type',
            'payment_method',
            'is_paid',
            'notes',
            'tags',
            'summary',
            'created_at',
        ]
        read_only_fields = ['id', 'is_paid', 'created_at']


class ChargeCreateSerializer(serializers.Serializer):
    owner = serializers.PrimaryKeyRelatedField(queryset=DogOwner.objects.all())
    dog = serializers.PrimaryKeyRelatedField(queryset=Dog.objects.all(), required=False, allow_null=True)
    appointment = serializers.PrimaryKeyRelatedField(
        queryset=Appointment.objects.all(),
        required=False,
        allow_null=True,
    )
    amount = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal('0.00'))
    charge_type = serializers.ChoiceField(choices=ChargeType.choices)
    payment_method = serializers.ChoiceField(choices=PaymentMethod.choices, default=PaymentMethod.UNPAID)
    date = serializers.DateTimeField(required=False)
    notes = serializers.CharField(required=False, allow_blank=True, default='')
    tags = serializers.ListField(child=serializers.CharField(max_length=50), required=False)

    def validate(self, attrs):
        dog = attrs.get('dog')
        if dog is not None and dog.owner_id != attrs['owner'].id:
            raise serializers.ValidationError({'dog': 'Dog does not belong to this owner.'})
        return attrs


class MarkPaidSerializer(serializers.Serializer):
    payment_method = serializers.ChoiceField(choices=PaymentMethod.choices)


class VoidInputSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True, default='')
