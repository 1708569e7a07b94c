"""
Serializers for analytics app.

This module contains:
1. Input serializers - Query parameter validation
2. Response serializers - API documentation and output formatting
"""

from decimal import Decimal

from rest_framework import serializers

from apps.billing.models import ChargeType
from .exporters import CSV_BUILDERS


# =============================================================================
# Input Serializers (Query Parameter Validation)
# =============================================================================

class ExcludedTypesMixin(serializers.Serializer):
    """``?exclude=product,custom`` becomes a list of charge types."""

    exclude = serializers.CharField(required=False, allow_blank=True)

    def validate_exclude(self, value):
        types = [t.strip() for t in value.split(',') if t.strip()]
        unknown = [t for t in types if t not in ChargeType.values]
        if unknown:
            raise serializers.ValidationError(f"Unknown charge type(s): {', '.join(unknown)}")
        return types


class RevenueRangeQuerySerializer(ExcludedTypesMixin):
    """
    Validate an optional date-time range.

    The start/end order is checked by the service, which raises
    ``InvalidDateRangeError``.
    """

    start = serializers.DateTimeField(required=False)
    end = serializers.DateTimeField(required=False)


class DailyRevenueQuerySerializer(ExcludedTypesMixin):
    days = serializers.IntegerField(required=False, default=30, min_value=1, max_value=366)


class TopClientsQuerySerializer(ExcludedTypesMixin):
    top_n = serializers.IntegerField(required=False, default=3, min_value=1, max_value=100)


class GoalQuerySerializer(ExcludedTypesMixin):
    # Sign is checked by the service so a zero goal maps to InvalidGoalAmountError
    goal = serializers.DecimalField(max_digits=12, decimal_places=2)


class GrowthQuerySerializer(ExcludedTypesMixin):
    days = serializers.IntegerField(required=False, default=30, min_value=1, max_value=366)


class DashboardQuerySerializer(serializers.Serializer):
    goal = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, min_value=Decimal('0.01'))


class ProjectionInputSerializer(serializers.Serializer):
    initial = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=Decimal('0.00'))
    annual_return_pct = serializers.DecimalField(max_digits=6, decimal_places=2)
    years = serializers.IntegerField(max_value=50)


class ExportQuerySerializer(serializers.Serializer):
    filename = serializers.CharField(required=False, max_length=120)
    save = serializers.BooleanField(required=False, default=False)

    def validate(self, attrs):
        entity = self.context['entity']
        if entity not in CSV_BUILDERS:
            raise serializers.ValidationError(f"Unknown export '{entity}'")
        attrs.setdefault('filename', f"furfolio_{entity}")
        return attrs


# =============================================================================
# Response Serializers
# =============================================================================

class TotalRevenueSerializer(serializers.Serializer):
    start = serializers.DateTimeField(allow_null=True)
    end = serializers.DateTimeField(allow_null=True)
    total = serializers.DecimalField(max_digits=14, decimal_places=2)


class DailyRevenueSerializer(serializers.Serializer):
    date = serializers.DateField()
    total = serializers.DecimalField(max_digits=14, decimal_places=2)


class ServiceRevenueSerializer(serializers.Serializer):
    service = serializers.CharField()
    label = serializers.CharField()
    total = serializers.DecimalField(max_digits=14, decimal_places=2)
    count = serializers.IntegerField()


class TopClientSerializer(serializers.Serializer):
    owner_id = serializers.UUIDField()
    owner_name = serializers.CharField()
    total = serializers.DecimalField(max_digits=14, decimal_places=2)


class GoalProgressSerializer(serializers.Serializer):
    goal = serializers.DecimalField(max_digits=14, decimal_places=2)
    total = serializers.DecimalField(max_digits=14, decimal_places=2)
    progress = serializers.FloatField()


class ProjectionResponseSerializer(serializers.Serializer):
    initial = serializers.DecimalField(max_digits=14, decimal_places=2)
    annual_return_pct = serializers.DecimalField(max_digits=6, decimal_places=2)
    years = serializers.IntegerField()
    values = serializers.ListField(child=serializers.DecimalField(max_digits=20, decimal_places=2))
