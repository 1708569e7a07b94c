from rest_framework import serializers


class AuditEntrySerializer(serializers.Serializer):
    id = serializers.UUIDField()
    timestamp = serializers.DateTimeField()
    event = serializers.CharField()
    actor = serializers.CharField(allow_null=True)
    escalate = serializers.BooleanField()
    payload = serializers.DictField()


class AuditLogSummarySerializer(serializers.Serializer):
    name = serializers.CharField()
    capacity = serializers.IntegerField()
    count = serializers.IntegerField()
    escalated = serializers.IntegerField()
    last_event_at = serializers.DateTimeField(allow_null=True)


class RecentQuerySerializer(serializers.Serializer):
    """Validate ``?limit=`` for recent entries."""

    limit = serializers.IntegerField(required=False, default=20, min_value=1, max_value=1000)
