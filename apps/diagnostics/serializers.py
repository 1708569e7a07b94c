from rest_framework import serializers

from .models import CrashReport


class CrashReportSerializer(serializers.ModelSerializer):
    summary = serializers.CharField(read_only=True)

    class Meta:
        model = CrashReport
        fields = [
            'id',
            'date',
            'report_type',
            'message',
            'stack_trace',
            'device_info',
            'resolved',
            'app_version',
            'build_number',
            'os_version',
            'device_model',
            'summary',
        ]
        read_only_fields = ['id', 'resolved']


class UpdateCheckSerializer(serializers.Serializer):
    current_version = serializers.CharField()
    latest_version = serializers.CharField(allow_null=True)
    update_available = serializers.BooleanField()
    mandatory_update = serializers.BooleanField()
    checked_at = serializers.DateTimeField(allow_null=True)
    error = serializers.CharField(allow_null=True)


class RestoreInputSerializer(serializers.Serializer):
    data = serializers.CharField(help_text='JSON document produced by the backup export')
