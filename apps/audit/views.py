from django.conf import settings
from django.http import HttpResponse
from drf_spectacular.utils import extend_schema, OpenApiParameter
from drf_spectacular.types import OpenApiTypes
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import NotFound
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from apps.core.permissions import IsAdminRole
from .buffer import get_audit_log, registered_logs
from .serializers import AuditEntrySerializer, AuditLogSummarySerializer, RecentQuerySerializer


def _known_log(name):
    """Return the named log if it is configured or already in use."""
    known = set(settings.FURFOLIO_AUDIT_CAPACITIES) | {log.name for log in registered_logs()}
    if name not in known:
        raise NotFound(f"Unknown audit log '{name}'")
    return get_audit_log(name)


@extend_schema(
    responses={200: AuditLogSummarySerializer(many=True)},
    description="List every audit log with its size and capacity.",
    tags=['audit'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminRole])
def list_logs(request):
    for name in settings.FURFOLIO_AUDIT_CAPACITIES:
        get_audit_log(name)
    summaries = [log.summary() for log in registered_logs()]
    return Response(AuditLogSummarySerializer(summaries, many=True).data)


@extend_schema(
    parameters=[OpenApiParameter('limit', OpenApiTypes.INT, description='Number of entries', default=20)],
    responses={200: AuditEntrySerializer(many=True)},
    description="Most recent entries of one audit log, oldest first.",
    tags=['audit'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminRole])
def recent_entries(request, name):
    log = _known_log(name)
    query = RecentQuerySerializer(data=request.query_params)
    query.is_valid(raise_exception=True)
    entries = [entry.to_dict() for entry in log.recent(query.validated_data['limit'])]
    return Response(AuditEntrySerializer(entries, many=True).data)


@extend_schema(
    responses={200: OpenApiTypes.STR},
    description="Download one audit log as a pretty-printed JSON document.",
    tags=['audit'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminRole])
def export_log(request, name):
    log = _known_log(name)
    get_audit_log('admin_panel').record('audit_exported', actor=request.user.email, log=name)
    response = HttpResponse(log.export_json(), content_type='application/json')
    response['Content-Disposition'] = f'attachment; filename="{name}_audit.json"'
    return response


@extend_schema(
    request=None,
    responses={204: None},
    description="Clear one audit log. The clear itself is recorded in the admin panel log.",
    tags=['audit'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def clear_log(request, name):
    log = _known_log(name)
    dropped = len(log)
    log.clear()
    get_audit_log('admin_panel').record(
        'audit_cleared',
        actor=request.user.email,
        escalate=True,
        log=name,
        dropped=dropped,
    )
    return Response(status=204)
