from django.http import HttpResponse
from django.utils import timezone
from drf_spectacular.utils import extend_schema
from drf_spectacular.types import OpenApiTypes
from rest_framework import viewsets, mixins, status
from rest_framework.decorators import api_view, permission_classes, action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from apps.core.pagination import StandardPagination
from apps.core.permissions import IsAdminRole, IsEnabledUser
from .models import CrashReport
from .serializers import CrashReportSerializer, UpdateCheckSerializer, RestoreInputSerializer
from .services import (
    log_crash,
    resolve_crash,
    AppUpdateChecker,
    export_backup,
    restore_backup,
)


class CrashReportViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    viewsets.GenericViewSet,
):
    """
    Crash reports.

    Any signed-in client may file a report; listing and resolving are
    limited to owners and admins.
    """

    queryset = CrashReport.objects.all()
    serializer_class = CrashReportSerializer
    pagination_class = StandardPagination

    def get_permissions(self):
        if self.action == 'create':
            return [IsAuthenticated(), IsEnabledUser()]
        return [IsAuthenticated(), IsAdminRole()]

    def get_queryset(self):
        queryset = super().get_queryset()
        resolved = self.request.query_params.get('resolved')
        if resolved in ('true', 'false'):
            queryset = queryset.filter(resolved=resolved == 'true')
        return queryset

    def perform_create(self, serializer):
        serializer.instance = log_crash(actor=self.request.user.email, **serializer.validated_data)

    @extend_schema(request=None, responses={200: CrashReportSerializer})
    @action(detail=True, methods=['post'])
    def resolve(self, request, pk=None):
        report = resolve_crash(report_id=self.get_object().id, actor=request.user.email)
        return Response(CrashReportSerializer(report).data)


@extend_schema(responses={200: UpdateCheckSerializer}, tags=['diagnostics'])
@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminRole])
def check_updates(request):
    result = AppUpdateChecker().check_for_updates()
    return Response(UpdateCheckSerializer(result.to_dict()).data)


@extend_schema(responses={200: OpenApiTypes.OBJECT}, tags=['diagnostics'])
@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminRole])
def changelog(request):
    return Response({'changelog': AppUpdateChecker().fetch_changelog()})


@extend_schema(responses={200: OpenApiTypes.STR}, tags=['diagnostics'])
@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminRole])
def backup_export(request):
    data = export_backup(actor=request.user.email)
    filename = f"furfolio_backup_{timezone.now():%Y%m%d_%H%M%S}.json"
    response = HttpResponse(data, content_type='application/json')
    response['Content-Disposition'] = f'attachment; filename="{filename}"'
    return response


@extend_schema(request=RestoreInputSerializer, responses={200: OpenApiTypes.OBJECT}, tags=['diagnostics'])
@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def backup_restore(request):
    serializer = RestoreInputSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    count = restore_backup(serializer.validated_data['data'], actor=request.user.email)
    return Response({'restored': count}, status=status.HTTP_200_OK)
