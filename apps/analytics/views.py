from django.http import HttpResponse
from drf_spectacular.utils import extend_schema, OpenApiParameter
from drf_spectacular.types import OpenApiTypes
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from apps.appointments.models import Appointment
from apps.billing.models import Charge
from apps.core.exceptions import InvalidInputError, SaveFailedError
from apps.core.permissions import IsAdminRole
from apps.owners.models import DogOwner, Dog
from .analytics import RevenueQueries
from .exceptions import AnalyticsServiceError, ExportFailedError
from .exporters import export_csv
from .projections import project_growth
from .serializers import (
    RevenueRangeQuerySerializer,
    DailyRevenueQuerySerializer,
    TopClientsQuerySerializer,
    GoalQuerySerializer,
    GrowthQuerySerializer,
    DashboardQuerySerializer,
    ProjectionInputSerializer,
    ExportQuerySerializer,
    TotalRevenueSerializer,
    DailyRevenueSerializer,
    ServiceRevenueSerializer,
    TopClientSerializer,
    GoalProgressSerializer,
    ProjectionResponseSerializer,
)

EXPORT_QUERYSETS = {
    'owners': lambda: DogOwner.objects.prefetch_related('dogs').order_by('owner_name'),
    'dogs': lambda: Dog.objects.select_related('owner').order_by('name'),
    'appointments': lambda: Appointment.objects.select_related('owner', 'dog').order_by('date'),
    'charges': lambda: Charge.objects.select_related('owner', 'dog').order_by('date'),
}


def _validated(serializer_class, request):
    serializer = serializer_class(data=request.query_params)
    serializer.is_valid(raise_exception=True)
    return serializer.validated_data


@extend_schema(
    parameters=[DashboardQuerySerializer],
    description="Revenue, appointments, clients and outstanding balance in one payload.",
    tags=['analytics'],
)
@api_view(['GET'])
def dashboard(request):
    params = _validated(DashboardQuerySerializer, request)
    return Response(RevenueQueries.dashboard(goal=params.get('goal')))


@extend_schema(
    parameters=[RevenueRangeQuerySerializer],
    responses={200: TotalRevenueSerializer},
    description="Total revenue between optional start and end.",
    tags=['analytics'],
)
@api_view(['GET'])
def total_revenue(request):
    params = _validated(RevenueRangeQuerySerializer, request)
    try:
        total = RevenueQueries.total_revenue(
            start=params.get('start'),
            end=params.get('end'),
            excluded_types=params.get('exclude'),
        )
    except AnalyticsServiceError as e:
        raise InvalidInputError(str(e))
    return Response(TotalRevenueSerializer({
        'start': params.get('start'),
        'end': params.get('end'),
        'total': total,
    }).data)


@extend_schema(
    parameters=[DailyRevenueQuerySerializer],
    responses={200: DailyRevenueSerializer(many=True)},
    description="Revenue per day for the last N days, oldest first, zero-filled.",
    tags=['analytics'],
)
@api_view(['GET'])
def daily_revenue(request):
    params = _validated(DailyRevenueQuerySerializer, request)
    data = RevenueQueries.daily_revenue(days=params['days'], excluded_types=params.get('exclude'))
    return Response(DailyRevenueSerializer(data, many=True).data)


@extend_schema(
    parameters=[RevenueRangeQuerySerializer],
    responses={200: ServiceRevenueSerializer(many=True)},
    description="Revenue grouped by service, highest first.",
    tags=['analytics'],
)
@api_view(['GET'])
def revenue_by_service(request):
    params = _validated(RevenueRangeQuerySerializer, request)
    data = RevenueQueries.revenue_by_service(excluded_types=params.get('exclude'))
    return Response(ServiceRevenueSerializer(data, many=True).data)


@extend_schema(
    parameters=[TopClientsQuerySerializer],
    responses={200: TopClientSerializer(many=True)},
    description="Top clients by total spend.",
    tags=['analytics'],
)
@api_view(['GET'])
def top_clients(request):
    params = _validated(TopClientsQuerySerializer, request)
    data = RevenueQueries.top_clients(top_n=params['top_n'], excluded_types=params.get('exclude'))
    return Response(TopClientSerializer(data, many=True).data)


@extend_schema(
    parameters=[GoalQuerySerializer],
    responses={200: GoalProgressSerializer},
    description="This month's revenue against a goal (progress capped at 1.0).",
    tags=['analytics'],
)
@api_view(['GET'])
def goal_progress(request):
    params = _validated(GoalQuerySerializer, request)
    try:
        data = RevenueQueries.monthly_goal_progress(params['goal'], excluded_types=params.get('exclude'))
    except AnalyticsServiceError as e:
        raise InvalidInputError(str(e))
    return Response(GoalProgressSerializer(data).data)


@extend_schema(
    parameters=[GrowthQuerySerializer],
    description="Percent revenue change against the previous period of the same length.",
    tags=['analytics'],
)
@api_view(['GET'])
def revenue_growth(request):
    params = _validated(GrowthQuerySerializer, request)
    growth = RevenueQueries.revenue_growth(days=params['days'], excluded_types=params.get('exclude'))
    return Response({'days': params['days'], 'growth_percent': growth})


@extend_schema(
    request=ProjectionInputSerializer,
    responses={200: ProjectionResponseSerializer},
    description="Compound growth of an initial amount for each year up to `years`.",
    tags=['analytics'],
)
@api_view(['POST'])
def projection(request):
    serializer = ProjectionInputSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    params = serializer.validated_data
    try:
        values = project_growth(
            params['initial'],
            params['annual_return_pct'],
            params['years'],
            actor=request.user.email,
        )
    except AnalyticsServiceError as e:
        raise InvalidInputError(str(e))
    return Response(ProjectionResponseSerializer({**params, 'values': values}).data)


@extend_schema(
    parameters=[
        OpenApiParameter('filename', OpenApiTypes.STR, description='File name (.csv appended when missing)'),
        OpenApiParameter('save', OpenApiTypes.BOOL, description='Also write the file on the server'),
    ],
    responses={200: OpenApiTypes.STR},
    description="Download owners, dogs, appointments or charges as CSV.",
    tags=['analytics'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminRole])
def export_entity(request, entity):
    serializer = ExportQuerySerializer(data=request.query_params, context={'entity': entity})
    serializer.is_valid(raise_exception=True)
    params = serializer.validated_data
    try:
        filename, text, _ = export_csv(
            entity,
            EXPORT_QUERYSETS[entity](),
            params['filename'],
            actor=request.user.email,
            write_file=params['save'],
        )
    except ExportFailedError as e:
        raise SaveFailedError(str(e))

    response = HttpResponse(text, content_type='text/csv')
    response['Content-Disposition'] = f'attachment; filename="{filename}"'
    return response
