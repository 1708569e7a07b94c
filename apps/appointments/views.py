from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.exceptions import NotFound
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema

from apps.core.exceptions import DuplicateEntryError, InvalidInputError
from apps.core.pagination import StandardPagination
from apps.owners.services import OwnersServiceError
from .models import Appointment, GroomingSession
from .serializers import (
    AppointmentSerializer,
    AppointmentCreateSerializer,
    AppointmentUpdateSerializer,
    StatusInputSerializer,
    NoteInputSerializer,
    CancelInputSerializer,
    UpcomingQuerySerializer,
    GroomingSessionSerializer,
    SessionBadgeInputSerializer,
)
from .services import (
    schedule_appointment,
    update_appointment,
    update_appointment_status,
    cancel_appointment,
    add_appointment_note,
    delete_appointment,
    upcoming_appointments,
    log_grooming_session,
    update_grooming_session,
    set_session_badge,
    AppointmentConflictError,
    InvalidStatusTransitionError,
    DogOwnerMismatchError,
)


class AppointmentViewSet(viewsets.ModelViewSet):
    """
    ViewSet for grooming appointments.

    list: All appointments (?dog=, ?owner=, ?status=)
    create: Book an appointment (409 when the dog is already booked)
    update: Reschedule or change the service
    status: Move to a new status (completing credits loyalty points)
    notes: Append a note
    cancel: Cancel with an optional reason
    audit_log: Structured audit trail
    upcoming: Scheduled appointments in the next ?days= (default 7)
    """

    queryset = Appointment.objects.select_related('owner', 'dog')
    serializer_class = AppointmentSerializer
    pagination_class = StandardPagination

    def get_queryset(self):
        queryset = super().get_queryset()
        params = self.request.query_params
        if params.get('dog'):
            queryset = queryset.filter(dog_id=params['dog'])
        if params.get('owner'):
            queryset = queryset.filter(owner_id=params['owner'])
        if params.get('status'):
            queryset = queryset.filter(status=params['status'])
        return queryset

    @extend_schema(request=AppointmentCreateSerializer, responses={201: AppointmentSerializer})
    def create(self, request, *args, **kwargs):
        serializer = AppointmentCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        try:
            appointment = schedule_appointment(
                owner_id=data.pop('owner').id,
                dog_id=data.pop('dog').id,
                created_by=request.user,
                **data,
            )
        except AppointmentConflictError as e:
            raise DuplicateEntryError(str(e))
        except DogOwnerMismatchError as e:
            raise InvalidInputError(str(e))
        except OwnersServiceError as e:
            raise NotFound(str(e))
        return Response(AppointmentSerializer(appointment).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=AppointmentUpdateSerializer, responses={200: AppointmentSerializer})
    def update(self, request, *args, **kwargs):
        appointment = self.get_object()
        serializer = AppointmentUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            appointment = update_appointment(
                appointment_id=appointment.id,
                updated_by=request.user,
                **serializer.validated_data,
            )
        except AppointmentConflictError as e:
            raise DuplicateEntryError(str(e))
        return Response(AppointmentSerializer(appointment).data)

    def perform_destroy(self, instance):
        delete_appointment(appointment_id=instance.id, deleted_by=self.request.user)

    @extend_schema(request=StatusInputSerializer, responses={200: AppointmentSerializer})
    @action(detail=True, methods=['post'], url_path='status')
    def set_status(self, request, pk=None):
        """
        Change appointment status.

        POST /api/appointments/{id}/status/  {"status": "completed"}
        """
        serializer = StatusInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            appointment = update_appointment_status(
                appointment_id=self.get_object().id,
                status=serializer.validated_data['status'],
                updated_by=request.user,
            )
        except InvalidStatusTransitionError as e:
            raise InvalidInputError(str(e))
        return Response(AppointmentSerializer(appointment).data)

    @extend_schema(request=NoteInputSerializer, responses={200: AppointmentSerializer})
    @action(detail=True, methods=['post'])
    def notes(self, request, pk=None):
        serializer = NoteInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        appointment = add_appointment_note(
            appointment_id=self.get_object().id,
            note=serializer.validated_data['note'],
            updated_by=request.user,
        )
        return Response(AppointmentSerializer(appointment).data)

    @extend_schema(request=CancelInputSerializer, responses={200: AppointmentSerializer})
    @action(detail=True, methods=['post'])
    def cancel(self, request, pk=None):
        serializer = CancelInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            appointment = cancel_appointment(
                appointment_id=self.get_object().id,
                reason=serializer.validated_data['reason'],
                updated_by=request.user,
            )
        except InvalidStatusTransitionError as e:
            raise InvalidInputError(str(e))
        return Response(AppointmentSerializer(appointment).data)

    @action(detail=True, methods=['get'])
    def audit_log(self, request, pk=None):
        appointment = self.get_object()
        return Response({'appointment': str(appointment.id), 'entries': appointment.audit_log})

    @extend_schema(parameters=[UpcomingQuerySerializer], responses={200: AppointmentSerializer(many=True)})
    @action(detail=False, methods=['get'])
    def upcoming(self, request):
        query = UpcomingQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        appointments = upcoming_appointments(**query.validated_data)
        return Response(AppointmentSerializer(appointments, many=True).data)


class GroomingSessionViewSet(viewsets.ModelViewSet):
    """
    ViewSet for grooming session records.

    list: All sessions (?dog= to filter)
    create: Log a session (first session per dog is badged)
    badges: Add (POST) or remove (DELETE) a session badge
    """

    queryset = GroomingSession.objects.select_related('dog', 'staff')
    serializer_class = GroomingSessionSerializer
    pagination_class = StandardPagination

    def get_queryset(self):
        queryset = super().get_queryset()
        dog_id = self.request.query_params.get('dog')
        if dog_id:
            queryset = queryset.filter(dog_id=dog_id)
        return queryset

    def create(self, request, *args, **kwargs):
        serializer = GroomingSessionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        session = log_grooming_session(
            dog_id=data.pop('dog').id,
            appointment=data.pop('appointment', None),
            staff=request.user,
            **data,
        )
        return Response(GroomingSessionSerializer(session).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        session = self.get_object()
        serializer = GroomingSessionSerializer(session, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        changes = dict(serializer.validated_data)
        changes.pop('dog', None)
        changes.pop('appointment', None)
        session = update_grooming_session(session_id=session.id, updated_by=request.user, **changes)
        return Response(GroomingSessionSerializer(session).data)

    @extend_schema(request=SessionBadgeInputSerializer, responses={200: GroomingSessionSerializer})
    @action(detail=True, methods=['post', 'delete'])
    def badges(self, request, pk=None):
        serializer = SessionBadgeInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        session = set_session_badge(
            session_id=self.get_object().id,
            badge=serializer.validated_data['badge'],
            add=request.method == 'POST',
            updated_by=request.user,
        )
        return Response(GroomingSessionSerializer(session).data)
