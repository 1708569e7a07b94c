from django.http import HttpResponse
from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.exceptions import NotFound
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema

from apps.core.exceptions import DuplicateEntryError
from apps.core.pagination import StandardPagination
from .models import DogOwner, Dog
from .serializers import (
    DogOwnerSerializer,
    DogOwnerListSerializer,
    DogOwnerCreateSerializer,
    DogSerializer,
    DogWriteSerializer,
    OwnerFilterSerializer,
    DuplicateQuerySerializer,
    OwnerBadgeInputSerializer,
    DogTagInputSerializer,
)
from .services import (
    create_owner,
    update_owner,
    deactivate_owner,
    add_owner_badge,
    remove_owner_badge,
    search_owners,
    find_potential_duplicates,
    add_dog,
    update_dog,
    add_dog_tag,
    remove_dog_tag,
    DuplicateOwnerError,
    OwnerNotFoundError,
)


class DogOwnerViewSet(viewsets.ModelViewSet):
    """
    ViewSet for client (dog owner) management.

    list: Search owners (?search=, ?is_active=)
    create: Register a client (rejects near-duplicates unless allow_duplicate)
    retrieve/update/destroy: Manage a client
    badges: Add (POST) or remove (DELETE) an owner badge
    audit_log: Full audit trail
    export: Owner profile as JSON
    deactivate: Mark the owner inactive
    duplicates: Look up potential duplicates before creating
    """

    queryset = DogOwner.objects.prefetch_related('dogs', 'tags')
    serializer_class = DogOwnerSerializer
    pagination_class = StandardPagination

    def get_queryset(self):
        if self.action != 'list':
            return super().get_queryset()
        filter_serializer = OwnerFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        return search_owners(**filter_serializer.validated_data)

    def get_serializer_class(self):
        if self.action == 'list':
            return DogOwnerListSerializer
        if self.action == 'create':
            return DogOwnerCreateSerializer
        return DogOwnerSerializer

    @extend_schema(request=DogOwnerCreateSerializer, responses={201: DogOwnerSerializer})
    def create(self, request, *args, **kwargs):
        serializer = DogOwnerCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            owner = create_owner(created_by=request.user, **serializer.validated_data)
        except DuplicateOwnerError as e:
            raise DuplicateEntryError(str(e))
        return Response(DogOwnerSerializer(owner).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        owner = self.get_object()
        serializer = DogOwnerSerializer(owner, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        owner = update_owner(owner_id=owner.id, updated_by=request.user, **serializer.validated_data)
        return Response(DogOwnerSerializer(owner).data)

    @extend_schema(request=OwnerBadgeInputSerializer, responses={200: DogOwnerSerializer})
    @action(detail=True, methods=['post', 'delete'])
    def badges(self, request, pk=None):
        """
        Add or remove an owner badge.

        POST   /api/owners/{id}/badges/  {"badge": "loyal"}
        DELETE /api/owners/{id}/badges/  {"badge": "loyal"}
        """
        serializer = OwnerBadgeInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        service = add_owner_badge if request.method == 'POST' else remove_owner_badge
        owner = service(
            owner_id=self.get_object().id,
            badge=serializer.validated_data['badge'],
            updated_by=request.user,
        )
        return Response(DogOwnerSerializer(owner).data)

    @action(detail=True, methods=['get'])
    def audit_log(self, request, pk=None):
        owner = self.get_object()
        return Response({'owner': str(owner.id), 'entries': owner.audit_log})

    @action(detail=True, methods=['get'])
    def export(self, request, pk=None):
        owner = self.get_object()
        response = HttpResponse(owner.export_json(), content_type='application/json')
        response['Content-Disposition'] = f'attachment; filename="owner_{owner.id}.json"'
        return response

    @extend_schema(request=None, responses={200: DogOwnerSerializer})
    @action(detail=True, methods=['post'])
    def deactivate(self, request, pk=None):
        owner = deactivate_owner(owner_id=self.get_object().id, updated_by=request.user)
        return Response(DogOwnerSerializer(owner).data)

    @extend_schema(parameters=[DuplicateQuerySerializer], responses={200: DogOwnerListSerializer(many=True)})
    @action(detail=False, methods=['get'])
    def duplicates(self, request):
        query = DuplicateQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        matches = find_potential_duplicates(**query.validated_data)
        return Response([
            {
                'owner': DogOwnerListSerializer(owner).data,
                'score': score,
                'match_type': match_type,
            }
            for owner, score, match_type in matches
        ])


class DogViewSet(viewsets.ModelViewSet):
    """
    ViewSet for dogs.

    list: All dogs (?owner= to filter)
    create: Add a dog to an owner
    tags: Add (POST) or remove (DELETE) a business tag
    """

    queryset = Dog.objects.select_related('owner')
    serializer_class = DogSerializer
    pagination_class = StandardPagination

    def get_queryset(self):
        queryset = super().get_queryset()
        owner_id = self.request.query_params.get('owner')
        if owner_id:
            queryset = queryset.filter(owner_id=owner_id)
        return queryset

    @extend_schema(request=DogWriteSerializer, responses={201: DogSerializer})
    def create(self, request, *args, **kwargs):
        serializer = DogWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        owner = data.pop('owner')
        try:
            dog = add_dog(owner_id=owner.id, created_by=request.user, **data)
        except OwnerNotFoundError as e:
            raise NotFound(str(e))
        return Response(DogSerializer(dog).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        dog = self.get_object()
        serializer = DogSerializer(dog, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        changes = dict(serializer.validated_data)
        changes.pop('owner', None)
        dog = update_dog(dog_id=dog.id, updated_by=request.user, **changes)
        return Response(DogSerializer(dog).data)

    @extend_schema(request=DogTagInputSerializer, responses={200: DogSerializer})
    @action(detail=True, methods=['post', 'delete'])
    def tags(self, request, pk=None):
        serializer = DogTagInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        service = add_dog_tag if request.method == 'POST' else remove_dog_tag
        dog = service(
            dog_id=self.get_object().id,
            tag=serializer.validated_data['tag'],
            updated_by=request.user,
        )
        return Response(DogSerializer(dog).data)
