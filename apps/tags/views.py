from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.exceptions import NotFound
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema

from apps.audit.buffer import get_audit_log
from apps.audit.serializers import AuditEntrySerializer
from apps.core.exceptions import DuplicateEntryError
from apps.owners.models import DogOwner
from .models import Tag
from .serializers import TagSerializer, TagFilterSerializer, ApplyTagInputSerializer, TagUpdateSerializer
from .services import (
    create_tag,
    edit_tag,
    delete_tag,
    apply_tag,
    search_tags,
    DuplicateTagError,
    TagNotFoundError,
)


class TagViewSet(viewsets.ModelViewSet):
    """
    Business tag catalogue.

    list: Search tags (?search=, ?tag_type=)
    create/update/destroy: Manage tags (recorded in the tag audit log)
    apply: Attach a tag to an owner
    audit: Recent tag audit events
    """

    queryset = Tag.objects.all()
    serializer_class = TagSerializer

    def get_queryset(self):
        if self.action != 'list':
            return super().get_queryset()
        filter_serializer = TagFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        return search_tags(**filter_serializer.validated_data)

    def perform_create(self, serializer):
        try:
            serializer.instance = create_tag(
                actor=self.request.user.email,
                **serializer.validated_data,
            )
        except DuplicateTagError as e:
            raise DuplicateEntryError(str(e))

    def update(self, request, *args, **kwargs):
        tag = self.get_object()
        input_serializer = TagUpdateSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)
        try:
            tag = edit_tag(tag_id=tag.id, actor=request.user.email, **input_serializer.validated_data)
        except DuplicateTagError as e:
            raise DuplicateEntryError(str(e))
        return Response(TagSerializer(tag).data)

    def perform_destroy(self, instance):
        delete_tag(tag_id=instance.id, actor=self.request.user.email)

    @extend_schema(request=ApplyTagInputSerializer, responses={200: TagSerializer}, tags=['tags'])
    @action(detail=True, methods=['post'])
    def apply(self, request, pk=None):
        """
        Attach this tag to an owner.

        POST /api/tags/{id}/apply/
        Body: {"owner": "<owner uuid>"}
        """
        input_serializer = ApplyTagInputSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)
        try:
            tag = apply_tag(
                tag_id=self.get_object().id,
                owner_id=input_serializer.validated_data['owner'],
                actor=request.user.email,
            )
        except (TagNotFoundError, DogOwner.DoesNotExist) as e:
            raise NotFound(str(e))
        return Response(TagSerializer(tag).data, status=status.HTTP_200_OK)

    @extend_schema(responses={200: AuditEntrySerializer(many=True)}, tags=['tags'])
    @action(detail=False, methods=['get'])
    def audit(self, request):
        """Recent tag audit events, oldest first."""
        entries = [entry.to_dict() for entry in get_audit_log('tag').recent(20)]
        return Response(AuditEntrySerializer(entries, many=True).data)
