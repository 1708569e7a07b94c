from rest_framework import viewsets, status, mixins
from rest_framework.decorators import action
from rest_framework.exceptions import NotFound
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema

from apps.core.exceptions import DuplicateEntryError, InvalidInputError
from apps.core.pagination import StandardPagination
from apps.owners.services import OwnerNotFoundError
from .models import Charge
from .serializers import (
    ChargeSerializer,
    ChargeCreateSerializer,
    MarkPaidSerializer,
    VoidInputSerializer,
)
from .services import (
    record_charge,
    mark_charge_paid,
    void_charge,
    outstanding_charges,
    ChargeAlreadyPaidError,
    InvalidPaymentMethodError,
)


class ChargeViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    """
    ViewSet for charges.

    Charges are never edited in place: pay them with mark_paid or void them
    with DELETE.

    list: All charges (?owner=, ?is_paid=true|false)
    mark_paid: Settle an unpaid charge
    outstanding: Unpaid charges, oldest first
    """

    queryset = Charge.objects.select_related('owner', 'dog')
    serializer_class = ChargeSerializer
    pagination_class = StandardPagination

    def get_queryset(self):
        queryset = super().get_queryset()
        params = self.request.query_params
        if params.get('owner'):
            queryset = queryset.filter(owner_id=params['owner'])
        if params.get('is_paid') in ('true', 'false'):
            queryset = queryset.filter(is_paid=params['is_paid'] == 'true')
        return queryset

    @extend_schema(request=ChargeCreateSerializer, responses={201: ChargeSerializer})
    def create(self, request, *args, **kwargs):
        serializer = ChargeCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        try:
            charge = record_charge(owner_id=data.pop('owner').id, created_by=request.user, **data)
        except OwnerNotFoundError as e:
            raise NotFound(str(e))
        return Response(ChargeSerializer(charge).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=VoidInputSerializer, responses={204: None})
    def destroy(self, request, *args, **kwargs):
        serializer = VoidInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        void_charge(
            charge_id=self.get_object().id,
            voided_by=request.user,
            reason=serializer.validated_data['reason'],
        )
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(request=MarkPaidSerializer, responses={200: ChargeSerializer})
    @action(detail=True, methods=['post'])
    def mark_paid(self, request, pk=None):
        """
        Mark a charge as paid.

        POST /api/billing/charges/{id}/mark_paid/  {"payment_method": "cash"}
        """
        serializer = MarkPaidSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            charge = mark_charge_paid(
                charge_id=self.get_object().id,
                payment_method=serializer.validated_data['payment_method'],
                updated_by=request.user,
            )
        except ChargeAlreadyPaidError as e:
            raise DuplicateEntryError(str(e))
        except InvalidPaymentMethodError as e:
            raise InvalidInputError(str(e))
        return Response(ChargeSerializer(charge).data)

    @action(detail=False, methods=['get'])
    def outstanding(self, request):
        charges = outstanding_charges(owner_id=request.query_params.get('owner') or None)
        page = self.paginate_queryset(charges)
        if page is not None:
            return self.get_paginated_response(ChargeSerializer(page, many=True).data)
        return Response(ChargeSerializer(charges, many=True).data)
