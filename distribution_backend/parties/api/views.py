# parties/api/views.py

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from parties.api.serializers import (
    BalanceEntrySerializer,
    CounterpartyCreateSerializer,
    CounterpartySerializer,
)
from parties.models import Counterparty
from parties.services.counterparty_service import (
    add_balance,
    create_counterparty,
    get_counterparty,
    update_counterparty,
)
from users.permissions import CanManageLedgers


class CounterpartyListCreateView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = CounterpartySerializer

    @extend_schema(tags=["parties"], responses=CounterpartySerializer(many=True))
    def get(self, request):
        qs = Counterparty.objects.all().order_by("name")
        role = request.query_params.get("role")
        if role:
            qs = qs.filter(role__in=[role, Counterparty.ROLE_BOTH])
        if request.query_params.get("active") == "true":
            qs = qs.filter(status=Counterparty.STATUS_ACTIVE)

        page = self.paginate_queryset(qs)
        if page is not None:
            return self.get_paginated_response(CounterpartySerializer(page, many=True).data)
        return Response(CounterpartySerializer(qs, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        tags=["parties"],
        request=CounterpartyCreateSerializer,
        responses={201: CounterpartySerializer},
    )
    def post(self, request):
        s = CounterpartyCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        counterparty = create_counterparty(data=s.validated_data)
        return Response(CounterpartySerializer(counterparty).data, status=status.HTTP_201_CREATED)


class CounterpartyDetailView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = CounterpartySerializer

    @extend_schema(tags=["parties"], responses=CounterpartySerializer)
    def get(self, request, counterparty_id):
        counterparty = get_counterparty(counterparty_id)
        return Response(CounterpartySerializer(counterparty).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["parties"], request=CounterpartySerializer, responses=CounterpartySerializer)
    def patch(self, request, counterparty_id):
        changes = request.data.dict() if hasattr(request.data, "dict") else dict(request.data)
        counterparty = update_counterparty(counterparty_id=counterparty_id, changes=changes)
        return Response(CounterpartySerializer(counterparty).data, status=status.HTTP_200_OK)


class CounterpartyBalanceEntryView(GenericAPIView):
    permission_classes = [CanManageLedgers]
    serializer_class = BalanceEntrySerializer

    @extend_schema(tags=["parties"], request=BalanceEntrySerializer, responses=CounterpartySerializer)
    def post(self, request, counterparty_id):
        s = BalanceEntrySerializer(data=request.data)
        s.is_valid(raise_exception=True)
        counterparty = add_balance(
            counterparty_id=counterparty_id,
            balance_type=s.validated_data["balance_type"],
            amount=s.validated_data["amount"],
        )
        return Response(CounterpartySerializer(counterparty).data, status=status.HTTP_200_OK)
