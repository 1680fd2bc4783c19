# investors/api/views.py

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from investors.api.serializers import (
    InvestmentCreateSerializer,
    InvestmentSerializer,
    InvestorCreateSerializer,
    InvestorSerializer,
    LedgerEntryCreateSerializer,
    LedgerEntrySerializer,
    LedgerEntryUpdateSerializer,
    ProfitRecordSerializer,
)
from investors.models import Investor, InvestorProfitRecord
from investors.services.investor_service import (
    add_investment,
    add_investor,
    delete_ledger_entry,
    edit_ledger_entry,
    investor_summary,
    record_ledger_entry,
    update_investor,
)
from users.permissions import CanManageInvestors


class InvestorListCreateView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = InvestorSerializer

    @extend_schema(tags=["investors"], responses=InvestorSerializer(many=True))
    def get(self, request):
        qs = Investor.objects.all().order_by("join_date", "name")
        return Response(InvestorSerializer(qs, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["investors"], request=InvestorCreateSerializer, responses={201: InvestorSerializer})
    def post(self, request):
        if not CanManageInvestors().has_permission(request, self):
            self.permission_denied(request)
        s = InvestorCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        investor = add_investor(data=s.validated_data)
        return Response(InvestorSerializer(investor).data, status=status.HTTP_201_CREATED)


class InvestorDetailView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = InvestorSerializer

    @extend_schema(tags=["investors"])
    def get(self, request, investor_id):
        summary = investor_summary(investor_id=investor_id)
        records = InvestorProfitRecord.objects.filter(investor=summary["investor"]).order_by("-created_at")[:100]
        return Response(
            {
                "investor": InvestorSerializer(summary["investor"]).data,
                "capital": str(summary["capital"]),
                "net_balance": str(summary["net_balance"]),
                "monthly_profit": [
                    {
                        "month": row["month"],
                        "investor_share": str(row["investor_share"]),
                        "owner_share": str(row["owner_share"]),
                    }
                    for row in summary["monthly_profit"]
                ],
                "ledger": LedgerEntrySerializer(summary["ledger"], many=True).data,
                "profit_records": ProfitRecordSerializer(records, many=True).data,
            },
            status=status.HTTP_200_OK,
        )

    @extend_schema(tags=["investors"], responses=InvestorSerializer)
    def patch(self, request, investor_id):
        if not CanManageInvestors().has_permission(request, self):
            self.permission_denied(request)
        changes = request.data.dict() if hasattr(request.data, "dict") else dict(request.data)
        investor = update_investor(investor_id=investor_id, changes=changes)
        return Response(InvestorSerializer(investor).data, status=status.HTTP_200_OK)


class InvestmentCreateView(GenericAPIView):
    permission_classes = [CanManageInvestors]
    serializer_class = InvestmentCreateSerializer

    @extend_schema(tags=["investors"], request=InvestmentCreateSerializer, responses={201: InvestmentSerializer})
    def post(self, request, investor_id):
        s = InvestmentCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        investment = add_investment(
            investor_id=investor_id,
            amount=s.validated_data["amount"],
            date=s.validated_data.get("date"),
        )
        return Response(InvestmentSerializer(investment).data, status=status.HTTP_201_CREATED)


class LedgerEntryCreateView(GenericAPIView):
    permission_classes = [CanManageInvestors]
    serializer_class = LedgerEntryCreateSerializer

    @extend_schema(tags=["investors"], request=LedgerEntryCreateSerializer, responses={201: LedgerEntrySerializer})
    def post(self, request, investor_id):
        s = LedgerEntryCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        entry = record_ledger_entry(
            investor_id=investor_id,
            entry_type=s.validated_data["type"],
            amount=s.validated_data["amount"],
            note=s.validated_data.get("note", ""),
            date=s.validated_data.get("date"),
        )
        return Response(LedgerEntrySerializer(entry).data, status=status.HTTP_201_CREATED)


class LedgerEntryDetailView(GenericAPIView):
    permission_classes = [CanManageInvestors]
    serializer_class = LedgerEntryUpdateSerializer

    @extend_schema(tags=["investors"], request=LedgerEntryUpdateSerializer, responses=LedgerEntrySerializer)
    def patch(self, request, investor_id, entry_id):
        s = LedgerEntryUpdateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        entry = edit_ledger_entry(investor_id=investor_id, entry_id=entry_id, changes=s.validated_data)
        return Response(LedgerEntrySerializer(entry).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["investors"], responses={204: None})
    def delete(self, request, investor_id, entry_id):
        delete_ledger_entry(investor_id=investor_id, entry_id=entry_id)
        return Response(status=status.HTTP_204_NO_CONTENT)
