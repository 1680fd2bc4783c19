# investors/api/serializers.py

from rest_framework import serializers

from investors.models import (
    Investor,
    InvestorInvestment,
    InvestorLedgerEntry,
    InvestorProfitRecord,
)


class InvestorSerializer(serializers.ModelSerializer):
    net_balance = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)

    class Meta:
        model = Investor
        fields = [
            "id",
            "name",
            "type",
            "status",
            "is_house",
            "join_date",
            "shares",
            "profit_percentage",
            "credit",
            "debit",
            "net_balance",
            "mobile_number",
            "father_name",
            "address",
            "cnic_number",
            "created_at",
        ]
        read_only_fields = fields


class InvestorCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    type = serializers.ChoiceField(choices=Investor.TYPE_CHOICES, default=Investor.TYPE_INVESTOR)
    amount = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=0)
    join_date = serializers.DateField()
    profit_percentage = serializers.DecimalField(
        max_digits=5, decimal_places=2, min_value=0, max_value=100, required=False, allow_null=True
    )
    mobile_number = serializers.CharField(max_length=32, required=False, allow_blank=True)
    father_name = serializers.CharField(max_length=255, required=False, allow_blank=True)
    address = serializers.CharField(required=False, allow_blank=True)
    cnic_number = serializers.CharField(max_length=32, required=False, allow_blank=True)


class InvestmentCreateSerializer(serializers.Serializer):
    amount = serializers.DecimalField(max_digits=14, decimal_places=2)
    date = serializers.DateField(required=False)


class InvestmentSerializer(serializers.ModelSerializer):
    class Meta:
        model = InvestorInvestment
        fields = ["id", "amount", "date", "created_at"]
        read_only_fields = fields


class LedgerEntryCreateSerializer(serializers.Serializer):
    type = serializers.ChoiceField(choices=InvestorLedgerEntry.TYPE_CHOICES)
    amount = serializers.DecimalField(max_digits=14, decimal_places=2)
    note = serializers.CharField(max_length=255, required=False, allow_blank=True)
    date = serializers.DateField(required=False)


class LedgerEntryUpdateSerializer(serializers.Serializer):
    type = serializers.ChoiceField(choices=InvestorLedgerEntry.TYPE_CHOICES, required=False)
    amount = serializers.DecimalField(max_digits=14, decimal_places=2, required=False)
    note = serializers.CharField(max_length=255, required=False, allow_blank=True)
    date = serializers.DateField(required=False)


class LedgerEntrySerializer(serializers.ModelSerializer):
    class Meta:
        model = InvestorLedgerEntry
        fields = ["id", "entry_type", "amount", "note", "date", "created_at"]
        read_only_fields = fields


class ProfitRecordSerializer(serializers.ModelSerializer):
    class Meta:
        model = InvestorProfitRecord
        fields = [
            "id",
            "order",
            "invoice_number",
            "investor",
            "month",
            "sales",
            "gross_profit",
            "expense",
            "charity",
            "net_profit",
            "investor_share",
            "owner_share",
            "total",
            "is_reversal",
            "created_at",
        ]
        read_only_fields = fields
