# users/serializers.py

from django.contrib.auth import get_user_model
from rest_framework import serializers

from users.models import UserLedgerEntry
from users.services.ledger_service import format_balance

User = get_user_model()


# ---------------- USER OUTPUT ----------------
class UserSerializer(serializers.ModelSerializer):
    """
    Safe user representation for frontend consumption.
    """

    class Meta:
        model = User
        fields = [
            "id",
            "email",
            "first_name",
            "last_name",
            "phone",
            "role",
            "is_staff",
            "created_at",
        ]
        read_only_fields = fields


# ---------------- LEDGER ----------------
class UserLedgerEntrySerializer(serializers.ModelSerializer):
    balance = serializers.SerializerMethodField()

    class Meta:
        model = UserLedgerEntry
        fields = [
            "id",
            "user",
            "date",
            "description",
            "debit",
            "credit",
            "incentive_amount",
            "invoice_number",
            "balance",
            "created_at",
        ]
        read_only_fields = fields

    def get_balance(self, obj):
        # running balance when listed, the entry's own net otherwise
        return getattr(obj, "balance_display", None) or format_balance(obj.net)


class UserLedgerEntryInputSerializer(serializers.Serializer):
    date = serializers.DateField(required=False, allow_null=True)
    description = serializers.CharField(max_length=255, required=False, allow_blank=True)
    debit = serializers.DecimalField(max_digits=14, decimal_places=2, required=False, allow_null=True)
    credit = serializers.DecimalField(max_digits=14, decimal_places=2, required=False, allow_null=True)
    incentive_amount = serializers.DecimalField(max_digits=14, decimal_places=2, required=False, allow_null=True)
    invoice_number = serializers.CharField(max_length=64, required=False, allow_blank=True)
