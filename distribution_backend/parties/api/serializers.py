# parties/api/serializers.py

from rest_framework import serializers

from parties.models import Counterparty


class CounterpartySerializer(serializers.ModelSerializer):
    net_position = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)

    class Meta:
        model = Counterparty
        fields = [
            "id",
            "name",
            "role",
            "status",
            "phone",
            "email",
            "address",
            "area",
            "credit_period",
            "credit_limit",
            "opening_balance",
            "pay",
            "receive",
            "net_position",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class CounterpartyCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    role = serializers.ChoiceField(choices=Counterparty.ROLE_CHOICES, default=Counterparty.ROLE_CUSTOMER)
    phone = serializers.CharField(max_length=32, required=False, allow_blank=True)
    email = serializers.EmailField(required=False, allow_blank=True)
    address = serializers.CharField(required=False, allow_blank=True)
    area = serializers.CharField(max_length=128, required=False, allow_blank=True)
    credit_period = serializers.IntegerField(min_value=0, required=False, default=0)
    credit_limit = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=0, required=False)
    opening_balance = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=0, required=False)
    opening_balance_type = serializers.ChoiceField(choices=["pay", "receive"], required=False)


class BalanceEntrySerializer(serializers.Serializer):
    balance_type = serializers.ChoiceField(choices=["pay", "receive"])
    amount = serializers.DecimalField(max_digits=14, decimal_places=2)
