from rest_framework import serializers

from core.money import fmt, to_positive_amount
from .models import Transaction


class AmountField(serializers.Field):
    """Positive 9-place amount; accepts strings, ints and Decimals, never floats."""

    def to_internal_value(self, data):
        return to_positive_amount(data)

    def to_representation(self, value):
        return fmt(value)


class WithdrawalSerializer(serializers.Serializer):
    wallet_address = serializers.CharField(max_length=44)
    amount = AmountField()
    # payouts only ever go back to wallet_address
    destination_address = serializers.CharField(max_length=44, required=False)

    def validate(self, attrs):
        destination = attrs.get("destination_address")
        if destination and destination != attrs["wallet_address"]:
            raise serializers.ValidationError(
                {"destination_address": "Withdrawals can only be sent to the owning wallet"}
            )
        return attrs


class TransactionSerializer(serializers.ModelSerializer):
    amount = AmountField(read_only=True)
    balance_before = AmountField(read_only=True)
    balance_after = AmountField(read_only=True)

    class Meta:
        model = Transaction
        fields = [
            "id",
            "tx_type",
            "amount",
            "balance_before",
            "balance_after",
            "transaction_signature",
            "meta",
            "created_at",
        ]


class BalanceSerializer(serializers.Serializer):
    balance = AmountField(read_only=True)
    locked_balance = AmountField(read_only=True)
    available_balance = AmountField(read_only=True)
