from dataclasses import asdict
from decimal import Decimal

from rest_framework import serializers

from wallets.wallet import AmountField
from .models import PriceSample, TokenTrade


def plain(value):
    """Decimals as fixed-point strings, recursively."""
    if isinstance(value, Decimal):
        return format(value, "f")
    if isinstance(value, dict):
        return {k: plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [plain(v) for v in value]
    return value


def quote_data(quote) -> dict:
    data = plain(asdict(quote))
    data["price_impact_pct"] = format((quote.price_impact * 100).quantize(Decimal("0.0001")), "f")
    return data


class PriceSampleSerializer(serializers.ModelSerializer):
    price = serializers.SerializerMethodField()
    reserves = AmountField(read_only=True)
    volume_24h = AmountField(read_only=True)

    class Meta:
        model = PriceSample
        fields = ["created_at", "price", "reserves", "volume_24h"]

    def get_price(self, obj):
        return plain(obj.price)


class TokenTradeSerializer(serializers.ModelSerializer):
    token_amount = AmountField(read_only=True)
    sol_amount = AmountField(read_only=True)
    price_per_token = serializers.SerializerMethodField()

    class Meta:
        model = TokenTrade
        fields = ["id", "side", "wallet_address", "token_amount", "sol_amount", "price_per_token", "tx_signature", "created_at"]

    def get_price_per_token(self, obj):
        return plain(obj.price_per_token)


class TradeReportSerializer(serializers.Serializer):
    side = serializers.ChoiceField(choices=TokenTrade.SIDE_CHOICES)
    wallet_address = serializers.CharField(max_length=44)
    token_amount = AmountField()
    sol_amount = AmountField()
    tx_signature = serializers.CharField(max_length=128, required=False, allow_blank=True)
