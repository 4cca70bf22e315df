from rest_framework import serializers

from wallets.wallet import AmountField
from . import engine
from .models import Bet, RouletteGame


class PlayRequestSerializer(serializers.Serializer):
    bets = serializers.ListField(child=serializers.DictField())


class PlayWithBalanceSerializer(PlayRequestSerializer):
    wallet_address = serializers.CharField(max_length=44)


class QuickBetSerializer(serializers.Serializer):
    wallet_address = serializers.CharField(max_length=44, required=False)
    type = serializers.CharField(max_length=16)
    amount = AmountField()
    # dozen / column number, 1-3
    selector = serializers.IntegerField(min_value=1, max_value=3, required=False)


class BetSerializer(serializers.ModelSerializer):
    amount = AmountField(read_only=True)
    win_amount = AmountField(read_only=True)

    class Meta:
        model = Bet
        fields = ["id", "bet_type", "numbers", "amount", "payout", "result", "win_amount"]


class RouletteGameSerializer(serializers.ModelSerializer):
    total_bet_amount = AmountField(read_only=True)
    total_win_amount = AmountField(read_only=True)
    profit = AmountField(read_only=True)
    won = serializers.SerializerMethodField()
    winning = serializers.SerializerMethodField()
    bets = BetSerializer(many=True, read_only=True)

    class Meta:
        model = RouletteGame
        fields = [
            "id",
            "result",
            "winning",
            "won",
            "total_bet_amount",
            "total_win_amount",
            "profit",
            "status",
            "bets",
            "created_at",
            "completed_at",
        ]

    def get_won(self, obj):
        return obj.profit > 0

    def get_winning(self, obj):
        if obj.result is None:
            return None
        return engine.winning_properties(obj.result)
