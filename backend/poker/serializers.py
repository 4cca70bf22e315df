from rest_framework import serializers

from wallets.wallet import AmountField
from . import engine
from .models import PokerGame


class PlayRequestSerializer(serializers.Serializer):
    # defaults to the full verified payment
    amount = AmountField(required=False)


class PlayWithBalanceSerializer(serializers.Serializer):
    wallet_address = serializers.CharField(max_length=44)
    amount = AmountField()


def _short(cards):
    return [engine.card_to_string(engine.Card.from_dict(c)) for c in cards or []]


class PokerGameSerializer(serializers.ModelSerializer):
    bet_amount = AmountField(read_only=True)
    win_amount = AmountField(read_only=True)
    profit = AmountField(read_only=True)
    cards = serializers.SerializerMethodField()

    class Meta:
        model = PokerGame
        fields = [
            "id",
            "game_type",
            "player_hole",
            "dealer_hole",
            "community",
            "cards",
            "player_hand",
            "dealer_hand",
            "bet_amount",
            "win_amount",
            "profit",
            "winner",
            "dealer_qualified",
            "payout_type",
            "status",
            "created_at",
            "completed_at",
        ]

    def get_cards(self, obj):
        """Compact "10S" / "AH" notation."""
        return {
            "player_hole": _short(obj.player_hole),
            "dealer_hole": _short(obj.dealer_hole),
            "community": _short(obj.community),
        }
