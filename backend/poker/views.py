from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from accounts.services import get_or_create_user, get_user_by_wallet
from core.abuse import check_bet_rate
from core.payments import get_verified_payment
from core.serializers import page_params
from wallets.services import get_balance
from wallets.wallet import BalanceSerializer
from . import services
from .serializers import PlayRequestSerializer, PlayWithBalanceSerializer, PokerGameSerializer


def _game_response(game, user):
    return Response(
        {
            "success": True,
            "data": {
                "game": PokerGameSerializer(game).data,
                "wallet": BalanceSerializer(get_balance(user.id)).data,
            },
        },
        status=status.HTTP_201_CREATED,
    )


@api_view(["GET"])
def info_view(request):
    return Response({"success": True, "data": services.game_info()})


@api_view(["POST"])
def play_view(request):
    payment = get_verified_payment(request)
    serializer = PlayRequestSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    amount = serializer.validated_data.get("amount", payment.verified_amount)

    user = get_or_create_user(payment.recipient_wallet_address)
    check_bet_rate(user.wallet_address)

    game = services.deposit_and_play(
        user.id, amount, payment.verified_amount, payment.transaction_signature
    )
    return _game_response(game, user)


@api_view(["POST"])
def play_with_balance_view(request):
    serializer = PlayWithBalanceSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    user = get_user_by_wallet(serializer.validated_data["wallet_address"])
    check_bet_rate(user.wallet_address)

    game = services.place_bet(user.id, serializer.validated_data["amount"])
    return _game_response(game, user)


@api_view(["GET"])
def game_view(request, game_id):
    game = services.get_game(game_id)
    return Response({"success": True, "data": PokerGameSerializer(game).data})


@api_view(["GET"])
def history_view(request, wallet_address):
    limit, offset = page_params(request)
    user = get_user_by_wallet(wallet_address)
    games = services.get_user_games(user.id, limit=limit, offset=offset)
    return Response(
        {
            "success": True,
            "data": {
                "games": PokerGameSerializer(games, many=True).data,
                "limit": limit,
                "offset": offset,
            },
        }
    )


@api_view(["GET"])
def stats_view(request, wallet_address):
    user = get_user_by_wallet(wallet_address)
    return Response({"success": True, "data": services.get_user_stats(user.id)})
