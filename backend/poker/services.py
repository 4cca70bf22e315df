# poker/services.py
import logging
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db.models import Count, Q
from django.utils import timezone

from core.errors import GameNotFoundError, InvalidAmountError, InvalidBetError
from core.money import D0, to_amount
from core.settlement import settlement_unit
from core.stats import summarize_games
from wallets import services as wallet_services
from . import engine
from .models import PokerGame

logger = logging.getLogger(__name__)


def validate_stake(amount) -> Decimal:
    try:
        stake = to_amount(amount)
    except InvalidAmountError as exc:
        raise InvalidBetError(exc.message)
    if stake <= D0:
        raise InvalidBetError("Bet amount must be positive")
    return stake


def _settle(user_id, stake: Decimal) -> PokerGame:
    wallet_services.lock_funds(user_id, stake)

    game = PokerGame.objects.create(user_id=user_id, bet_amount=stake)

    dealt = engine.deal()
    player = engine.evaluate_best_hand(dealt.player_hole + dealt.community)
    dealer = engine.evaluate_best_hand(dealt.dealer_hole + dealt.community)
    winner = engine.determine_winner(player, dealer)
    payout = engine.calculate_payout(stake, player, dealer, winner)

    wallet_services.settle_stake(
        user_id, stake, payout.win_amount, meta={"game": "poker", "game_id": str(game.id), "winner": winner}
    )

    game.player_hole = [c.to_dict() for c in dealt.player_hole]
    game.dealer_hole = [c.to_dict() for c in dealt.dealer_hole]
    game.community = [c.to_dict() for c in dealt.community]
    game.player_hand = player.to_dict()
    game.dealer_hand = dealer.to_dict()
    game.player_hand_rank = int(player.rank)
    game.player_hand_name = player.name
    game.winner = winner
    game.dealer_qualified = payout.dealer_qualified
    game.payout_type = payout.payout_type
    game.win_amount = payout.win_amount
    game.profit = payout.win_amount - stake
    game.status = PokerGame.STATUS_COMPLETED
    game.completed_at = timezone.now()
    game.save()

    logger.info(
        f"Poker {game.id} user={user_id} {player.name} vs {dealer.name} "
        f"winner={winner} bet={stake} returned={payout.win_amount}"
    )
    return game


def place_bet(user_id, amount) -> PokerGame:
    """Deal one hand against the dealer, staked from the ledger balance."""
    stake = validate_stake(amount)
    with settlement_unit("poker"):
        return _settle(user_id, stake)


def deposit_and_play(user_id, amount, deposit_amount, proof: str) -> PokerGame:
    stake = validate_stake(amount)
    with settlement_unit("poker"):
        wallet_services.deposit(user_id, deposit_amount, proof)
        return _settle(user_id, stake)


def get_game(game_id) -> PokerGame:
    try:
        return PokerGame.objects.get(pk=game_id)
    except (PokerGame.DoesNotExist, ValidationError, ValueError):
        raise GameNotFoundError(game_id)


def get_user_games(user_id, limit: int = 50, offset: int = 0):
    limit = max(1, min(int(limit), wallet_services.MAX_PAGE_SIZE))
    offset = max(0, int(offset))
    qs = PokerGame.objects.filter(user_id=user_id).order_by("-created_at")
    return list(qs[offset:offset + limit])


def get_user_stats(user_id) -> dict:
    qs = PokerGame.objects.filter(user_id=user_id, status=PokerGame.STATUS_COMPLETED)
    stats = summarize_games(qs, "bet_amount", "win_amount", Q(winner=engine.PLAYER))
    stats["hand_stats"] = {
        row["player_hand_name"]: row["count"]
        for row in qs.values("player_hand_name").annotate(count=Count("id")).order_by()
    }
    return stats


def game_info() -> dict:
    return {
        "game": "poker",
        "variant": "texas-holdem",
        "rules": [
            "Player and dealer get 2 hole cards each, 5 community cards are shared",
            "Best 5-card hand out of 7 wins",
            "Dealer qualifies with a Pair or better",
            "Player win against an unqualified dealer returns the stake only",
            "Player win against a qualified dealer returns the stake plus the hand bonus",
            "A tie returns the stake",
        ],
        "dealer_qualifying_hand": engine.DEALER_QUALIFYING_RANK.label,
        "payouts": engine.payout_table(),
    }
