# roulette/services.py
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import List, Tuple

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db.models import Q
from django.utils import timezone

from core.errors import GameNotFoundError, InvalidAmountError, InvalidBetError
from core.money import D0, q9, to_amount
from core.settlement import settlement_unit
from core.stats import summarize_games
from wallets import services as wallet_services
from . import engine
from .models import Bet, RouletteGame

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BetSpec:
    bet_type: engine.BetType
    numbers: Tuple[int, ...]
    amount: Decimal

    @property
    def payout(self) -> int:
        return engine.BET_RULES[self.bet_type].payout


def _parse_amount(value) -> Decimal:
    try:
        amount = to_amount(value)
    except InvalidAmountError as exc:
        raise InvalidBetError(exc.message)
    if amount <= D0:
        raise InvalidBetError("Bet amount must be positive")
    return amount


def validate_bets(bets) -> List[BetSpec]:
    """Turn client bets into canonical specs, or raise before any funds move."""
    max_bets = settings.ROULETTE_MAX_BETS_PER_GAME
    if not isinstance(bets, (list, tuple)) or not bets:
        raise InvalidBetError("At least one bet is required")
    if len(bets) > max_bets:
        raise InvalidBetError(f"At most {max_bets} bets per game")

    specs = []
    for bet in bets:
        if not isinstance(bet, dict):
            raise InvalidBetError("Each bet must be an object with type, numbers and amount")
        bet_type = engine.parse_bet_type(bet.get("type"))
        numbers = engine.resolve_numbers(bet_type, bet.get("numbers") or [])
        specs.append(BetSpec(bet_type=bet_type, numbers=numbers, amount=_parse_amount(bet.get("amount"))))
    return specs


def _settle(user_id, specs: List[BetSpec]) -> RouletteGame:
    stake = q9(sum((s.amount for s in specs), D0))
    wallet_services.lock_funds(user_id, stake)

    game = RouletteGame.objects.create(user_id=user_id, total_bet_amount=stake)
    result = engine.spin()

    returned = D0
    rows = []
    for spec in specs:
        won = engine.check_win(spec.numbers, result)
        win_amount = engine.calculate_win_amount(spec.amount, spec.payout) if won else D0
        if won:
            returned += spec.amount + win_amount
        rows.append(
            Bet(
                game=game,
                user_id=user_id,
                bet_type=spec.bet_type.value,
                numbers=list(spec.numbers),
                amount=spec.amount,
                payout=spec.payout,
                result=Bet.RESULT_WIN if won else Bet.RESULT_LOSS,
                win_amount=win_amount,
            )
        )
    Bet.objects.bulk_create(rows)

    wallet_services.settle_stake(
        user_id, stake, returned, meta={"game": "roulette", "game_id": str(game.id), "result": result}
    )

    game.result = result
    game.total_win_amount = returned
    game.profit = returned - stake
    game.status = RouletteGame.STATUS_COMPLETED
    game.completed_at = timezone.now()
    game.save(update_fields=["result", "total_win_amount", "profit", "status", "completed_at"])

    logger.info(
        f"Roulette {game.id} user={user_id} result={result} bet={stake} returned={returned}"
    )
    return game


def place_bet(user_id, bets) -> RouletteGame:
    """Play one spin from the player's ledger balance."""
    specs = validate_bets(bets)
    with settlement_unit("roulette"):
        return _settle(user_id, specs)


def deposit_and_play(user_id, bets, deposit_amount, proof: str) -> RouletteGame:
    """Credit a verified deposit and play with it in the same commit."""
    specs = validate_bets(bets)
    with settlement_unit("roulette"):
        wallet_services.deposit(user_id, deposit_amount, proof)
        return _settle(user_id, specs)


def build_quick_bet(bet_type, amount, selector: int = None) -> dict:
    bet_type = engine.parse_bet_type(bet_type)
    if bet_type not in engine.QUICK_BET_TYPES:
        raise InvalidBetError(f"{bet_type.value} is not available as a quick bet")
    numbers = [selector] if selector is not None else []
    return {"type": bet_type.value, "numbers": numbers, "amount": amount}


def quick_bet(user_id, bet_type, amount, selector: int = None) -> RouletteGame:
    """Single outside bet; covered numbers always come from the table."""
    return place_bet(user_id, [build_quick_bet(bet_type, amount, selector)])


def get_game(game_id) -> RouletteGame:
    try:
        return RouletteGame.objects.prefetch_related("bets").get(pk=game_id)
    except (RouletteGame.DoesNotExist, ValidationError, ValueError):
        raise GameNotFoundError(game_id)


def get_user_games(user_id, limit: int = 50, offset: int = 0):
    limit = max(1, min(int(limit), wallet_services.MAX_PAGE_SIZE))
    offset = max(0, int(offset))
    qs = (
        RouletteGame.objects.filter(user_id=user_id)
        .prefetch_related("bets")
        .order_by("-created_at")
    )
    return list(qs[offset:offset + limit])


def get_user_stats(user_id) -> dict:
    qs = RouletteGame.objects.filter(user_id=user_id, status=RouletteGame.STATUS_COMPLETED)
    return summarize_games(qs, "total_bet_amount", "total_win_amount", Q(profit__gt=0))


def game_info() -> dict:
    return {
        "game": "roulette",
        "variant": "european",
        "numbers": "0-36",
        "house_edge": f"{engine.HOUSE_EDGE_PCT}%",
        "max_bets_per_game": settings.ROULETTE_MAX_BETS_PER_GAME,
        "bet_types": engine.bet_table(),
        "quick_bet_types": sorted(t.value for t in engine.QUICK_BET_TYPES),
    }
