import threading
from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal
from unittest import mock

import pytest
from django.db import DatabaseError, connection

from core.errors import (
    ConflictError,
    GameNotFoundError,
    InsufficientFundsError,
    InvalidBetError,
    SettlementFailedError,
)
from roulette import services
from roulette.models import Bet, RouletteGame
from wallets.models import Transaction, Wallet
from wallets.services import reconcile


pytestmark = pytest.mark.django_db


def _spin(result):
    return mock.patch("roulette.engine.spin", return_value=result)


def _wallet(user):
    return Wallet.objects.get(user=user)


def test_straight_win_returns_stake_plus_35(funded_user):
    with _spin(17):
        game = services.place_bet(funded_user.id, [{"type": "straight", "numbers": [17], "amount": "1"}])

    assert game.status == RouletteGame.STATUS_COMPLETED
    assert game.completed_at is not None
    assert game.result == 17
    assert game.total_bet_amount == Decimal("1")
    assert game.total_win_amount == Decimal("36")
    assert game.profit == Decimal("35")

    bet = game.bets.get()
    assert bet.result == Bet.RESULT_WIN
    assert bet.win_amount == Decimal("35")
    assert bet.payout == 35

    wallet = _wallet(funded_user)
    assert wallet.balance == Decimal("45")
    assert wallet.locked_balance == Decimal("0")


def test_loss_removes_the_full_stake(funded_user):
    with _spin(0):
        game = services.place_bet(funded_user.id, [{"type": "red", "numbers": [], "amount": "2"}])

    assert game.total_win_amount == Decimal("0")
    assert game.profit == Decimal("-2")
    assert _wallet(funded_user).balance == Decimal("8")
    assert not Transaction.objects.filter(user=funded_user, tx_type=Transaction.WIN).exists()


def test_multiple_bets_sum(funded_user):
    bets = [
        {"type": "red", "amount": "1"},          # 1 is red: +1
        {"type": "dozen", "numbers": [1], "amount": "1"},  # first dozen: +2
        {"type": "straight", "numbers": [2], "amount": "1"},  # loses
    ]
    with _spin(1):
        game = services.place_bet(funded_user.id, bets)

    assert game.total_bet_amount == Decimal("3")
    # returned: (1 + 1) + (1 + 2)
    assert game.total_win_amount == Decimal("5")
    assert game.profit == Decimal("2")
    assert game.bets.count() == 3
    assert _wallet(funded_user).balance == Decimal("12")


def test_every_settlement_books_loss_then_win(funded_user):
    with _spin(17):
        game = services.place_bet(funded_user.id, [{"type": "straight", "numbers": [17], "amount": "1"}])

    rows = Transaction.objects.filter(user=funded_user, meta__game_id=str(game.id))
    assert sorted(r.tx_type for r in rows) == ["loss", "win"]
    assert rows.get(tx_type="loss").amount == Decimal("1")
    assert rows.get(tx_type="win").amount == Decimal("36")


def test_insufficient_funds_leaves_no_trace(funded_user):
    with pytest.raises(InsufficientFundsError):
        services.place_bet(funded_user.id, [{"type": "red", "amount": "11"}])

    assert RouletteGame.objects.count() == 0
    wallet = _wallet(funded_user)
    assert wallet.balance == Decimal("10")
    assert wallet.locked_balance == Decimal("0")


@pytest.mark.parametrize(
    "bets",
    [
        [],
        "red",
        [{"type": "bogus", "amount": "1"}],
        [{"type": "straight", "numbers": [1], "amount": "0"}],
        [{"type": "straight", "numbers": [1], "amount": "-1"}],
        [{"type": "straight", "numbers": [1], "amount": 0.5}],
        [{"type": "split", "numbers": [1, 9], "amount": "1"}],
        [{"type": "straight", "numbers": [1], "amount": "0.01"}] * 21,
    ],
)
def test_invalid_bets_create_nothing(funded_user, bets):
    with pytest.raises(InvalidBetError):
        services.place_bet(funded_user.id, bets)
    assert RouletteGame.objects.count() == 0
    assert Transaction.objects.filter(user=funded_user).count() == 1


def test_twenty_bets_allowed(funded_user):
    bets = [{"type": "straight", "numbers": [n], "amount": "0.1"} for n in range(20)]
    with _spin(36):
        game = services.place_bet(funded_user.id, bets)
    assert game.bets.count() == 20


def test_database_failure_rolls_everything_back(funded_user):
    with _spin(17), mock.patch("wallets.services.credit", side_effect=DatabaseError("disk full")):
        with pytest.raises(SettlementFailedError):
            services.place_bet(funded_user.id, [{"type": "straight", "numbers": [17], "amount": "1"}])

    assert RouletteGame.objects.count() == 0
    assert Bet.objects.count() == 0
    wallet = _wallet(funded_user)
    assert wallet.balance == Decimal("10")
    assert wallet.locked_balance == Decimal("0")
    assert Transaction.objects.filter(user=funded_user).count() == 1


def test_deposit_and_play(user):
    with _spin(5):
        game = services.deposit_and_play(
            user.id, [{"type": "odd", "amount": "0.5"}], Decimal("0.5"), "sig-play-1"
        )

    assert game.profit == Decimal("0.5")
    assert _wallet(user).balance == Decimal("1")
    assert Transaction.objects.get(user=user, tx_type="deposit").transaction_signature == "sig-play-1"


def test_deposit_and_play_replay_is_rejected(user):
    with _spin(0):
        services.deposit_and_play(user.id, [{"type": "odd", "amount": "0.5"}], Decimal("0.5"), "sig-replay")

    with pytest.raises(ConflictError):
        services.deposit_and_play(user.id, [{"type": "odd", "amount": "0.5"}], Decimal("0.5"), "sig-replay")
    assert RouletteGame.objects.count() == 1


def test_quick_bet_uses_canonical_numbers(funded_user):
    with _spin(2):
        game = services.quick_bet(funded_user.id, "black", "1")

    bet = game.bets.get()
    assert len(bet.numbers) == 18
    assert bet.result == Bet.RESULT_WIN


def test_quick_bet_dozen_needs_selector(funded_user):
    with pytest.raises(InvalidBetError):
        services.quick_bet(funded_user.id, "dozen", "1")

    with _spin(30):
        game = services.quick_bet(funded_user.id, "dozen", "1", selector=3)
    assert game.total_win_amount == Decimal("3")


def test_quick_bet_rejects_inside_bets(funded_user):
    with pytest.raises(InvalidBetError):
        services.quick_bet(funded_user.id, "straight", "1")


def test_get_game_and_history(funded_user):
    with _spin(3):
        first = services.place_bet(funded_user.id, [{"type": "low", "amount": "1"}])
        second = services.place_bet(funded_user.id, [{"type": "high", "amount": "1"}])

    assert services.get_game(first.id).bets.count() == 1
    history = services.get_user_games(funded_user.id)
    assert [g.id for g in history] == [second.id, first.id]
    assert services.get_user_games(funded_user.id, limit=1, offset=1)[0].id == first.id


def test_history_paging_is_clamped(funded_user):
    with _spin(3):
        game = services.place_bet(funded_user.id, [{"type": "low", "amount": "1"}])

    assert [g.id for g in services.get_user_games(funded_user.id, limit=0, offset=-5)] == [game.id]
    assert len(services.get_user_games(funded_user.id, limit=10_000)) == 1


def test_get_game_not_found(db):
    with pytest.raises(GameNotFoundError):
        services.get_game("00000000-0000-0000-0000-000000000000")
    with pytest.raises(GameNotFoundError):
        services.get_game("nope")


def test_user_stats(funded_user):
    with _spin(17):
        services.place_bet(funded_user.id, [{"type": "straight", "numbers": [17], "amount": "1"}])
    with _spin(0):
        services.place_bet(funded_user.id, [{"type": "red", "amount": "2"}])

    stats = services.get_user_stats(funded_user.id)
    assert stats["total_games"] == 2
    assert stats["games_won"] == 1
    assert stats["total_wagered"] == "3.000000000"
    assert stats["total_won"] == "36.000000000"
    assert stats["total_profit"] == "33.000000000"
    assert stats["win_rate"] == 50.0
    assert stats["biggest_win"] == "35.000000000"


def test_conservation_over_many_games(user, fund):
    fund(user, "50")
    for result in (0, 7, 17, 32, 36, 12):
        with _spin(result):
            services.place_bet(
                user.id,
                [
                    {"type": "red", "amount": "1"},
                    {"type": "straight", "numbers": [17], "amount": "0.5"},
                    {"type": "column", "numbers": [2], "amount": "0.25"},
                ],
            )

    profit = sum(g.profit for g in RouletteGame.objects.filter(user=user))
    assert _wallet(user).balance == Decimal("50") + profit
    assert reconcile(user.id).ok


def test_no_oversell_sequential(user, fund):
    fund(user, "1")
    with _spin(0):
        services.place_bet(user.id, [{"type": "red", "amount": "1"}])
    with pytest.raises(InsufficientFundsError):
        services.place_bet(user.id, [{"type": "red", "amount": "1"}])
    assert _wallet(user).balance == Decimal("0")


@pytest.mark.django_db(transaction=True)
def test_no_oversell_under_concurrent_bets(user, fund):
    fund(user, "3")
    attempts = 8
    barrier = threading.Barrier(attempts)

    def bet():
        barrier.wait()
        try:
            services.place_bet(user.id, [{"type": "red", "amount": "1"}])
            return "placed"
        except InsufficientFundsError:
            return "refused"
        except SettlementFailedError:
            # SQLite serialises writers and may refuse a contended one
            return "failed"
        finally:
            connection.close()

    with _spin(0), ThreadPoolExecutor(max_workers=attempts) as pool:
        outcomes = list(pool.map(lambda _: bet(), range(attempts)))

    placed = outcomes.count("placed")
    assert 1 <= placed <= 3
    assert RouletteGame.objects.filter(user=user).count() == placed

    wallet = _wallet(user)
    assert wallet.locked_balance == Decimal("0")
    assert wallet.balance == Decimal("3") - placed
    assert wallet.balance >= 0
    assert reconcile(user.id).ok


def test_game_info():
    info = services.game_info()
    assert info["house_edge"] == "2.70%"
    assert len(info["bet_types"]) == 13
    assert "straight" not in info["quick_bet_types"]
