from decimal import Decimal

import pytest

from poker import engine
from poker.engine import HandRank, parse_cards


def best(text):
    return engine.evaluate_best_hand(parse_cards(text))


@pytest.mark.parametrize(
    "cards, rank",
    [
        ("AH KH QH JH 10H", HandRank.ROYAL_FLUSH),
        ("9S 8S 7S 6S 5S", HandRank.STRAIGHT_FLUSH),
        ("AD 2D 3D 4D 5D", HandRank.STRAIGHT_FLUSH),
        ("9C 9D 9H 9S 2C", HandRank.FOUR_OF_A_KIND),
        ("KC KD KH 2S 2C", HandRank.FULL_HOUSE),
        ("2H 7H 9H JH KH", HandRank.FLUSH),
        ("AC 2D 3H 4S 5C", HandRank.STRAIGHT),
        ("10C JD QH KS AC", HandRank.STRAIGHT),
        ("7C 7D 7H KS 2C", HandRank.THREE_OF_A_KIND),
        ("7C 7D KH KS 2C", HandRank.TWO_PAIR),
        ("7C 7D 9H KS 2C", HandRank.PAIR),
        ("2C 5D 9H JS KC", HandRank.HIGH_CARD),
    ],
)
def test_evaluate_five(cards, rank):
    assert engine.evaluate_five(parse_cards(cards)).rank == rank


def test_wheel_is_the_lowest_straight():
    wheel = engine.evaluate_five(parse_cards("AC 2D 3H 4S 5C"))
    six_high = engine.evaluate_five(parse_cards("2C 3D 4H 5S 6C"))
    assert wheel.values == (5,)
    assert engine.compare_hands(six_high, wheel) == 1


def test_king_ace_two_is_not_a_straight():
    assert engine.evaluate_five(parse_cards("QC KD AH 2S 3C")).rank == HandRank.HIGH_CARD


def test_best_of_seven_picks_quads_over_straight():
    hand = best("9C 9D 9H 9S 10C JD QH")
    assert hand.rank == HandRank.FOUR_OF_A_KIND
    assert hand.values == (9, 12)


def test_best_of_seven_finds_flush_over_straight():
    hand = best("5H 6H 7C 8H 9D 2H KH")
    assert hand.rank == HandRank.FLUSH
    assert hand.values == (13, 8, 6, 5, 2)


def test_evaluate_best_hand_card_count():
    with pytest.raises(ValueError):
        engine.evaluate_best_hand(parse_cards("AH KH QH JH"))
    with pytest.raises(ValueError):
        engine.evaluate_best_hand(parse_cards("AH KH QH JH 10H 9H 8H 7H"))


@pytest.mark.parametrize(
    "a, b, expected",
    [
        ("AC AD 9H 5S 2C", "KC KD QH JS 9C", 1),   # higher pair
        ("AC AD 9H 5S 2C", "AH AS 9D 5C 3D", -1),  # kicker
        ("AC AD 9H 5S 2C", "AH AS 9D 5C 2D", 0),   # suits never break ties
        ("KC KD 4H 4S 2C", "QC QD JH JS AC", 1),   # top pair decides two pair
        ("3C 3D 3H 2S 2C", "2D 2H 2S AS AC", 1),   # trips decide full house
        ("2H 7H 9H JH KH", "AC KD QH JS 10C", 1),  # flush beats straight
    ],
)
def test_compare_hands(a, b, expected):
    assert engine.compare_hands(best(a), best(b)) == expected
    assert engine.compare_hands(best(b), best(a)) == -expected


def test_determine_winner():
    assert engine.determine_winner(best("AC AD 9H 5S 2C"), best("KC KD QH JS 9C")) == engine.PLAYER
    assert engine.determine_winner(best("KC KD QH JS 9C"), best("AC AD 9H 5S 2C")) == engine.DEALER
    assert engine.determine_winner(best("AC AD 9H 5S 2C"), best("AH AS 9D 5C 2D")) == engine.TIE


def test_payouts():
    stake = Decimal("2")
    pair = best("AC AD 9H 5S 2C")
    low_pair = best("3C 3D 9H 5S 2C")
    nothing = best("2C 5D 9H JS KC")
    trips = best("7C 7D 7H KS 2C")

    loss = engine.calculate_payout(stake, low_pair, pair, engine.DEALER)
    assert (loss.win_amount, loss.payout_type) == (Decimal("0"), engine.PAYOUT_LOSS)

    push = engine.calculate_payout(stake, pair, pair, engine.TIE)
    assert (push.win_amount, push.payout_type) == (stake, engine.PAYOUT_PUSH)

    ante = engine.calculate_payout(stake, pair, nothing, engine.PLAYER)
    assert ante.win_amount == stake
    assert ante.payout_type == engine.PAYOUT_ANTE_ONLY
    assert ante.dealer_qualified is False

    bonus = engine.calculate_payout(stake, trips, low_pair, engine.PLAYER)
    assert bonus.win_amount == Decimal("6")
    assert bonus.payout_type == engine.PAYOUT_ANTE_PLUS_BONUS
    assert bonus.dealer_qualified is True


def test_royal_flush_bonus():
    royal = best("AH KH QH JH 10H")
    pair = best("3C 3D 9H 5S 2C")
    assert engine.calculate_payout(Decimal("1"), royal, pair, engine.PLAYER).win_amount == Decimal("51")


def test_deal_uses_nine_distinct_cards():
    for _ in range(200):
        dealt = engine.deal()
        cards = dealt.player_hole + dealt.dealer_hole + dealt.community
        assert len(cards) == 9
        assert len(set(cards)) == 9
        assert len(dealt.player_hole) == 2
        assert len(dealt.community) == 5


def test_shuffle_is_a_permutation():
    deck = engine.create_deck()
    shuffled = engine.shuffle_deck(deck)
    assert len(deck) == 52
    assert sorted(shuffled, key=str) == sorted(deck, key=str)
    assert deck == engine.create_deck()


def test_card_strings():
    cards = parse_cards("AH 10S jd")
    assert engine.cards_to_string(cards) == "AH 10S JD"
    assert str(cards[0]) == "AH"
    assert engine.Card.from_dict(cards[1].to_dict()) == cards[1]


def test_parse_card_rejects_garbage():
    with pytest.raises((KeyError, ValueError)):
        engine.parse_card("1X")


def test_payout_table_lists_every_hand():
    table = engine.payout_table()
    assert len(table) == len(HandRank)
    assert table[-1] == {"rank": 9, "name": "Royal Flush", "bonus": "50:1"}
