# poker/engine.py
from __future__ import annotations

import secrets
from collections import Counter
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum, IntEnum
from itertools import combinations
from typing import List, Sequence, Tuple

from core.money import D0, q9

_rng = secrets.SystemRandom()


class Suit(str, Enum):
    HEARTS = "hearts"
    DIAMONDS = "diamonds"
    CLUBS = "clubs"
    SPADES = "spades"


class Rank(str, Enum):
    TWO = "2"
    THREE = "3"
    FOUR = "4"
    FIVE = "5"
    SIX = "6"
    SEVEN = "7"
    EIGHT = "8"
    NINE = "9"
    TEN = "10"
    JACK = "J"
    QUEEN = "Q"
    KING = "K"
    ACE = "A"


RANK_VALUES = {rank: i for i, rank in enumerate(Rank, start=2)}


class HandRank(IntEnum):
    HIGH_CARD = 0
    PAIR = 1
    TWO_PAIR = 2
    THREE_OF_A_KIND = 3
    STRAIGHT = 4
    FLUSH = 5
    FULL_HOUSE = 6
    FOUR_OF_A_KIND = 7
    STRAIGHT_FLUSH = 8
    ROYAL_FLUSH = 9

    @property
    def label(self) -> str:
        return HAND_NAMES[self]


HAND_NAMES = {
    HandRank.HIGH_CARD: "High Card",
    HandRank.PAIR: "Pair",
    HandRank.TWO_PAIR: "Two Pair",
    HandRank.THREE_OF_A_KIND: "Three of a Kind",
    HandRank.STRAIGHT: "Straight",
    HandRank.FLUSH: "Flush",
    HandRank.FULL_HOUSE: "Full House",
    HandRank.FOUR_OF_A_KIND: "Four of a Kind",
    HandRank.STRAIGHT_FLUSH: "Straight Flush",
    HandRank.ROYAL_FLUSH: "Royal Flush",
}

# bonus multiplier on the stake when the player wins and the dealer qualifies
BONUS_PAYOUTS = {
    HandRank.HIGH_CARD: 0,
    HandRank.PAIR: 1,
    HandRank.TWO_PAIR: 1,
    HandRank.THREE_OF_A_KIND: 2,
    HandRank.STRAIGHT: 3,
    HandRank.FLUSH: 4,
    HandRank.FULL_HOUSE: 5,
    HandRank.FOUR_OF_A_KIND: 10,
    HandRank.STRAIGHT_FLUSH: 20,
    HandRank.ROYAL_FLUSH: 50,
}

DEALER_QUALIFYING_RANK = HandRank.PAIR

PLAYER = "player"
DEALER = "dealer"
TIE = "tie"

PAYOUT_LOSS = "loss"
PAYOUT_PUSH = "push"
PAYOUT_ANTE_ONLY = "ante-only"
PAYOUT_ANTE_PLUS_BONUS = "ante-plus-bonus"


@dataclass(frozen=True)
class Card:
    suit: Suit
    rank: Rank

    @property
    def value(self) -> int:
        return RANK_VALUES[self.rank]

    def to_dict(self) -> dict:
        return {"suit": self.suit.value, "rank": self.rank.value}

    @classmethod
    def from_dict(cls, data: dict) -> "Card":
        return cls(Suit(data["suit"]), Rank(data["rank"]))

    def __str__(self):
        return card_to_string(self)


@dataclass(frozen=True)
class Hand:
    rank: HandRank
    cards: Tuple[Card, ...]
    values: Tuple[int, ...]

    @property
    def name(self) -> str:
        return self.rank.label

    def to_dict(self) -> dict:
        return {
            "rank": int(self.rank),
            "name": self.name,
            "cards": [c.to_dict() for c in self.cards],
            "values": list(self.values),
        }


@dataclass(frozen=True)
class Deal:
    player_hole: Tuple[Card, ...]
    dealer_hole: Tuple[Card, ...]
    community: Tuple[Card, ...]


@dataclass(frozen=True)
class Payout:
    win_amount: Decimal
    dealer_qualified: bool
    payout_type: str


# ======================================================
# DECK
# ======================================================
def create_deck() -> List[Card]:
    return [Card(suit, rank) for suit in Suit for rank in Rank]


def shuffle_deck(deck: Sequence[Card]) -> List[Card]:
    """Fisher-Yates from the OS CSPRNG; returns a new list."""
    cards = list(deck)
    for i in range(len(cards) - 1, 0, -1):
        j = _rng.randint(0, i)
        cards[i], cards[j] = cards[j], cards[i]
    return cards


def deal() -> Deal:
    deck = shuffle_deck(create_deck())
    return Deal(
        player_hole=tuple(deck[0:2]),
        dealer_hole=tuple(deck[2:4]),
        community=tuple(deck[4:9]),
    )


# ======================================================
# HAND EVALUATION
# ======================================================
def _straight_high(values: List[int]) -> int:
    """High card of a 5-card straight, 0 if not a straight. Wheel counts as 5."""
    distinct = sorted(set(values), reverse=True)
    if len(distinct) != 5:
        return 0
    if distinct[0] - distinct[4] == 4:
        return distinct[0]
    if distinct == [14, 5, 4, 3, 2]:
        return 5
    return 0


def evaluate_five(cards: Sequence[Card]) -> Hand:
    values = [c.value for c in cards]
    flush = len({c.suit for c in cards}) == 1
    straight_high = _straight_high(values)

    counts = Counter(values)
    # group by (count, rank), biggest group first
    grouped = sorted(counts.items(), key=lambda kv: (kv[1], kv[0]), reverse=True)
    shape = [count for _, count in grouped]
    tiebreak = tuple(value for value, _ in grouped)

    if straight_high and flush:
        rank = HandRank.ROYAL_FLUSH if straight_high == 14 else HandRank.STRAIGHT_FLUSH
        return Hand(rank, tuple(cards), (straight_high,))
    if shape == [4, 1]:
        return Hand(HandRank.FOUR_OF_A_KIND, tuple(cards), tiebreak)
    if shape == [3, 2]:
        return Hand(HandRank.FULL_HOUSE, tuple(cards), tiebreak)
    if flush:
        return Hand(HandRank.FLUSH, tuple(cards), tuple(sorted(values, reverse=True)))
    if straight_high:
        return Hand(HandRank.STRAIGHT, tuple(cards), (straight_high,))
    if shape == [3, 1, 1]:
        return Hand(HandRank.THREE_OF_A_KIND, tuple(cards), tiebreak)
    if shape == [2, 2, 1]:
        return Hand(HandRank.TWO_PAIR, tuple(cards), tiebreak)
    if shape == [2, 1, 1, 1]:
        return Hand(HandRank.PAIR, tuple(cards), tiebreak)
    return Hand(HandRank.HIGH_CARD, tuple(cards), tiebreak)


def compare_hands(a: Hand, b: Hand) -> int:
    """1 if a beats b, -1 if b beats a, 0 on an exact tie."""
    if a.rank != b.rank:
        return 1 if a.rank > b.rank else -1
    for x, y in zip(a.values, b.values):
        if x != y:
            return 1 if x > y else -1
    return 0


def evaluate_best_hand(cards: Sequence[Card]) -> Hand:
    """Best 5-card hand out of 5-7 cards (21 combinations for 7)."""
    if not 5 <= len(cards) <= 7:
        raise ValueError(f"Need 5 to 7 cards, got {len(cards)}")
    best = None
    for combo in combinations(cards, 5):
        hand = evaluate_five(combo)
        if best is None or compare_hands(hand, best) > 0:
            best = hand
    return best


def determine_winner(player: Hand, dealer: Hand) -> str:
    result = compare_hands(player, dealer)
    if result > 0:
        return PLAYER
    if result < 0:
        return DEALER
    return TIE


def dealer_qualifies(dealer: Hand) -> bool:
    return dealer.rank >= DEALER_QUALIFYING_RANK


def calculate_payout(stake: Decimal, player: Hand, dealer: Hand, winner: str) -> Payout:
    """
    Total returned to the player (stake included):
    loss 0, push stake, ante-only stake, ante-plus-bonus stake * (1 + bonus).
    """
    qualified = dealer_qualifies(dealer)

    if winner == DEALER:
        return Payout(D0, qualified, PAYOUT_LOSS)
    if winner == TIE:
        return Payout(q9(stake), qualified, PAYOUT_PUSH)
    if not qualified:
        return Payout(q9(stake), qualified, PAYOUT_ANTE_ONLY)

    bonus = BONUS_PAYOUTS[player.rank]
    return Payout(q9(stake * (1 + bonus)), qualified, PAYOUT_ANTE_PLUS_BONUS)


# ======================================================
# FORMATTING
# ======================================================
_SUIT_BY_LETTER = {s.value[0].upper(): s for s in Suit}


def card_to_string(card: Card) -> str:
    return f"{card.rank.value}{card.suit.value[0].upper()}"


def cards_to_string(cards: Sequence[Card]) -> str:
    return " ".join(card_to_string(c) for c in cards)


def parse_card(text: str) -> Card:
    """'AH' -> ace of hearts, '10S' -> ten of spades."""
    text = text.strip().upper()
    return Card(_SUIT_BY_LETTER[text[-1]], Rank(text[:-1]))


def parse_cards(text: str) -> List[Card]:
    return [parse_card(t) for t in text.split()]


def payout_table() -> list:
    return [
        {"rank": int(rank), "name": rank.label, "bonus": f"{BONUS_PAYOUTS[rank]}:1"}
        for rank in HandRank
    ]
