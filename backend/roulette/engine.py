# roulette/engine.py
from __future__ import annotations

import secrets
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Callable, Iterable, Tuple

from core.errors import InvalidBetError
from core.money import q9

# European single-zero wheel
NUMBERS = tuple(range(37))
WHEEL_SIZE = len(NUMBERS)

RED_NUMBERS = frozenset({1, 3, 5, 7, 9, 12, 14, 16, 18, 19, 21, 23, 25, 27, 30, 32, 34, 36})
BLACK_NUMBERS = frozenset(set(range(1, 37)) - RED_NUMBERS)

DOZENS = {
    1: frozenset(range(1, 13)),
    2: frozenset(range(13, 25)),
    3: frozenset(range(25, 37)),
}
COLUMNS = {
    1: frozenset(range(1, 37, 3)),
    2: frozenset(range(2, 37, 3)),
    3: frozenset(range(3, 37, 3)),
}

HOUSE_EDGE_PCT = Decimal("2.70")


def _table_rows():
    # row r holds 3r+1, 3r+2, 3r+3
    return [(3 * r + 1, 3 * r + 2, 3 * r + 3) for r in range(12)]


def _build_splits():
    splits = {frozenset({0, n}) for n in (1, 2, 3)}
    for n in range(1, 37):
        if n % 3 != 0:
            splits.add(frozenset({n, n + 1}))
        if n + 3 <= 36:
            splits.add(frozenset({n, n + 3}))
    return frozenset(splits)


def _build_streets():
    streets = {frozenset(row) for row in _table_rows()}
    streets.add(frozenset({0, 1, 2}))
    streets.add(frozenset({0, 2, 3}))
    return frozenset(streets)


def _build_corners():
    corners = {frozenset({0, 1, 2, 3})}
    for n in range(1, 33):
        if n % 3 != 0:
            corners.add(frozenset({n, n + 1, n + 3, n + 4}))
    return frozenset(corners)


def _build_lines():
    rows = _table_rows()
    return frozenset(frozenset(rows[r] + rows[r + 1]) for r in range(11))


VALID_SPLITS = _build_splits()
VALID_STREETS = _build_streets()
VALID_CORNERS = _build_corners()
VALID_LINES = _build_lines()


class BetType(str, Enum):
    STRAIGHT = "straight"
    SPLIT = "split"
    STREET = "street"
    CORNER = "corner"
    LINE = "line"
    DOZEN = "dozen"
    COLUMN = "column"
    RED = "red"
    BLACK = "black"
    EVEN = "even"
    ODD = "odd"
    LOW = "low"
    HIGH = "high"


@dataclass(frozen=True)
class BetRule:
    payout: int
    count: int
    description: str
    resolve: Callable[[Tuple[int, ...]], frozenset]

    @property
    def probability(self) -> Decimal:
        return Decimal(self.count) / Decimal(WHEEL_SIZE)


# ======================================================
# RESOLVERS
# ======================================================
def _inside(valid: frozenset, label: str):
    def resolve(numbers):
        covered = frozenset(numbers)
        if covered not in valid:
            raise InvalidBetError(f"{sorted(numbers)} is not a valid {label} on the table")
        return covered
    return resolve


def _straight(numbers):
    return frozenset(numbers)


def _selector(groups: dict, label: str):
    """Dozen/column: a selector [1|2|3] or the exact 12-number set."""
    def resolve(numbers):
        if len(numbers) == 1 and numbers[0] in groups:
            return groups[numbers[0]]
        covered = frozenset(numbers)
        if covered in groups.values():
            return covered
        raise InvalidBetError(f"{label} bet needs a selector 1-3 or a full {label}")
    return resolve


def _canonical(covered: frozenset):
    # client numbers are ignored for even-money bets
    return lambda numbers: covered


BET_RULES = {
    BetType.STRAIGHT: BetRule(35, 1, "Single number", _straight),
    BetType.SPLIT: BetRule(17, 2, "Two adjacent numbers", _inside(VALID_SPLITS, "split")),
    BetType.STREET: BetRule(11, 3, "Three numbers in a row", _inside(VALID_STREETS, "street")),
    BetType.CORNER: BetRule(8, 4, "Four numbers in a square", _inside(VALID_CORNERS, "corner")),
    BetType.LINE: BetRule(5, 6, "Two adjacent rows", _inside(VALID_LINES, "line")),
    BetType.DOZEN: BetRule(2, 12, "1-12, 13-24 or 25-36", _selector(DOZENS, "dozen")),
    BetType.COLUMN: BetRule(2, 12, "One of three columns", _selector(COLUMNS, "column")),
    BetType.RED: BetRule(1, 18, "All red numbers", _canonical(RED_NUMBERS)),
    BetType.BLACK: BetRule(1, 18, "All black numbers", _canonical(BLACK_NUMBERS)),
    BetType.EVEN: BetRule(1, 18, "Even numbers (zero excluded)", _canonical(frozenset(range(2, 37, 2)))),
    BetType.ODD: BetRule(1, 18, "Odd numbers", _canonical(frozenset(range(1, 37, 2)))),
    BetType.LOW: BetRule(1, 18, "1-18", _canonical(frozenset(range(1, 19)))),
    BetType.HIGH: BetRule(1, 18, "19-36", _canonical(frozenset(range(19, 37)))),
}

_missing = [t.value for t in BetType if t not in BET_RULES]
if _missing:
    raise ImportError(f"Roulette bet types without a rule: {', '.join(_missing)}")

QUICK_BET_TYPES = frozenset(
    {BetType.RED, BetType.BLACK, BetType.EVEN, BetType.ODD, BetType.LOW, BetType.HIGH, BetType.DOZEN, BetType.COLUMN}
)


# ======================================================
# PUBLIC API
# ======================================================
def spin() -> int:
    return secrets.randbelow(WHEEL_SIZE)


def parse_bet_type(value) -> BetType:
    try:
        return BetType(value)
    except ValueError:
        raise InvalidBetError(f"Invalid bet type: {value}")


def _clean_numbers(numbers: Iterable) -> Tuple[int, ...]:
    if numbers is None:
        return ()
    if isinstance(numbers, (str, bytes)) or not isinstance(numbers, (list, tuple)):
        raise InvalidBetError("numbers must be a list of integers")
    cleaned = []
    for n in numbers:
        if isinstance(n, bool) or not isinstance(n, int):
            raise InvalidBetError(f"Invalid number: {n!r}")
        if n not in NUMBERS:
            raise InvalidBetError(f"Number out of range 0-36: {n}")
        cleaned.append(n)
    if len(set(cleaned)) != len(cleaned):
        raise InvalidBetError("Duplicate numbers in bet")
    return tuple(cleaned)


def resolve_numbers(bet_type, numbers) -> Tuple[int, ...]:
    """
    Validate a bet and return its covered numbers, sorted.
    Never trusts the client list for outside bets.
    """
    bet_type = parse_bet_type(bet_type)
    rule = BET_RULES[bet_type]
    cleaned = _clean_numbers(numbers)

    if bet_type == BetType.STRAIGHT and len(cleaned) != 1:
        raise InvalidBetError("straight bet needs exactly 1 number")
    if bet_type in (BetType.SPLIT, BetType.STREET, BetType.CORNER, BetType.LINE) and len(cleaned) != rule.count:
        raise InvalidBetError(f"{bet_type.value} bet needs exactly {rule.count} numbers")

    covered = rule.resolve(cleaned)
    if len(covered) != rule.count:
        raise InvalidBetError(f"{bet_type.value} bet covers {len(covered)} numbers, expected {rule.count}")
    return tuple(sorted(covered))


def check_win(numbers: Iterable[int], result: int) -> bool:
    return result in numbers


def calculate_win_amount(amount: Decimal, payout: int) -> Decimal:
    """Profit on a winning bet; the stake is returned on top of this."""
    return q9(amount * Decimal(payout))


def winning_properties(result: int) -> dict:
    return {
        "number": result,
        "color": "red" if result in RED_NUMBERS else "black" if result in BLACK_NUMBERS else "green",
        "even": result != 0 and result % 2 == 0,
        "odd": result % 2 == 1,
        "low": 1 <= result <= 18,
        "high": 19 <= result <= 36,
        "dozen": 0 if result == 0 else (result - 1) // 12 + 1,
        "column": 0 if result == 0 else (result - 1) % 3 + 1,
    }


def bet_table() -> list:
    """Bet types with payout and odds, for the info endpoint."""
    return [
        {
            "type": bet_type.value,
            "payout": f"{rule.payout}:1",
            "numbers": rule.count,
            "probability": f"{rule.probability * 100:.2f}%",
            "description": rule.description,
        }
        for bet_type, rule in BET_RULES.items()
    ]
