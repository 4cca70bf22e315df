# core/money.py
from __future__ import annotations

from decimal import Decimal, InvalidOperation, ROUND_DOWN

from .errors import InvalidAmountError

AMOUNT_PLACES = 9
AMOUNT_QUANTUM = Decimal("0.000000001")
AMOUNT_MAX_DIGITS = 28

D0 = Decimal("0")


def q9(x: Decimal) -> Decimal:
    return x.quantize(AMOUNT_QUANTUM, rounding=ROUND_DOWN)


def to_amount(value) -> Decimal:
    """
    Parse a client/DB value into a 9-place Decimal.
    Strings, ints and Decimals only: floats are rejected so binary
    rounding never leaks into the ledger.
    """
    if isinstance(value, bool) or isinstance(value, float):
        raise InvalidAmountError(f"Invalid amount: {value!r}")

    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, (int, str)):
        try:
            amount = Decimal(str(value).strip())
        except InvalidOperation:
            raise InvalidAmountError(f"Invalid amount: {value!r}")
    else:
        raise InvalidAmountError(f"Invalid amount: {value!r}")

    if not amount.is_finite():
        raise InvalidAmountError(f"Invalid amount: {value!r}")

    return q9(amount)


def to_positive_amount(value) -> Decimal:
    amount = to_amount(value)
    if amount <= D0:
        raise InvalidAmountError("Amount must be positive")
    return amount


def fmt(amount: Decimal) -> str:
    """Fixed-point string with 9 fractional digits, as sent over the API."""
    return format(q9(amount), "f")
