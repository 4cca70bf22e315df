# token_market/bonding_curve.py
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, ROUND_DOWN, localcontext

from core.errors import InsufficientReservesError, InvalidAmountError
from core.money import to_positive_amount

PRECISION = 36
BUY_STEPS = 100
SELL_MAX_ITERATIONS = 50
SELL_TOLERANCE = Decimal("0.0001")  # tokens

D0 = Decimal("0")
D1 = Decimal("1")
D9 = Decimal("9")
D100 = Decimal("100")

PRICE_QUANTUM = Decimal("1e-18")
AMOUNT_QUANTUM = Decimal("1e-9")
RATIO_QUANTUM = Decimal("1e-12")


def q_price(x: Decimal) -> Decimal:
    return x.quantize(PRICE_QUANTUM, rounding=ROUND_DOWN)


def q_amount(x: Decimal) -> Decimal:
    return x.quantize(AMOUNT_QUANTUM, rounding=ROUND_DOWN)


def q_ratio(x: Decimal) -> Decimal:
    return x.quantize(RATIO_QUANTUM, rounding=ROUND_DOWN)


@dataclass(frozen=True)
class CurveParams:
    base_price: Decimal = Decimal("0.000001")
    target_reserve: Decimal = Decimal("100")
    max_multiplier: Decimal = Decimal("10")

    def __post_init__(self):
        if self.base_price <= D0 or self.target_reserve <= D0 or self.max_multiplier < D1:
            raise ValueError("Curve needs base_price > 0, target_reserve > 0, max_multiplier >= 1")

    @property
    def max_price(self) -> Decimal:
        return self.base_price * self.max_multiplier


DEFAULT_PARAMS = CurveParams()


@dataclass(frozen=True)
class BuyQuote:
    token_amount: Decimal
    sol_cost: Decimal
    start_price: Decimal
    avg_price: Decimal
    price_impact: Decimal  # fraction, (avg - start) / start
    reserve_ratio: Decimal


@dataclass(frozen=True)
class SellQuote:
    token_amount: Decimal
    sol_cost: Decimal  # SOL paid out for the tokens
    start_price: Decimal
    avg_price: Decimal
    price_impact: Decimal  # fraction, (start - avg) / start
    reserve_ratio: Decimal


@dataclass(frozen=True)
class PriceProjection:
    current_price: Decimal
    future_price: Decimal
    price_increase_pct: Decimal


def _ratio(reserves: Decimal, params: CurveParams) -> Decimal:
    reserves = max(reserves, D0)
    return min(reserves / params.target_reserve, D1)


def _price(reserves: Decimal, params: CurveParams) -> Decimal:
    # callers hold the high-precision context
    multiplier = D1 + (params.max_multiplier - D1) * (D1 + D9 * _ratio(reserves, params)).log10()
    return params.base_price * multiplier


def _tokens_for_sol(sol: Decimal, reserves: Decimal, params: CurveParams) -> Decimal:
    """Left Riemann sum of d(sol) / price while reserves rise by sol."""
    step = sol / BUY_STEPS
    total = D0
    for i in range(BUY_STEPS):
        total += step / _price(reserves + i * step, params)
    return total


def price(reserves, params: CurveParams = DEFAULT_PARAMS) -> Decimal:
    """
    base * (1 + (max - 1) * log10(1 + 9 * min(reserves / target, 1)))

    Non-decreasing in reserves, equal to base at 0 and capped at
    base * max once reserves reach the target.
    """
    with localcontext() as ctx:
        ctx.prec = PRECISION
        return q_price(_price(Decimal(reserves), params))


def quote_buy(sol_amount, reserves, params: CurveParams = DEFAULT_PARAMS) -> BuyQuote:
    sol = to_positive_amount(sol_amount)
    reserves = max(Decimal(reserves), D0)

    with localcontext() as ctx:
        ctx.prec = PRECISION
        start = _price(reserves, params)
        tokens = _tokens_for_sol(sol, reserves, params)
        avg = sol / tokens
        return BuyQuote(
            token_amount=q_amount(tokens),
            sol_cost=sol,
            start_price=q_price(start),
            avg_price=q_price(avg),
            price_impact=q_ratio((avg - start) / start),
            reserve_ratio=q_ratio(_ratio(reserves, params)),
        )


def quote_sell(token_amount, reserves, params: CurveParams = DEFAULT_PARAMS) -> SellQuote:
    """
    SOL returned for selling tokens back down the curve: the S for which
    buying from (reserves - S) up to reserves would yield token_amount.
    """
    tokens_wanted = to_positive_amount(token_amount)
    reserves = max(Decimal(reserves), D0)

    with localcontext() as ctx:
        ctx.prec = PRECISION

        if reserves <= D0 or _tokens_for_sol(reserves, D0, params) < tokens_wanted:
            raise InsufficientReservesError(
                f"Reserves of {q_amount(reserves)} SOL cannot cover {tokens_wanted} tokens"
            )

        low, high = D0, reserves
        sol = high
        for _ in range(SELL_MAX_ITERATIONS):
            mid = (low + high) / 2
            got = _tokens_for_sol(mid, reserves - mid, params)
            if abs(got - tokens_wanted) < SELL_TOLERANCE:
                sol = mid
                break
            if got < tokens_wanted:
                low = mid
            else:
                high = mid
            sol = high

        start = _price(reserves, params)
        avg = sol / tokens_wanted
        return SellQuote(
            token_amount=tokens_wanted,
            sol_cost=q_amount(sol),
            start_price=q_price(start),
            avg_price=q_price(avg),
            price_impact=q_ratio((start - avg) / start),
            reserve_ratio=q_ratio(_ratio(reserves, params)),
        )


def market_cap(total_supply, current_price) -> Decimal:
    with localcontext() as ctx:
        ctx.prec = PRECISION
        return q_amount(Decimal(total_supply) * Decimal(current_price))


def project_future_price(current_reserves, projected_profit, params: CurveParams = DEFAULT_PARAMS) -> PriceProjection:
    if isinstance(projected_profit, float):
        raise InvalidAmountError(f"Invalid amount: {projected_profit!r}")

    with localcontext() as ctx:
        ctx.prec = PRECISION
        current_reserves = Decimal(current_reserves)
        current = _price(current_reserves, params)
        future = _price(current_reserves + Decimal(projected_profit), params)
        return PriceProjection(
            current_price=q_price(current),
            future_price=q_price(future),
            price_increase_pct=q_ratio((future - current) / current * D100),
        )
