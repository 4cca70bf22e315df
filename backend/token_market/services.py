# token_market/services.py
import logging
from dataclasses import dataclass, field
from datetime import timedelta
from decimal import Decimal

from django.conf import settings
from django.db import IntegrityError, transaction
from django.db.models import Sum
from django.utils import timezone

from accounts.services import validate_wallet_address
from core.errors import ConflictError, InvalidAmountError
from core.money import D0, q9, to_amount, to_positive_amount
from wallets.models import Transaction
from wallets.services import totals_by_type
from . import bonding_curve
from .bonding_curve import CurveParams
from .models import PriceSample, TokenTrade

logger = logging.getLogger(__name__)

TIMEFRAMES = {
    "24h": timedelta(hours=24),
    "7d": timedelta(days=7),
    "30d": timedelta(days=30),
}
HISTORY_RETENTION = timedelta(days=30)


def casino_reserves() -> Decimal:
    """
    House reserves from the ledger: money in minus money out, plus what
    players lost minus what was paid back. Floored so the price stays defined.
    """
    t = totals_by_type()
    reserves = (
        t[Transaction.DEPOSIT]
        - t[Transaction.WITHDRAW]
        + t[Transaction.LOSS]
        - t[Transaction.WIN]
    )
    return max(q9(reserves), to_amount(settings.TOKEN_MIN_RESERVE))


def _pct_change(current: Decimal, previous: Decimal) -> Decimal:
    if not previous:
        return D0
    return ((current - previous) / previous * 100).quantize(Decimal("0.0001"))


@dataclass
class TokenMarket:
    """
    Read-only view of the token market over the live ledger.
    Build one per request or per sampler run with from_settings().
    """

    params: CurveParams = field(default_factory=CurveParams)
    total_supply: Decimal = Decimal("1000000000")

    @classmethod
    def from_settings(cls) -> "TokenMarket":
        return cls(
            params=CurveParams(
                base_price=Decimal(settings.TOKEN_BASE_PRICE),
                target_reserve=Decimal(settings.TOKEN_TARGET_RESERVE),
                max_multiplier=Decimal(settings.TOKEN_MAX_PRICE_MULTIPLIER),
            ),
            total_supply=Decimal(settings.TOKEN_TOTAL_SUPPLY),
        )

    # ---------------------------------------------------
    # PRICING
    # ---------------------------------------------------
    def get_price(self, reserves: Decimal = None) -> Decimal:
        if reserves is None:
            reserves = casino_reserves()
        return bonding_curve.price(reserves, self.params)

    def quote_buy(self, sol_amount):
        return bonding_curve.quote_buy(sol_amount, casino_reserves(), self.params)

    def quote_sell(self, token_amount):
        return bonding_curve.quote_sell(token_amount, casino_reserves(), self.params)

    def project_price(self, projected_profit):
        return bonding_curve.project_future_price(casino_reserves(), to_amount(projected_profit), self.params)

    # ---------------------------------------------------
    # STATS
    # ---------------------------------------------------
    def _price_at_window_start(self, since):
        sample = PriceSample.objects.filter(created_at__gte=since).order_by("created_at").first()
        return sample.price if sample else None

    def volume_24h(self) -> Decimal:
        since = timezone.now() - TIMEFRAMES["24h"]
        total = TokenTrade.objects.filter(created_at__gte=since).aggregate(v=Sum("sol_amount"))["v"]
        return q9(total) if total else D0

    def circulating_supply(self) -> Decimal:
        totals = {
            row["side"]: row["tokens"] or D0
            for row in TokenTrade.objects.values("side").annotate(tokens=Sum("token_amount")).order_by()
        }
        return q9(totals.get(TokenTrade.SIDE_BUY, D0) - totals.get(TokenTrade.SIDE_SELL, D0))

    def get_market_stats(self) -> dict:
        reserves = casino_reserves()
        current = self.get_price(reserves)
        now = timezone.now()

        price_24h = self._price_at_window_start(now - TIMEFRAMES["24h"]) or current
        price_7d = self._price_at_window_start(now - TIMEFRAMES["7d"]) or current

        return {
            "price": current,
            "market_cap": bonding_curve.market_cap(self.total_supply, current),
            "total_supply": self.total_supply,
            "circulating_supply": self.circulating_supply(),
            "reserve_ratio": min(reserves / self.params.target_reserve, Decimal("1")),
            "price_change_24h": _pct_change(current, price_24h),
            "price_change_7d": _pct_change(current, price_7d),
            "volume_24h": self.volume_24h(),
            "total_trades": TokenTrade.objects.count(),
            "casino_reserves": reserves,
        }

    # ---------------------------------------------------
    # HISTORY
    # ---------------------------------------------------
    def record_price_sample(self) -> PriceSample:
        reserves = casino_reserves()
        now = timezone.now()
        sample = PriceSample.objects.create(
            price=self.get_price(reserves),
            reserves=reserves,
            volume_24h=self.volume_24h(),
            created_at=now,
        )
        pruned, _ = PriceSample.objects.filter(created_at__lt=now - HISTORY_RETENTION).delete()
        if pruned:
            logger.debug(f"Pruned {pruned} price samples")
        return sample

    def get_price_history(self, timeframe: str = "7d"):
        if timeframe not in TIMEFRAMES:
            raise InvalidAmountError(f"Unknown timeframe {timeframe}, use one of {', '.join(TIMEFRAMES)}")
        cutoff = timezone.now() - TIMEFRAMES[timeframe]
        return list(PriceSample.objects.filter(created_at__gt=cutoff).order_by("created_at"))

    # ---------------------------------------------------
    # TRADES
    # ---------------------------------------------------
    def record_trade(self, side: str, wallet_address: str, token_amount, sol_amount, tx_signature: str = None) -> TokenTrade:
        """Book a trade the external agent has already executed on chain."""
        if side not in (TokenTrade.SIDE_BUY, TokenTrade.SIDE_SELL):
            raise InvalidAmountError(f"Unknown trade side: {side}")
        validate_wallet_address(wallet_address)
        token_amount = to_positive_amount(token_amount)
        sol_amount = to_positive_amount(sol_amount)

        if tx_signature and TokenTrade.objects.filter(tx_signature=tx_signature).exists():
            raise ConflictError("Trade already recorded", code="DUPLICATE_SIGNATURE")

        try:
            with transaction.atomic():
                trade = TokenTrade.objects.create(
                    side=side,
                    wallet_address=wallet_address,
                    token_amount=token_amount,
                    sol_amount=sol_amount,
                    price_per_token=bonding_curve.q_price(sol_amount / token_amount),
                    tx_signature=tx_signature or None,
                )
        except IntegrityError:
            raise ConflictError("Trade already recorded", code="DUPLICATE_SIGNATURE")

        logger.info(f"Token {side} {token_amount} for {sol_amount} SOL by {wallet_address}")
        return trade

    def get_recent_trades(self, limit: int = 50):
        return list(TokenTrade.objects.order_by("-created_at")[:limit])
