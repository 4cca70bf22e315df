from datetime import timedelta
from decimal import Decimal

import pytest
from django.utils import timezone

from accounts.services import InvalidIdentityError
from core.errors import ConflictError, InvalidAmountError
from token_market import bonding_curve
from token_market.models import PriceSample, TokenTrade
from token_market.services import TokenMarket, casino_reserves
from wallets import services as wallet_services

from .conftest import make_address

pytestmark = pytest.mark.django_db


@pytest.fixture
def market(settings):
    settings.TOKEN_BASE_PRICE = "0.000001"
    settings.TOKEN_TARGET_RESERVE = "100"
    settings.TOKEN_MAX_PRICE_MULTIPLIER = "10"
    settings.TOKEN_TOTAL_SUPPLY = "1000000000"
    settings.TOKEN_MIN_RESERVE = "1"
    return TokenMarket.from_settings()


def test_reserves_floor_on_empty_ledger(market):
    assert casino_reserves() == Decimal("1")


def test_reserves_follow_the_ledger(user, fund):
    fund(user, "20")
    wallet_services.withdraw(user.id, Decimal("5"))
    # a lost stake of 3 and a stake of 2 that came back as 4
    wallet_services.debit(user.id, Decimal("3"))
    wallet_services.debit(user.id, Decimal("2"))
    wallet_services.credit(user.id, Decimal("4"), tx_type="win")

    assert casino_reserves() == Decimal("20") - 5 + (3 + 2) - 4


def test_reserves_are_nine_place_amounts(user, fund):
    fund(user, "10")
    assert format(casino_reserves(), "f") == "10.000000000"


def test_volume_and_supply_are_nine_place_amounts(market):
    market.record_trade("buy", make_address(3), "100", "1")
    assert format(market.volume_24h(), "f") == "1.000000000"
    assert format(market.circulating_supply(), "f") == "100.000000000"


def test_price_reads_reserves(market, user, fund):
    fund(user, "100")
    assert market.get_price() == Decimal("0.00001")
    assert market.get_price(Decimal("0")) == Decimal("0.000001")


def test_quotes_use_live_reserves(market, user, fund):
    fund(user, "10")
    assert market.quote_buy("1") == bonding_curve.quote_buy("1", Decimal("10"), market.params)
    assert market.project_price("90").future_price == Decimal("0.00001")


def test_market_stats(market, user, fund):
    fund(user, "50")
    market.record_trade("buy", user.wallet_address, "1000", "0.01")

    stats = market.get_market_stats()
    assert stats["price"] == bonding_curve.price(Decimal("50"))
    assert stats["market_cap"] == bonding_curve.market_cap(Decimal("1000000000"), stats["price"])
    assert stats["reserve_ratio"] == Decimal("0.5")
    assert stats["casino_reserves"] == Decimal("50")
    assert stats["circulating_supply"] == Decimal("1000")
    assert stats["volume_24h"] == Decimal("0.01")
    assert stats["total_trades"] == 1
    assert stats["price_change_24h"] == 0


def test_price_change_against_oldest_sample_in_window(market, user, fund):
    # empty ledger, so the sample is taken at the reserve floor
    sample = market.record_price_sample()
    assert sample.price == bonding_curve.price(Decimal("1"))
    fund(user, "100")

    stats = market.get_market_stats()
    expected = (Decimal("0.00001") - sample.price) / sample.price * 100
    assert stats["price_change_24h"] == expected.quantize(Decimal("0.0001"))
    assert stats["price_change_7d"] == stats["price_change_24h"]


def test_record_price_sample_prunes_old_rows(market):
    old = market.record_price_sample()
    PriceSample.objects.filter(pk=old.pk).update(created_at=timezone.now() - timedelta(days=31))

    market.record_price_sample()
    assert PriceSample.objects.count() == 1
    assert not PriceSample.objects.filter(pk=old.pk).exists()


def test_price_history_windows(market):
    recent = market.record_price_sample()
    week_old = market.record_price_sample()
    PriceSample.objects.filter(pk=week_old.pk).update(created_at=timezone.now() - timedelta(days=3))

    assert [s.pk for s in market.get_price_history("24h")] == [recent.pk]
    assert [s.pk for s in market.get_price_history("7d")] == [week_old.pk, recent.pk]

    with pytest.raises(InvalidAmountError):
        market.get_price_history("1y")


def test_record_trade(market):
    trade = market.record_trade("sell", make_address(3), "500", "0.001", tx_signature="trade-1")
    assert trade.side == TokenTrade.SIDE_SELL
    assert trade.price_per_token == Decimal("0.000002")

    with pytest.raises(ConflictError) as exc:
        market.record_trade("sell", make_address(3), "500", "0.001", tx_signature="trade-1")
    assert exc.value.code == "DUPLICATE_SIGNATURE"


def test_record_trade_validation(market):
    with pytest.raises(InvalidAmountError):
        market.record_trade("hold", make_address(3), "1", "1")
    with pytest.raises(InvalidIdentityError):
        market.record_trade("buy", "not-a-wallet", "1", "1")
    with pytest.raises(InvalidAmountError):
        market.record_trade("buy", make_address(3), "0", "1")


def test_circulating_supply_and_recent_trades(market):
    market.record_trade("buy", make_address(3), "100", "1")
    market.record_trade("sell", make_address(4), "30", "0.5")

    assert market.circulating_supply() == Decimal("70")
    assert len(market.get_recent_trades(limit=1)) == 1
    assert len(market.get_recent_trades()) == 2
