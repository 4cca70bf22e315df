from dataclasses import asdict

from django.conf import settings
from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from core.serializers import page_params
from .serializers import (
    PriceSampleSerializer,
    TokenTradeSerializer,
    TradeReportSerializer,
    plain,
    quote_data,
)
from .services import TokenMarket, casino_reserves


@api_view(["GET"])
def price_view(request):
    market = TokenMarket.from_settings()
    reserves = casino_reserves()
    return Response(
        {
            "success": True,
            "data": plain(
                {
                    "price": market.get_price(reserves),
                    "casino_reserves": reserves,
                    "base_price": market.params.base_price,
                    "max_price": market.params.max_price,
                }
            ),
        }
    )


@api_view(["GET"])
def quote_buy_view(request):
    quote = TokenMarket.from_settings().quote_buy(request.query_params.get("sol"))
    return Response({"success": True, "data": quote_data(quote)})


@api_view(["GET"])
def quote_sell_view(request):
    quote = TokenMarket.from_settings().quote_sell(request.query_params.get("tokens"))
    return Response({"success": True, "data": quote_data(quote)})


@api_view(["GET"])
def stats_view(request):
    stats = TokenMarket.from_settings().get_market_stats()
    return Response({"success": True, "data": plain(stats)})


@api_view(["GET"])
def history_view(request):
    timeframe = request.query_params.get("timeframe", "7d")
    samples = TokenMarket.from_settings().get_price_history(timeframe)
    return Response(
        {
            "success": True,
            "data": {
                "timeframe": timeframe,
                "samples": PriceSampleSerializer(samples, many=True).data,
            },
        }
    )


@api_view(["GET"])
def projection_view(request):
    projection = TokenMarket.from_settings().project_price(request.query_params.get("profit", "0"))
    return Response({"success": True, "data": plain(asdict(projection))})


@api_view(["GET", "POST"])
def trades_view(request):
    market = TokenMarket.from_settings()

    if request.method == "POST":
        serializer = TradeReportSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        trade = market.record_trade(**serializer.validated_data)
        return Response(
            {"success": True, "data": TokenTradeSerializer(trade).data},
            status=status.HTTP_201_CREATED,
        )

    limit, _ = page_params(request)
    trades = market.get_recent_trades(limit)
    return Response({"success": True, "data": TokenTradeSerializer(trades, many=True).data})


@api_view(["GET"])
def info_view(request):
    market = TokenMarket.from_settings()
    return Response(
        {
            "success": True,
            "data": {
                "name": settings.TOKEN_NAME,
                "symbol": settings.TOKEN_SYMBOL,
                "decimals": 9,
                "total_supply": plain(market.total_supply),
                "curve": plain(asdict(market.params)),
                "description": "Token price follows the casino reserves along a logarithmic bonding curve.",
            },
        }
    )
