from django.urls import path
from . import views

urlpatterns = [
    path("price/", views.price_view, name="token-price"),
    path("quote/buy/", views.quote_buy_view, name="token-quote-buy"),
    path("quote/sell/", views.quote_sell_view, name="token-quote-sell"),
    path("stats/", views.stats_view, name="token-stats"),
    path("history/", views.history_view, name="token-history"),
    path("projection/", views.projection_view, name="token-projection"),
    path("trades/", views.trades_view, name="token-trades"),
    path("info/", views.info_view, name="token-info"),
]
