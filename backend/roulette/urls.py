from django.urls import path
from . import views

urlpatterns = [
    path("info/", views.info_view, name="roulette-info"),
    path("play/", views.play_view, name="roulette-play"),
    path("play-with-balance/", views.play_with_balance_view, name="roulette-play-with-balance"),
    path("quick-bet/", views.quick_bet_view, name="roulette-quick-bet"),
    path("game/<uuid:game_id>/", views.game_view, name="roulette-game"),
    path("history/<str:wallet_address>/", views.history_view, name="roulette-history"),
    path("stats/<str:wallet_address>/", views.stats_view, name="roulette-stats"),
]
