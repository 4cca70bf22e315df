from django.urls import path
from . import views

urlpatterns = [
    path("info/", views.info_view, name="poker-info"),
    path("play/", views.play_view, name="poker-play"),
    path("play-with-balance/", views.play_with_balance_view, name="poker-play-with-balance"),
    path("game/<uuid:game_id>/", views.game_view, name="poker-game"),
    path("history/<str:wallet_address>/", views.history_view, name="poker-history"),
    path("stats/<str:wallet_address>/", views.stats_view, name="poker-stats"),
]
