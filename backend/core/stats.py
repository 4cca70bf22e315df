# core/stats.py
from decimal import Decimal

from django.db.models import Count, Max, Q, Sum

from .money import D0, fmt


def summarize_games(queryset, wagered_field: str, won_field: str, won_filter: Q) -> dict:
    """Player stats over completed game rows, computed on demand."""
    agg = queryset.aggregate(
        total_games=Count("id"),
        total_wagered=Sum(wagered_field),
        total_won=Sum(won_field),
        total_profit=Sum("profit"),
        games_won=Count("id", filter=won_filter),
        biggest_win=Max("profit", filter=Q(profit__gt=0)),
    )
    total_games = agg["total_games"] or 0
    games_won = agg["games_won"] or 0
    win_rate = Decimal(games_won * 100) / Decimal(total_games) if total_games else D0

    return {
        "total_games": total_games,
        "games_won": games_won,
        "total_wagered": fmt(agg["total_wagered"] or D0),
        "total_won": fmt(agg["total_won"] or D0),
        "total_profit": fmt(agg["total_profit"] or D0),
        "win_rate": float(round(win_rate, 2)),
        "biggest_win": fmt(agg["biggest_win"] or D0),
    }
