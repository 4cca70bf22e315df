# core/abuse.py
from __future__ import annotations

import time
from dataclasses import dataclass

from django.conf import settings
from django.core.cache import cache

from .errors import RateLimitedError


@dataclass
class RateLimit:
    key: str
    limit: int
    window_sec: int


def hit_rate_limit(rl: RateLimit) -> None:
    """
    Simple fixed-window counter.
    """
    now_bucket = int(time.time()) // rl.window_sec
    cache_key = f"rl:{rl.key}:{now_bucket}"
    n = cache.get(cache_key, 0)
    if n >= rl.limit:
        raise RateLimitedError("Rate limit exceeded, slow down")
    cache.set(cache_key, n + 1, timeout=rl.window_sec + 2)


def check_bet_rate(wallet_address: str) -> None:
    hit_rate_limit(
        RateLimit(
            key=f"bet:{wallet_address}",
            limit=settings.BET_RATE_LIMIT,
            window_sec=settings.BET_RATE_WINDOW_SECONDS,
        )
    )
