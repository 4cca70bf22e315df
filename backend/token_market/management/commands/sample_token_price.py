# token_market/management/commands/sample_token_price.py
import logging
import signal
import time

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.conf import settings
from django.core.management.base import BaseCommand

from token_market.consumers import PRICE_GROUP
from token_market.redis_lock import Lease, LeaseLost
from token_market.serializers import plain
from token_market.services import TokenMarket

logger = logging.getLogger(__name__)

LOCK_KEY = "token_market:price_sampler"


class Command(BaseCommand):
    help = "Record token price samples and push them to live subscribers (single instance via Redis lock)"

    def add_arguments(self, parser):
        parser.add_argument(
            "--once",
            action="store_true",
            help="Record a single sample and exit, without the lock",
        )
        parser.add_argument(
            "--interval",
            type=int,
            default=None,
            help="Seconds between samples (default: TOKEN_PRICE_SAMPLE_INTERVAL)",
        )
        parser.add_argument(
            "--lock-ttl",
            type=int,
            default=None,
            help="Lock TTL in seconds (default: TOKEN_SAMPLER_LOCK_TTL)",
        )

    def sample(self, market: TokenMarket):
        sample = market.record_price_sample()
        stats = plain(market.get_market_stats())

        channel_layer = get_channel_layer()
        if channel_layer is not None:
            async_to_sync(channel_layer.group_send)(
                PRICE_GROUP,
                {"type": "price.update", "data": stats},
            )

        self.stdout.write(f"[SAMPLER] price={sample.price} reserves={sample.reserves}")
        return sample

    def handle(self, *args, **options):
        market = TokenMarket.from_settings()

        if options["once"]:
            self.sample(market)
            return

        interval = options["interval"] or settings.TOKEN_PRICE_SAMPLE_INTERVAL
        lock_ttl = options["lock_ttl"] or settings.TOKEN_SAMPLER_LOCK_TTL

        lease = Lease(LOCK_KEY, lock_ttl)
        if not lease.acquire():
            self.stdout.write(self.style.WARNING("[SAMPLER] Another sampler already running. Exiting."))
            return

        self.stdout.write(self.style.SUCCESS(f"[SAMPLER] Lock acquired. Sampling every {interval}s."))
        running = True

        def shutdown(*_):
            nonlocal running
            running = False
            self.stdout.write(self.style.WARNING("[SAMPLER] Shutdown requested."))

        signal.signal(signal.SIGINT, shutdown)
        signal.signal(signal.SIGTERM, shutdown)

        try:
            next_at = time.monotonic()
            while running:
                lease.keep_alive()
                if time.monotonic() >= next_at:
                    self.sample(market)
                    next_at = time.monotonic() + interval
                time.sleep(1)
        except LeaseLost:
            logger.error("Price sampler lost its lock, another instance may have taken over")
            self.stdout.write(self.style.ERROR("[SAMPLER] Lock lost."))
        finally:
            lease.release()
            self.stdout.write(self.style.SUCCESS("[SAMPLER] Lock released. Sampler stopped."))
