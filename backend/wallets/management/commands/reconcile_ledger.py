# wallets/management/commands/reconcile_ledger.py
import logging
from datetime import timedelta

from django.core.management.base import BaseCommand, CommandError
from django.utils import timezone

from poker.models import PokerGame
from roulette.models import RouletteGame
from wallets.models import Wallet
from wallets.services import reconcile

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = "Check every wallet balance against its transaction log and list stuck pending games"

    def add_arguments(self, parser):
        parser.add_argument(
            "--wallet",
            type=str,
            help="Reconcile a single wallet address only",
        )
        parser.add_argument(
            "--pending-minutes",
            type=int,
            default=5,
            help="Report pending games older than this many minutes",
        )

    def handle(self, *args, **options):
        wallets = Wallet.objects.select_related("user").order_by("user__date_joined")
        if options.get("wallet"):
            wallets = wallets.filter(user__wallet_address=options["wallet"])
            if not wallets.exists():
                raise CommandError(f"No wallet for {options['wallet']}")

        checked = 0
        drifted = 0
        for wallet in wallets.iterator():
            result = reconcile(wallet.user_id)
            checked += 1
            if not result.ok:
                drifted += 1
                self.stdout.write(
                    self.style.ERROR(
                        f"DRIFT {wallet.user.wallet_address} | stored={result.stored_balance} "
                        f"| computed={result.computed_balance} | drift={result.drift}"
                    )
                )

        cutoff = timezone.now() - timedelta(minutes=options["pending_minutes"])
        stale = 0
        for model in (RouletteGame, PokerGame):
            for game in model.objects.filter(status=model.STATUS_PENDING, created_at__lt=cutoff):
                stale += 1
                self.stdout.write(
                    self.style.WARNING(
                        f"PENDING {model.__name__} {game.id} | user={game.user_id} | created={game.created_at:%Y-%m-%d %H:%M}"
                    )
                )

        summary = f"Checked {checked} wallet(s): {drifted} drifted, {stale} stale pending game(s)"
        if drifted or stale:
            logger.warning(summary)
            self.stdout.write(self.style.WARNING(summary))
        else:
            self.stdout.write(self.style.SUCCESS(summary))
