# accounts/signals.py
from django.contrib.auth import get_user_model
from django.db.models.signals import post_save
from django.dispatch import receiver

from wallets.models import Wallet

User = get_user_model()


@receiver(post_save, sender=User)
def create_user_wallet(sender, instance, created, **kwargs):
    """
    Every user gets exactly one zero-balance wallet, written in the same
    transaction as the user row.
    """
    if created:
        Wallet.objects.get_or_create(user=instance)
