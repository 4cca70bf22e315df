# wallets/models.py
import uuid

from django.conf import settings
from django.db import models

from core.money import AMOUNT_MAX_DIGITS, AMOUNT_PLACES


class Wallet(models.Model):
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="wallet",
    )
    balance = models.DecimalField(max_digits=AMOUNT_MAX_DIGITS, decimal_places=AMOUNT_PLACES, default=0)
    # portion of balance reserved by an in-flight settlement
    locked_balance = models.DecimalField(max_digits=AMOUNT_MAX_DIGITS, decimal_places=AMOUNT_PLACES, default=0)

    updated_at = models.DateTimeField(auto_now=True)

    @property
    def available_balance(self):
        return self.balance - self.locked_balance

    def __str__(self):
        return f"Wallet({self.user_id})"


class Transaction(models.Model):
    DEPOSIT = "deposit"
    WITHDRAW = "withdraw"
    WIN = "win"
    LOSS = "loss"
    TX_TYPE_CHOICES = [
        (DEPOSIT, "Deposit"),
        (WITHDRAW, "Withdraw"),
        (WIN, "Win"),
        (LOSS, "Loss"),
    ]
    CREDIT_TYPES = (DEPOSIT, WIN)
    DEBIT_TYPES = (WITHDRAW, LOSS)

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="transactions"
    )
    tx_type = models.CharField(max_length=8, choices=TX_TYPE_CHOICES)
    amount = models.DecimalField(max_digits=AMOUNT_MAX_DIGITS, decimal_places=AMOUNT_PLACES)
    balance_before = models.DecimalField(max_digits=AMOUNT_MAX_DIGITS, decimal_places=AMOUNT_PLACES)
    balance_after = models.DecimalField(max_digits=AMOUNT_MAX_DIGITS, decimal_places=AMOUNT_PLACES)

    # on-chain proof for deposits; unique so a verified payment is credited once
    transaction_signature = models.CharField(max_length=128, unique=True, null=True, blank=True)
    meta = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["user", "created_at"], name="wallets_tra_user_id_6c1f4e_idx"),
            models.Index(fields=["tx_type", "created_at"], name="wallets_tra_tx_type_3a9b2d_idx"),
        ]

    def __str__(self):
        return f"{self.tx_type} {self.amount} for {self.user_id}"
