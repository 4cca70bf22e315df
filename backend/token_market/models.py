# token_market/models.py
import uuid

from django.db import models

from core.money import AMOUNT_MAX_DIGITS, AMOUNT_PLACES

PRICE_MAX_DIGITS = 36
PRICE_PLACES = 18


class PriceSample(models.Model):
    price = models.DecimalField(max_digits=PRICE_MAX_DIGITS, decimal_places=PRICE_PLACES)
    reserves = models.DecimalField(max_digits=AMOUNT_MAX_DIGITS, decimal_places=AMOUNT_PLACES)
    volume_24h = models.DecimalField(max_digits=AMOUNT_MAX_DIGITS, decimal_places=AMOUNT_PLACES, default=0)
    created_at = models.DateTimeField(db_index=True)

    class Meta:
        ordering = ["created_at"]

    def __str__(self):
        return f"PriceSample({self.created_at:%Y-%m-%d %H:%M} {self.price})"


class TokenTrade(models.Model):
    SIDE_BUY = "buy"
    SIDE_SELL = "sell"
    SIDE_CHOICES = [
        (SIDE_BUY, "Buy"),
        (SIDE_SELL, "Sell"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    side = models.CharField(max_length=4, choices=SIDE_CHOICES)
    wallet_address = models.CharField(max_length=44, db_index=True)
    token_amount = models.DecimalField(max_digits=AMOUNT_MAX_DIGITS, decimal_places=AMOUNT_PLACES)
    sol_amount = models.DecimalField(max_digits=AMOUNT_MAX_DIGITS, decimal_places=AMOUNT_PLACES)
    price_per_token = models.DecimalField(max_digits=PRICE_MAX_DIGITS, decimal_places=PRICE_PLACES)
    tx_signature = models.CharField(max_length=128, unique=True, null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.side} {self.token_amount} @ {self.price_per_token}"
