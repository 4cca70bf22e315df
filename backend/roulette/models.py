# roulette/models.py
import uuid

from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from core.money import AMOUNT_MAX_DIGITS, AMOUNT_PLACES

User = settings.AUTH_USER_MODEL


class RouletteGame(models.Model):
    STATUS_PENDING = "pending"
    STATUS_COMPLETED = "completed"
    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_COMPLETED, "Completed"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name="roulette_games")

    result = models.PositiveSmallIntegerField(
        null=True, blank=True, validators=[MinValueValidator(0), MaxValueValidator(36)]
    )
    total_bet_amount = models.DecimalField(max_digits=AMOUNT_MAX_DIGITS, decimal_places=AMOUNT_PLACES)
    # everything credited back: stakes of winning bets plus their winnings
    total_win_amount = models.DecimalField(max_digits=AMOUNT_MAX_DIGITS, decimal_places=AMOUNT_PLACES, default=0)
    profit = models.DecimalField(max_digits=AMOUNT_MAX_DIGITS, decimal_places=AMOUNT_PLACES, default=0)

    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_PENDING)
    created_at = models.DateTimeField(auto_now_add=True)
    completed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["user", "-created_at"], name="roulette_game_user_created"),
            models.Index(fields=["status", "created_at"], name="roulette_game_status_created"),
        ]

    def __str__(self):
        return f"RouletteGame({self.id}) result={self.result} status={self.status}"


class Bet(models.Model):
    RESULT_WIN = "win"
    RESULT_LOSS = "loss"
    RESULT_CHOICES = [
        (RESULT_WIN, "Win"),
        (RESULT_LOSS, "Loss"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    game = models.ForeignKey(RouletteGame, on_delete=models.CASCADE, related_name="bets")
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name="roulette_bets")

    bet_type = models.CharField(max_length=16)
    numbers = models.JSONField(default=list)
    amount = models.DecimalField(max_digits=AMOUNT_MAX_DIGITS, decimal_places=AMOUNT_PLACES)
    payout = models.PositiveSmallIntegerField()  # multiplier, 35 means 35:1

    result = models.CharField(max_length=8, choices=RESULT_CHOICES, null=True, blank=True)
    win_amount = models.DecimalField(max_digits=AMOUNT_MAX_DIGITS, decimal_places=AMOUNT_PLACES, default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at"]

    def __str__(self):
        return f"Bet({self.bet_type} {self.numbers} x{self.amount})"
