# poker/models.py
import uuid

from django.conf import settings
from django.db import models

from core.money import AMOUNT_MAX_DIGITS, AMOUNT_PLACES

User = settings.AUTH_USER_MODEL


class PokerGame(models.Model):
    STATUS_PENDING = "pending"
    STATUS_COMPLETED = "completed"
    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_COMPLETED, "Completed"),
    ]

    WINNER_CHOICES = [
        ("player", "Player"),
        ("dealer", "Dealer"),
        ("tie", "Tie"),
    ]

    PAYOUT_TYPE_CHOICES = [
        ("loss", "Loss"),
        ("push", "Push"),
        ("ante-only", "Ante only"),
        ("ante-plus-bonus", "Ante plus bonus"),
    ]

    GAME_TEXAS_HOLDEM = "texas-holdem"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name="poker_games")
    game_type = models.CharField(max_length=32, default=GAME_TEXAS_HOLDEM)

    # cards as [{"suit": ..., "rank": ...}, ...]
    player_hole = models.JSONField(default=list)
    dealer_hole = models.JSONField(default=list)
    community = models.JSONField(default=list)

    player_hand = models.JSONField(null=True, blank=True)
    dealer_hand = models.JSONField(null=True, blank=True)
    player_hand_rank = models.PositiveSmallIntegerField(null=True, blank=True)
    player_hand_name = models.CharField(max_length=32, blank=True, default="")

    bet_amount = models.DecimalField(max_digits=AMOUNT_MAX_DIGITS, decimal_places=AMOUNT_PLACES)
    win_amount = models.DecimalField(max_digits=AMOUNT_MAX_DIGITS, decimal_places=AMOUNT_PLACES, default=0)
    profit = models.DecimalField(max_digits=AMOUNT_MAX_DIGITS, decimal_places=AMOUNT_PLACES, default=0)

    winner = models.CharField(max_length=8, choices=WINNER_CHOICES, blank=True, default="")
    dealer_qualified = models.BooleanField(default=False)
    payout_type = models.CharField(max_length=16, choices=PAYOUT_TYPE_CHOICES, blank=True, default="")

    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_PENDING)
    created_at = models.DateTimeField(auto_now_add=True)
    completed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["user", "-created_at"], name="poker_game_user_created"),
            models.Index(fields=["status", "created_at"], name="poker_game_status_created"),
        ]

    def __str__(self):
        return f"PokerGame({self.id}) winner={self.winner or '-'} status={self.status}"
