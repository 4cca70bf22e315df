import uuid

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="PokerGame",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("game_type", models.CharField(default="texas-holdem", max_length=32)),
                ("player_hole", models.JSONField(default=list)),
                ("dealer_hole", models.JSONField(default=list)),
                ("community", models.JSONField(default=list)),
                ("player_hand", models.JSONField(blank=True, null=True)),
                ("dealer_hand", models.JSONField(blank=True, null=True)),
                ("player_hand_rank", models.PositiveSmallIntegerField(blank=True, null=True)),
                ("player_hand_name", models.CharField(blank=True, default="", max_length=32)),
                ("bet_amount", models.DecimalField(decimal_places=9, max_digits=28)),
                ("win_amount", models.DecimalField(decimal_places=9, default=0, max_digits=28)),
                ("profit", models.DecimalField(decimal_places=9, default=0, max_digits=28)),
                (
                    "winner",
                    models.CharField(
                        blank=True,
                        choices=[("player", "Player"), ("dealer", "Dealer"), ("tie", "Tie")],
                        default="",
                        max_length=8,
                    ),
                ),
                ("dealer_qualified", models.BooleanField(default=False)),
                (
                    "payout_type",
                    models.CharField(
                        blank=True,
                        choices=[
                            ("loss", "Loss"),
                            ("push", "Push"),
                            ("ante-only", "Ante only"),
                            ("ante-plus-bonus", "Ante plus bonus"),
                        ],
                        default="",
                        max_length=16,
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[("pending", "Pending"), ("completed", "Completed")],
                        default="pending",
                        max_length=16,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("completed_at", models.DateTimeField(blank=True, null=True)),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="poker_games",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["user", "-created_at"], name="poker_game_user_created"),
                    models.Index(fields=["status", "created_at"], name="poker_game_status_created"),
                ],
            },
        ),
    ]
