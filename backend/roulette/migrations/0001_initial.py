import uuid

import django.core.validators
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
            name="RouletteGame",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                (
                    "result",
                    models.PositiveSmallIntegerField(
                        blank=True,
                        null=True,
                        validators=[
                            django.core.validators.MinValueValidator(0),
                            django.core.validators.MaxValueValidator(36),
                        ],
                    ),
                ),
                ("total_bet_amount", models.DecimalField(decimal_places=9, max_digits=28)),
                ("total_win_amount", models.DecimalField(decimal_places=9, default=0, max_digits=28)),
                ("profit", models.DecimalField(decimal_places=9, default=0, max_digits=28)),
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
                        related_name="roulette_games",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["user", "-created_at"], name="roulette_game_user_created"),
                    models.Index(fields=["status", "created_at"], name="roulette_game_status_created"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Bet",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("bet_type", models.CharField(max_length=16)),
                ("numbers", models.JSONField(default=list)),
                ("amount", models.DecimalField(decimal_places=9, max_digits=28)),
                ("payout", models.PositiveSmallIntegerField()),
                (
                    "result",
                    models.CharField(
                        blank=True, choices=[("win", "Win"), ("loss", "Loss")], max_length=8, null=True
                    ),
                ),
                ("win_amount", models.DecimalField(decimal_places=9, default=0, max_digits=28)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "game",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="bets",
                        to="roulette.roulettegame",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="roulette_bets",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["created_at"],
            },
        ),
    ]
