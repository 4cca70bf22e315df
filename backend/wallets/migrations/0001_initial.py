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
            name="Wallet",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("balance", models.DecimalField(decimal_places=9, default=0, max_digits=28)),
                ("locked_balance", models.DecimalField(decimal_places=9, default=0, max_digits=28)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "user",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="wallet",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
        ),
        migrations.CreateModel(
            name="Transaction",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                (
                    "tx_type",
                    models.CharField(
                        choices=[("deposit", "Deposit"), ("withdraw", "Withdraw"), ("win", "Win"), ("loss", "Loss")],
                        max_length=8,
                    ),
                ),
                ("amount", models.DecimalField(decimal_places=9, max_digits=28)),
                ("balance_before", models.DecimalField(decimal_places=9, max_digits=28)),
                ("balance_after", models.DecimalField(decimal_places=9, max_digits=28)),
                ("transaction_signature", models.CharField(blank=True, max_length=128, null=True, unique=True)),
                ("meta", models.JSONField(blank=True, default=dict)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="transactions",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["user", "created_at"], name="wallets_tra_user_id_6c1f4e_idx"),
                    models.Index(fields=["tx_type", "created_at"], name="wallets_tra_tx_type_3a9b2d_idx"),
                ],
            },
        ),
    ]
