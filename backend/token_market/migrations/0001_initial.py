import uuid

from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="PriceSample",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("price", models.DecimalField(decimal_places=18, max_digits=36)),
                ("reserves", models.DecimalField(decimal_places=9, max_digits=28)),
                ("volume_24h", models.DecimalField(decimal_places=9, default=0, max_digits=28)),
                ("created_at", models.DateTimeField(db_index=True)),
            ],
            options={
                "ordering": ["created_at"],
            },
        ),
        migrations.CreateModel(
            name="TokenTrade",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("side", models.CharField(choices=[("buy", "Buy"), ("sell", "Sell")], max_length=4)),
                ("wallet_address", models.CharField(db_index=True, max_length=44)),
                ("token_amount", models.DecimalField(decimal_places=9, max_digits=28)),
                ("sol_amount", models.DecimalField(decimal_places=9, max_digits=28)),
                ("price_per_token", models.DecimalField(decimal_places=18, max_digits=36)),
                ("tx_signature", models.CharField(blank=True, max_length=128, null=True, unique=True)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
            ],
            options={
                "ordering": ["-created_at"],
            },
        ),
    ]
