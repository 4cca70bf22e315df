# accounts/models.py
import re
import uuid

from django.contrib.auth.models import AbstractUser
from django.core.validators import RegexValidator
from django.db import models
from django.utils import timezone

# Solana-style base58 public key
WALLET_ADDRESS_RE = re.compile(r"^[1-9A-HJ-NP-Za-km-z]{32,44}$")
USERNAME_RE = re.compile(r"^[a-zA-Z0-9_]{3,20}$")

validate_wallet_address = RegexValidator(
    WALLET_ADDRESS_RE, "Wallet address must be 32-44 base58 characters"
)


class User(AbstractUser):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    wallet_address = models.CharField(
        max_length=44,
        unique=True,
        db_index=True,
        validators=[validate_wallet_address],
    )

    last_login_at = models.DateTimeField(default=timezone.now)

    REQUIRED_FIELDS = ["wallet_address"]

    def __str__(self):
        return f"{self.username} ({self.wallet_address})"
