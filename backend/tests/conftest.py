from decimal import Decimal

import pytest
from django.core.cache import cache

from accounts.services import get_or_create_user
from wallets import services as wallet_services

BASE58 = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"

_signature_seq = iter(range(1, 10**9))


def make_address(seed: int) -> str:
    """Deterministic 44-char base58 address; distinct seeds give distinct first chars."""
    return "".join(BASE58[(seed * 7 + i * 13) % 58] for i in range(44))


def next_signature() -> str:
    return f"sig{next(_signature_seq):08d}"


@pytest.fixture(autouse=True)
def _test_settings(settings):
    settings.CHANNEL_LAYERS = {"default": {"BACKEND": "channels.layers.InMemoryChannelLayer"}}
    settings.BET_RATE_LIMIT = 1000
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def address():
    return make_address(1)


@pytest.fixture
def user(db, address):
    return get_or_create_user(address)


@pytest.fixture
def funded_user(user):
    wallet_services.deposit(user.id, Decimal("10"), next_signature())
    return user


@pytest.fixture
def fund():
    def _fund(user, amount):
        return wallet_services.deposit(user.id, Decimal(amount), next_signature())
    return _fund
