# accounts/services.py
import logging

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from django.utils import timezone

from core.errors import CasinoError, ConflictError, UserNotFoundError
from .models import USERNAME_RE, WALLET_ADDRESS_RE

logger = logging.getLogger(__name__)

User = get_user_model()

DERIVED_PREFIX_LENGTHS = (8, 12, 16, 44)


class InvalidIdentityError(CasinoError):
    code = "INVALID_IDENTITY"


def validate_wallet_address(wallet_address: str) -> str:
    if not isinstance(wallet_address, str) or not WALLET_ADDRESS_RE.match(wallet_address):
        raise InvalidIdentityError("Wallet address must be 32-44 base58 characters")
    return wallet_address


def validate_username(username: str) -> str:
    if not isinstance(username, str) or not USERNAME_RE.match(username):
        raise InvalidIdentityError("Username must be 3-20 letters, digits or underscores")
    return username


def _derive_username(wallet_address: str) -> str:
    for length in DERIVED_PREFIX_LENGTHS:
        candidate = f"player_{wallet_address[:length]}"
        if not User.objects.filter(username=candidate).exists():
            return candidate
    raise ConflictError("Could not derive a free username", code="USERNAME_EXISTS")


def _insert_user(wallet_address: str, username: str):
    user = User(wallet_address=wallet_address, username=username)
    user.set_unusable_password()
    user.save()  # post_save creates the wallet
    return user


@transaction.atomic
def create_user(wallet_address: str, username: str):
    """
    Explicit registration. Duplicate wallet or username is a conflict,
    never a merge.
    """
    validate_wallet_address(wallet_address)
    validate_username(username)

    if User.objects.filter(wallet_address=wallet_address).exists():
        raise ConflictError("Wallet address already registered", code="WALLET_EXISTS")
    if User.objects.filter(username=username).exists():
        raise ConflictError("Username already taken", code="USERNAME_EXISTS")

    try:
        with transaction.atomic():
            user = _insert_user(wallet_address, username)
    except IntegrityError:
        raise ConflictError("Wallet address or username already registered")

    logger.info(f"Registered user {user.username} for wallet {wallet_address}")
    return user


def get_or_create_user(wallet_address: str, username: str = None):
    """
    Identity for a wallet: look it up, or create user + zero wallet on
    first contact. Safe against two first requests from the same wallet.
    """
    validate_wallet_address(wallet_address)

    user = User.objects.filter(wallet_address=wallet_address).first()
    if user is not None:
        User.objects.filter(pk=user.pk).update(last_login_at=timezone.now())
        return user

    if username is not None:
        try:
            return create_user(wallet_address, username)
        except ConflictError:
            user = User.objects.filter(wallet_address=wallet_address).first()
            if user is None:
                raise
            return user

    try:
        with transaction.atomic():
            user = _insert_user(wallet_address, _derive_username(wallet_address))
    except IntegrityError:
        # lost the race to a concurrent first request
        user = User.objects.filter(wallet_address=wallet_address).first()
        if user is None:
            raise
        return user

    logger.info(f"Provisioned user {user.username} for wallet {wallet_address}")
    return user


def get_user_by_wallet(wallet_address: str):
    try:
        return User.objects.get(wallet_address=wallet_address)
    except User.DoesNotExist:
        raise UserNotFoundError(wallet_address)


def get_user_by_id(user_id):
    try:
        return User.objects.get(pk=user_id)
    except (User.DoesNotExist, ValidationError, ValueError):
        raise UserNotFoundError(user_id)


def get_user_by_username(username: str):
    try:
        return User.objects.get(username=username)
    except User.DoesNotExist:
        raise UserNotFoundError(username)
