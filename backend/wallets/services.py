# wallets/services.py
import logging
from dataclasses import dataclass
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from django.db.models import Sum

from core.errors import (
    ConflictError,
    InsufficientFundsError,
    InvalidAmountError,
    LedgerInvariantError,
    WalletNotFoundError,
)
from core.money import D0, to_positive_amount
from .models import Transaction, Wallet

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100


@dataclass(frozen=True)
class WalletBalance:
    balance: Decimal
    locked_balance: Decimal
    available_balance: Decimal


@dataclass(frozen=True)
class Reconciliation:
    user_id: object
    stored_balance: Decimal
    computed_balance: Decimal

    @property
    def ok(self) -> bool:
        return self.stored_balance == self.computed_balance

    @property
    def drift(self) -> Decimal:
        return self.stored_balance - self.computed_balance


# ======================================================
# INTERNAL
# ======================================================
def _get_wallet_for_update(user_id) -> Wallet:
    try:
        return Wallet.objects.select_for_update().get(user_id=user_id)
    except (Wallet.DoesNotExist, ValidationError, ValueError):
        raise WalletNotFoundError(user_id)


def _invariant_broken(wallet: Wallet, message: str):
    logger.critical(
        f"Ledger invariant violated for user {wallet.user_id}: {message} "
        f"(balance={wallet.balance}, locked={wallet.locked_balance})"
    )
    raise LedgerInvariantError(message)


def _append(wallet: Wallet, tx_type: str, amount: Decimal, after: Decimal, signature=None, meta=None):
    before = wallet.balance
    wallet.balance = after
    wallet.save(update_fields=["balance", "updated_at"])

    return Transaction.objects.create(
        user_id=wallet.user_id,
        tx_type=tx_type,
        amount=amount,
        balance_before=before,
        balance_after=after,
        transaction_signature=signature,
        meta=meta or {},
    )


# ======================================================
# MUTATIONS
# ======================================================
@transaction.atomic
def credit(user_id, amount, proof: str = None, tx_type: str = Transaction.DEPOSIT, meta: dict = None):
    """
    Increase balance and append one deposit/win row.
    A proof (transaction signature) can only ever be credited once.
    """
    if tx_type not in Transaction.CREDIT_TYPES:
        raise ValueError(f"credit cannot record a {tx_type} transaction")
    amount = to_positive_amount(amount)

    wallet = _get_wallet_for_update(user_id)

    if proof and Transaction.objects.filter(transaction_signature=proof).exists():
        raise ConflictError("Transaction signature already used", code="DUPLICATE_SIGNATURE")

    try:
        with transaction.atomic():
            return _append(wallet, tx_type, amount, wallet.balance + amount, signature=proof, meta=meta)
    except IntegrityError:
        raise ConflictError("Transaction signature already used", code="DUPLICATE_SIGNATURE")


@transaction.atomic
def debit(user_id, amount, meta: dict = None, tx_type: str = Transaction.LOSS):
    """
    Decrease balance and append one loss/withdraw row.
    Callers check availability first (lock or explicit check).
    """
    if tx_type not in Transaction.DEBIT_TYPES:
        raise ValueError(f"debit cannot record a {tx_type} transaction")
    amount = to_positive_amount(amount)

    wallet = _get_wallet_for_update(user_id)
    after = wallet.balance - amount

    if after < D0:
        _invariant_broken(wallet, f"debit of {amount} would make balance negative")
    if after < wallet.locked_balance:
        _invariant_broken(wallet, f"debit of {amount} would leave balance below locked funds")

    return _append(wallet, tx_type, amount, after, meta=meta)


@transaction.atomic
def lock_funds(user_id, amount) -> Wallet:
    amount = to_positive_amount(amount)
    wallet = _get_wallet_for_update(user_id)

    available = wallet.available_balance
    if available < amount:
        raise InsufficientFundsError(amount, available)

    wallet.locked_balance = wallet.locked_balance + amount
    wallet.save(update_fields=["locked_balance", "updated_at"])
    return wallet


@transaction.atomic
def unlock_funds(user_id, amount) -> Wallet:
    amount = to_positive_amount(amount)
    wallet = _get_wallet_for_update(user_id)

    if amount > wallet.locked_balance:
        _invariant_broken(wallet, f"unlock of {amount} exceeds locked funds")

    wallet.locked_balance = wallet.locked_balance - amount
    wallet.save(update_fields=["locked_balance", "updated_at"])
    return wallet


@transaction.atomic
def deposit(user_id, amount, transaction_signature: str):
    """Credit a deposit the payment layer has verified on chain."""
    if not transaction_signature:
        raise InvalidAmountError("A deposit needs its transaction signature")

    tx = credit(
        user_id,
        amount,
        proof=transaction_signature,
        tx_type=Transaction.DEPOSIT,
        meta={"source": "verified_payment"},
    )
    logger.info(f"Deposit {tx.amount} SOL for user {user_id} ({transaction_signature})")
    return tx


@transaction.atomic
def withdraw(user_id, amount):
    """
    Record a withdrawal intent back to the player's own wallet address.
    The balance drops now; the on-chain transfer is done elsewhere and
    tracked through meta["status"].
    """
    amount = to_positive_amount(amount)

    wallet = _get_wallet_for_update(user_id)
    destination_address = wallet.user.wallet_address
    available = wallet.available_balance
    if available < amount:
        raise InsufficientFundsError(amount, available)

    tx = debit(
        user_id,
        amount,
        tx_type=Transaction.WITHDRAW,
        meta={"destination_address": destination_address, "status": "pending_chain"},
    )
    logger.info(f"Withdrawal {amount} SOL for user {user_id} to {destination_address}")
    return tx


# ======================================================
# READS
# ======================================================
def get_wallet(user_id) -> Wallet:
    try:
        return Wallet.objects.get(user_id=user_id)
    except (Wallet.DoesNotExist, ValidationError, ValueError):
        raise WalletNotFoundError(user_id)


def get_balance(user_id) -> WalletBalance:
    wallet = get_wallet(user_id)
    return WalletBalance(
        balance=wallet.balance,
        locked_balance=wallet.locked_balance,
        available_balance=wallet.available_balance,
    )


def get_transactions(user_id, limit: int = 50, offset: int = 0):
    limit = max(1, min(int(limit), MAX_PAGE_SIZE))
    offset = max(0, int(offset))
    qs = Transaction.objects.filter(user_id=user_id).order_by("-created_at")
    return list(qs[offset:offset + limit])


def totals_by_type(queryset=None) -> dict:
    """Sum of amounts per tx_type, every type present (zero if none)."""
    if queryset is None:
        queryset = Transaction.objects.all()
    totals = {tx_type: D0 for tx_type, _ in Transaction.TX_TYPE_CHOICES}
    for row in queryset.values("tx_type").annotate(total=Sum("amount")).order_by():
        totals[row["tx_type"]] = row["total"] or D0
    return totals


def reconcile(user_id) -> Reconciliation:
    wallet = get_wallet(user_id)
    t = totals_by_type(Transaction.objects.filter(user_id=user_id))
    computed = (
        t[Transaction.DEPOSIT] - t[Transaction.WITHDRAW] + t[Transaction.WIN] - t[Transaction.LOSS]
    )
    result = Reconciliation(user_id=user_id, stored_balance=wallet.balance, computed_balance=computed)
    if not result.ok:
        logger.critical(
            f"Ledger drift for user {user_id}: stored={result.stored_balance} computed={computed}"
        )
    return result


# ======================================================
# SETTLEMENT
# ======================================================
@transaction.atomic
def settle_stake(user_id, stake, returned, meta: dict = None):
    """
    Release a locked stake and book the result in one step:
    the full stake is always debited as a loss, anything returned
    (stake back plus winnings) is credited as a win.
    """
    stake = to_positive_amount(stake)
    unlock_funds(user_id, stake)
    loss_tx = debit(user_id, stake, meta=meta, tx_type=Transaction.LOSS)

    win_tx = None
    if returned > D0:
        win_tx = credit(user_id, returned, tx_type=Transaction.WIN, meta=meta)
    return loss_tx, win_tx
