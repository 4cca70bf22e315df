from decimal import Decimal
from unittest import mock

import pytest

from core.errors import (
    ConflictError,
    InsufficientFundsError,
    InvalidAmountError,
    LedgerInvariantError,
    WalletNotFoundError,
)
from wallets import services
from wallets.models import Transaction, Wallet


pytestmark = pytest.mark.django_db


def _wallet(user):
    return Wallet.objects.get(user=user)


def test_deposit_credits_and_records_one_row(user):
    tx = services.deposit(user.id, "2.5", "sig-deposit-1")

    assert tx.tx_type == Transaction.DEPOSIT
    assert tx.amount == Decimal("2.5")
    assert tx.balance_before == Decimal("0")
    assert tx.balance_after == Decimal("2.5")
    assert tx.transaction_signature == "sig-deposit-1"
    assert _wallet(user).balance == Decimal("2.5")


def test_duplicate_deposit_signature_is_rejected(user):
    services.deposit(user.id, "1", "sig-dup")
    with pytest.raises(ConflictError) as exc:
        services.deposit(user.id, "1", "sig-dup")

    assert exc.value.code == "DUPLICATE_SIGNATURE"
    assert _wallet(user).balance == Decimal("1")
    assert Transaction.objects.filter(user=user).count() == 1


def test_deposit_needs_signature(user):
    with pytest.raises(InvalidAmountError):
        services.deposit(user.id, "1", "")


@pytest.mark.parametrize("amount", ["0", "-1", 1.5, "abc"])
def test_credit_rejects_bad_amounts(user, amount):
    with pytest.raises(InvalidAmountError):
        services.credit(user.id, amount)
    assert Transaction.objects.count() == 0


def test_credit_refuses_debit_types(user):
    with pytest.raises(ValueError):
        services.credit(user.id, "1", tx_type=Transaction.LOSS)


def test_debit_below_zero_is_an_invariant_violation(funded_user, caplog):
    with pytest.raises(LedgerInvariantError):
        services.debit(funded_user.id, "11")
    assert _wallet(funded_user).balance == Decimal("10")
    assert any(r.levelname == "CRITICAL" for r in caplog.records)


def test_lock_and_unlock(funded_user):
    services.lock_funds(funded_user.id, "4")
    wallet = _wallet(funded_user)
    assert wallet.locked_balance == Decimal("4")
    assert wallet.available_balance == Decimal("6")

    services.unlock_funds(funded_user.id, "4")
    assert _wallet(funded_user).locked_balance == Decimal("0")
    # lock/unlock never touch the transaction log
    assert Transaction.objects.filter(user=funded_user).count() == 1


def test_lock_beyond_available_is_insufficient_funds(funded_user):
    services.lock_funds(funded_user.id, "6")
    with pytest.raises(InsufficientFundsError) as exc:
        services.lock_funds(funded_user.id, "6")

    assert exc.value.available == Decimal("4")
    assert exc.value.status_code == 402
    assert _wallet(funded_user).locked_balance == Decimal("6")


def test_unlock_more_than_locked_is_not_clamped(funded_user, caplog):
    services.lock_funds(funded_user.id, "1")
    with pytest.raises(LedgerInvariantError):
        services.unlock_funds(funded_user.id, "2")

    assert _wallet(funded_user).locked_balance == Decimal("1")
    assert any(r.levelname == "CRITICAL" for r in caplog.records)


def test_debit_cannot_eat_into_locked_funds(funded_user):
    services.lock_funds(funded_user.id, "8")
    with pytest.raises(LedgerInvariantError):
        services.debit(funded_user.id, "5")


def test_withdraw_records_pending_intent_to_own_wallet(funded_user):
    tx = services.withdraw(funded_user.id, "3")

    assert tx.tx_type == Transaction.WITHDRAW
    assert tx.meta == {"destination_address": funded_user.wallet_address, "status": "pending_chain"}
    assert tx.balance_after == Decimal("7")
    assert _wallet(funded_user).balance == Decimal("7")


def test_withdraw_respects_locked_funds(funded_user):
    services.lock_funds(funded_user.id, "8")
    with pytest.raises(InsufficientFundsError):
        services.withdraw(funded_user.id, "3")


def test_missing_wallet(db):
    with pytest.raises(WalletNotFoundError):
        services.get_wallet("00000000-0000-0000-0000-000000000000")
    with pytest.raises(WalletNotFoundError):
        services.lock_funds("garbage", "1")


def test_get_balance(funded_user):
    services.lock_funds(funded_user.id, "2.5")
    balance = services.get_balance(funded_user.id)

    assert balance.balance == Decimal("10")
    assert balance.locked_balance == Decimal("2.5")
    assert balance.available_balance == Decimal("7.5")


def test_get_transactions_newest_first_with_paging(user, fund):
    for amount in ("1", "2", "3"):
        fund(user, amount)

    txs = services.get_transactions(user.id, limit=2)
    assert len(txs) == 2
    assert txs[0].created_at >= txs[1].created_at

    rest = services.get_transactions(user.id, limit=2, offset=2)
    assert len(rest) == 1


def test_settle_stake_debits_stake_and_credits_return(funded_user):
    services.lock_funds(funded_user.id, "2")
    loss_tx, win_tx = services.settle_stake(funded_user.id, Decimal("2"), Decimal("4"))

    assert loss_tx.amount == Decimal("2")
    assert win_tx.amount == Decimal("4")
    wallet = _wallet(funded_user)
    assert wallet.balance == Decimal("12")
    assert wallet.locked_balance == Decimal("0")


def test_settle_stake_without_return_writes_no_win(funded_user):
    services.lock_funds(funded_user.id, "2")
    _, win_tx = services.settle_stake(funded_user.id, Decimal("2"), Decimal("0"))

    assert win_tx is None
    assert _wallet(funded_user).balance == Decimal("8")


def test_reconcile_matches_log(funded_user):
    services.withdraw(funded_user.id, "1")
    services.lock_funds(funded_user.id, "1")
    services.settle_stake(funded_user.id, Decimal("1"), Decimal("3"))

    result = services.reconcile(funded_user.id)
    assert result.ok
    assert result.computed_balance == Decimal("11")


def test_reconcile_reports_drift(funded_user, caplog):
    Wallet.objects.filter(user=funded_user).update(balance=Decimal("99"))

    result = services.reconcile(funded_user.id)
    assert not result.ok
    assert result.drift == Decimal("89")
    assert any(r.levelname == "CRITICAL" for r in caplog.records)


def test_balance_before_after_chain(user, fund):
    fund(user, "1")
    fund(user, "2")
    txs = sorted(Transaction.objects.filter(user=user), key=lambda t: t.balance_before)

    assert txs[0].balance_after == txs[1].balance_before


def test_credit_integrity_error_maps_to_conflict(user):
    services.deposit(user.id, "1", "sig-race")
    with mock.patch.object(Transaction.objects, "filter") as filt:
        filt.return_value.exists.return_value = False
        with pytest.raises(ConflictError):
            services.credit(user.id, "1", proof="sig-race")
