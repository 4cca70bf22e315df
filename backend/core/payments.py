# core/payments.py
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from .errors import PaymentRequiredError


@dataclass(frozen=True)
class VerifiedPayment:
    """
    A deposit the payment middleware has already verified on chain.
    The middleware attaches it to the request as ``request.payment``;
    nothing here re-checks signatures.
    """

    recipient_wallet_address: str
    verified_amount: Decimal
    transaction_signature: str


def get_verified_payment(request) -> VerifiedPayment:
    payment = getattr(request, "payment", None)
    if payment is None:
        raise PaymentRequiredError("A verified payment is required for this endpoint")
    return payment
