import logging

from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from accounts.services import get_or_create_user, get_user_by_wallet
from core.payments import get_verified_payment
from core.serializers import page_params
from . import services
from .wallet import BalanceSerializer, TransactionSerializer, WithdrawalSerializer

logger = logging.getLogger(__name__)


@api_view(["GET"])
def balance_view(request, wallet_address):
    user = get_user_by_wallet(wallet_address)
    balance = services.get_balance(user.id)
    data = BalanceSerializer(balance).data
    data["wallet_address"] = wallet_address
    return Response({"success": True, "data": data})


@api_view(["POST"])
def deposit_view(request):
    """Credit a payment the middleware verified; first deposit provisions the user."""
    payment = get_verified_payment(request)
    user = get_or_create_user(payment.recipient_wallet_address)

    tx = services.deposit(user.id, payment.verified_amount, payment.transaction_signature)

    return Response(
        {
            "success": True,
            "data": {
                "transaction": TransactionSerializer(tx).data,
                "wallet": BalanceSerializer(services.get_balance(user.id)).data,
            },
        },
        status=status.HTTP_201_CREATED,
    )


@api_view(["POST"])
def withdraw_view(request):
    serializer = WithdrawalSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    user = get_user_by_wallet(data["wallet_address"])
    tx = services.withdraw(user.id, data["amount"])

    return Response(
        {
            "success": True,
            "data": {
                "transaction": TransactionSerializer(tx).data,
                "wallet": BalanceSerializer(services.get_balance(user.id)).data,
            },
        },
        status=status.HTTP_201_CREATED,
    )


@api_view(["GET"])
def transactions_view(request, wallet_address):
    limit, offset = page_params(request)
    user = get_user_by_wallet(wallet_address)
    txs = services.get_transactions(user.id, limit=limit, offset=offset)
    return Response(
        {
            "success": True,
            "data": {
                "transactions": TransactionSerializer(txs, many=True).data,
                "limit": limit,
                "offset": offset,
            },
        }
    )
