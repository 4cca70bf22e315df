from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from wallets.services import get_balance
from wallets.wallet import BalanceSerializer
from .serializers import RegisterSerializer, UserSerializer
from .services import create_user, get_or_create_user, get_user_by_wallet


@api_view(["POST"])
def register_view(request):
    """
    With a username: explicit registration (409 on duplicates).
    Without: get-or-create by wallet address.
    """
    serializer = RegisterSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    wallet_address = serializer.validated_data["wallet_address"]
    username = serializer.validated_data.get("username")

    if username:
        user = create_user(wallet_address, username)
        code = status.HTTP_201_CREATED
    else:
        user = get_or_create_user(wallet_address)
        code = status.HTTP_200_OK

    return Response({"success": True, "data": UserSerializer(user).data}, status=code)


@api_view(["GET"])
def profile_view(request, wallet_address):
    user = get_user_by_wallet(wallet_address)
    data = UserSerializer(user).data
    data["wallet"] = BalanceSerializer(get_balance(user.id)).data
    return Response({"success": True, "data": data})
