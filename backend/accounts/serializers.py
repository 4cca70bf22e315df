from rest_framework import serializers
from django.contrib.auth import get_user_model

User = get_user_model()


class UserSerializer(serializers.ModelSerializer):
    created_at = serializers.DateTimeField(source="date_joined", read_only=True)

    class Meta:
        model = User
        fields = (
            "id",
            "wallet_address",
            "username",
            "created_at",
            "last_login_at",
        )
        read_only_fields = fields


class RegisterSerializer(serializers.Serializer):
    wallet_address = serializers.CharField(max_length=44)
    username = serializers.CharField(max_length=20, required=False, allow_blank=False)
