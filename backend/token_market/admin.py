# token_market/admin.py
from django.contrib import admin
from .models import PriceSample, TokenTrade


@admin.register(PriceSample)
class PriceSampleAdmin(admin.ModelAdmin):
    list_display = ("created_at", "price", "reserves", "volume_24h")
    date_hierarchy = "created_at"


@admin.register(TokenTrade)
class TokenTradeAdmin(admin.ModelAdmin):
    list_display = ("created_at", "side", "wallet_address", "token_amount", "sol_amount", "price_per_token")
    list_filter = ("side",)
    search_fields = ("wallet_address", "tx_signature")
