# poker/admin.py
from django.contrib import admin
from .models import PokerGame


@admin.register(PokerGame)
class PokerGameAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "player_hand_name", "winner", "payout_type", "bet_amount", "win_amount", "profit", "status", "created_at")
    list_filter = ("status", "winner", "payout_type", "dealer_qualified")
    search_fields = ("id", "user__username", "user__wallet_address")
    readonly_fields = [f.name for f in PokerGame._meta.fields]
