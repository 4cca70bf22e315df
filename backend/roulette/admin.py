# roulette/admin.py
from django.contrib import admin
from .models import Bet, RouletteGame


class BetInline(admin.TabularInline):
    model = Bet
    extra = 0
    readonly_fields = ("bet_type", "numbers", "amount", "payout", "result", "win_amount")
    can_delete = False


@admin.register(RouletteGame)
class RouletteGameAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "result", "total_bet_amount", "total_win_amount", "profit", "status", "created_at")
    list_filter = ("status",)
    search_fields = ("id", "user__username", "user__wallet_address")
    readonly_fields = ("user", "result", "total_bet_amount", "total_win_amount", "profit", "status", "created_at", "completed_at")
    inlines = [BetInline]


@admin.register(Bet)
class BetAdmin(admin.ModelAdmin):
    list_display = ("game", "user", "bet_type", "amount", "payout", "result", "win_amount")
    list_filter = ("bet_type", "result")
