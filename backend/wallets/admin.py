# wallets/admin.py
from django.contrib import admin
from .models import Transaction, Wallet


@admin.register(Wallet)
class WalletAdmin(admin.ModelAdmin):
    list_display = ("user", "balance", "locked_balance", "updated_at")
    search_fields = ("user__username", "user__wallet_address")
    readonly_fields = ("user", "balance", "locked_balance", "updated_at")


@admin.register(Transaction)
class TransactionAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "tx_type", "amount", "balance_before", "balance_after", "created_at")
    list_filter = ("tx_type",)
    search_fields = ("id", "user__username", "user__wallet_address", "transaction_signature")
    readonly_fields = [f.name for f in Transaction._meta.fields]

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
