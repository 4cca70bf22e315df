# accounts/admin.py
from django.contrib import admin
from .models import User


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ("username", "wallet_address", "date_joined", "last_login_at", "is_staff")
    search_fields = ("username", "wallet_address")
    readonly_fields = ("id", "wallet_address", "date_joined", "last_login_at")
    exclude = ("password",)
