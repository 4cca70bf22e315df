from django.apps import AppConfig


class TokenMarketConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "token_market"
