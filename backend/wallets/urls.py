from django.urls import path
from . import views

urlpatterns = [
    path("balance/<str:wallet_address>/", views.balance_view, name="wallet-balance"),
    path("deposit/", views.deposit_view, name="wallet-deposit"),
    path("withdraw/", views.withdraw_view, name="wallet-withdraw"),
    path("transactions/<str:wallet_address>/", views.transactions_view, name="wallet-transactions"),
]
