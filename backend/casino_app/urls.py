from django.contrib import admin
from django.urls import path, include


urlpatterns = [
    path('admin/', admin.site.urls),

    # Identity
    path('api/accounts/', include('accounts.urls')),

    # Ledger
    path('api/wallet/', include('wallets.urls')),

    # Casino Games
    path('api/roulette/', include('roulette.urls')),
    path('api/poker/', include('poker.urls')),

    # Token market
    path('api/token/', include('token_market.urls')),
]
