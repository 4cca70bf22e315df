from django.urls import path
from .consumers import PriceTickerConsumer

websocket_urlpatterns = [
    path("ws/token/price/", PriceTickerConsumer.as_asgi()),
]
