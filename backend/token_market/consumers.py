# token_market/consumers.py
import logging

from channels.db import database_sync_to_async
from channels.generic.websocket import AsyncJsonWebsocketConsumer

from .serializers import plain
from .services import TokenMarket

logger = logging.getLogger(__name__)

PRICE_GROUP = "token_price"


class PriceTickerConsumer(AsyncJsonWebsocketConsumer):
    """Read-only price feed: a snapshot on connect, then sampler pushes."""

    async def connect(self):
        await self.channel_layer.group_add(PRICE_GROUP, self.channel_name)
        await self.accept()

        stats = await self._get_stats()
        await self.send_json({"event": "connected", "data": stats})

    async def disconnect(self, close_code):
        await self.channel_layer.group_discard(PRICE_GROUP, self.channel_name)

    async def receive_json(self, content, **kwargs):
        if content.get("event") == "refresh":
            await self.send_json({"event": "price_update", "data": await self._get_stats()})

    @database_sync_to_async
    def _get_stats(self):
        return plain(TokenMarket.from_settings().get_market_stats())

    # Group handlers from the price sampler
    async def price_update(self, event):
        await self.send_json({"event": "price_update", "data": event["data"]})
