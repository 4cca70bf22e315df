import pytest
from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from channels.testing import WebsocketCommunicator

from token_market.consumers import PRICE_GROUP, PriceTickerConsumer


@pytest.mark.django_db(transaction=True)
def test_price_ticker_feed():
    async def scenario():
        communicator = WebsocketCommunicator(PriceTickerConsumer.as_asgi(), "/ws/token/price/")
        connected, _ = await communicator.connect()
        assert connected

        snapshot = await communicator.receive_json_from()
        assert snapshot["event"] == "connected"
        assert snapshot["data"]["casino_reserves"] == "1.000000000"

        await get_channel_layer().group_send(PRICE_GROUP, {"type": "price.update", "data": {"price": "0.1"}})
        pushed = await communicator.receive_json_from()
        assert pushed == {"event": "price_update", "data": {"price": "0.1"}}

        await communicator.send_json_to({"event": "refresh"})
        refreshed = await communicator.receive_json_from()
        assert refreshed["event"] == "price_update"
        assert "market_cap" in refreshed["data"]

        await communicator.send_json_to({"event": "unknown"})
        assert await communicator.receive_nothing()

        await communicator.disconnect()

    async_to_sync(scenario)()
