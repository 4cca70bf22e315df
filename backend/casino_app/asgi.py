import os
import django
from channels.routing import ProtocolTypeRouter, URLRouter
from django.core.asgi import get_asgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "casino_app.settings")
django.setup()

# Import websocket routes
import token_market.routing

application = ProtocolTypeRouter({
    "http": get_asgi_application(),

    "websocket": URLRouter(
        token_market.routing.websocket_urlpatterns
    ),
})
